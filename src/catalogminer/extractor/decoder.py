"""
Single-pass decoder for backslash escape sequences in extracted string values.
"""

from __future__ import annotations

from typing import Dict, List, Optional

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_SIMPLE_ESCAPES: Dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
}


def _read_hex4(value: str, pos: int) -> Optional[int]:
    """Return the code unit of the 4 hex digits at ``pos``, or None if malformed."""
    digits = value[pos : pos + 4]
    if len(digits) != 4 or not all(ch in _HEX_DIGITS for ch in digits):
        return None
    return int(digits, 16)


def decode_escapes(value: str) -> str:
    """
    Decode JSON-style backslash escapes in ``value``.

    Recognised escapes are ``\\uXXXX``, ``\\n``, ``\\t``, ``\\r``, ``\\\\`` and
    ``\\"``. A malformed ``\\u`` sequence is copied through literally. Any other
    escaped character is emitted without its backslash. A high/low surrogate
    pair written as two ``\\u`` escapes is combined into one code point.

    Args:
        value: Raw string value as it appeared between the quotes

    Returns:
        The decoded string
    """
    if "\\" not in value:
        return value

    out: List[str] = []
    length = len(value)
    i = 0
    while i < length:
        ch = value[i]
        if ch != "\\" or i + 1 >= length:
            out.append(ch)
            i += 1
            continue

        nxt = value[i + 1]
        if nxt == "u":
            unit = _read_hex4(value, i + 2)
            if unit is None:
                out.append("\\u")
                i += 2
                continue
            i += 6
            if 0xD800 <= unit <= 0xDBFF and value.startswith("\\u", i):
                low = _read_hex4(value, i + 2)
                if low is not None and 0xDC00 <= low <= 0xDFFF:
                    unit = 0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            out.append(chr(unit))
            continue

        out.append(_SIMPLE_ESCAPES.get(nxt, nxt))
        i += 2

    return "".join(out)
