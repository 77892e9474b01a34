"""
Bounded field scanners over a slice of a raw response.

Every function takes explicit ``start``/``end`` indices and never reads
outside ``text[start:end]``. Absence of a field is a normal outcome and is
reported as ``None`` (or an empty list), never as an exception. Returned
strings are raw: escape sequences are left for the decoder.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Tuple

_WHITESPACE = frozenset(" \t\r\n")
_NUMBER_CHARS = frozenset("+-0123456789.eE")
_NUMBER_START = frozenset("-0123456789")
_VALUE_TERMINATORS = frozenset(" \t\r\n,}]")


def _bounds(text: str, start: int, end: Optional[int]) -> Tuple[int, int]:
    stop = len(text) if end is None else min(end, len(text))
    return max(0, start), stop


def _skip_whitespace(text: str, pos: int, end: int) -> int:
    while pos < end and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def scan_string(text: str, pos: int, end: int) -> Optional[int]:
    """
    Find the closing quote of the string literal opening at ``pos``.

    A backslash consumes exactly the next character, so an escaped quote
    never terminates the literal.

    Returns:
        Index of the closing quote, or None if the literal is unterminated
        before ``end``.
    """
    i = pos + 1
    while i < end:
        ch = text[i]
        if ch == "\\":
            i += 2
        elif ch == '"':
            return i
        else:
            i += 1
    return None


def iter_value_positions(text: str, name: str, start: int = 0, end: Optional[int] = None) -> Iterator[int]:
    """Yield the index of the first value character after each ``"name":`` key."""
    start, end = _bounds(text, start, end)
    needle = f'"{name}"'
    pos = text.find(needle, start, end)
    while pos != -1:
        j = _skip_whitespace(text, pos + len(needle), end)
        if j < end and text[j] == ":":
            j = _skip_whitespace(text, j + 1, end)
            if j < end:
                yield j
        pos = text.find(needle, pos + 1, end)


def extract_string_field(text: str, name: str, start: int = 0, end: Optional[int] = None) -> Optional[str]:
    """
    Return the raw value of the first ``"name": "value"`` pair in the window.

    Occurrences whose value is not a string, or is an empty string, are
    skipped. A string cut off by the end of the window counts as absent.
    """
    start, end = _bounds(text, start, end)
    for pos in iter_value_positions(text, name, start, end):
        if text[pos] != '"':
            continue
        close = scan_string(text, pos, end)
        if close is None:
            return None
        if close > pos + 1:
            return text[pos + 1 : close]
    return None


def extract_number_field(text: str, name: str, start: int = 0, end: Optional[int] = None) -> Optional[float]:
    """
    Return the first bare numeric value of ``name`` in the window.

    A literal that does not parse, does not start with a digit or ``-``, is
    not finite, is negative, or runs into a non-delimiter character yields
    None.
    """
    start, end = _bounds(text, start, end)
    for pos in iter_value_positions(text, name, start, end):
        stop = pos
        while stop < end and text[stop] in _NUMBER_CHARS:
            stop += 1
        if stop == pos:
            continue
        if text[pos] not in _NUMBER_START:
            return None
        if stop < end and text[stop] not in _VALUE_TERMINATORS:
            return None
        try:
            number = float(text[pos:stop])
        except ValueError:
            return None
        if not math.isfinite(number) or number < 0:
            return None
        # -0 parses as -0.0
        return abs(number)
    return None


def _scan_array(text: str, open_pos: int, end: int) -> Tuple[List[str], int]:
    """Collect top-level string elements of the array opening at ``open_pos``.

    Returns the raw elements and the index just past the closing bracket
    (or ``end`` if the array is unterminated).
    """
    elements: List[str] = []
    depth = 0
    i = open_pos + 1
    while i < end:
        ch = text[i]
        if ch == '"':
            close = scan_string(text, i, end)
            if close is None:
                return elements, end
            if depth == 0 and close > i + 1:
                elements.append(text[i + 1 : close])
            i = close + 1
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            if depth == 0:
                # a stray '}' means the enclosing object closed around a broken array
                return elements, i + 1 if ch == "]" else i
            depth -= 1
        i += 1
    return elements, end


def find_array(text: str, name: str, start: int = 0, end: Optional[int] = None) -> Optional[Tuple[int, int]]:
    """Return the ``[start, end)`` bounds of the array value of ``name``, or None."""
    start, end = _bounds(text, start, end)
    for pos in iter_value_positions(text, name, start, end):
        if text[pos] == "[":
            _, stop = _scan_array(text, pos, end)
            return pos, stop
    return None


def extract_string_array(text: str, name: str, start: int = 0, end: Optional[int] = None) -> List[str]:
    """
    Return the raw string elements of the array value of ``name``.

    Strings nested inside objects or arrays within the array are skipped, as
    are numbers, booleans and empty strings. An absent field gives ``[]``;
    use :func:`find_array` to tell an absent field from an empty array.
    """
    start, end = _bounds(text, start, end)
    for pos in iter_value_positions(text, name, start, end):
        if text[pos] == "[":
            elements, _ = _scan_array(text, pos, end)
            return elements
    return []


def extract_first_array_value(text: str, name: str, start: int = 0, end: Optional[int] = None) -> Optional[str]:
    """Head of :func:`extract_string_array`, or None when there are no elements."""
    elements = extract_string_array(text, name, start, end)
    return elements[0] if elements else None
