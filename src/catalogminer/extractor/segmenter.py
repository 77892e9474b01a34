"""
Marker-based record segmentation with string-aware brace balancing.

The raw response is never parsed as a whole. Instead the container array is
located, every occurrence of the record marker after it starts a candidate
span, and each span is closed at the brace that balances the record's
opening brace. Truncated records simply run to the next marker (or the end
of the text).
"""

from __future__ import annotations

import re
from functools import lru_cache
from itertools import islice
from typing import Iterator, List, Optional, Pattern

import structlog

from ..exceptions import ConfigurationError
from .models import RecordSpan
from .scanner import iter_value_positions

logger = structlog.get_logger(__name__)

_KEY_SEPARATOR = re.compile(r"\s*:\s*")
_WHITESPACE_RUN = re.compile(r"\s+")


@lru_cache(maxsize=64)
def marker_pattern(marker: str) -> Pattern[str]:
    """
    Compile ``marker`` into a whitespace-tolerant pattern.

    Whitespace runs in the marker, and the space around a ``:``, match any
    amount of whitespace (including none) in the response.
    """
    pieces = _KEY_SEPARATOR.split(marker.strip())
    escaped = [r"\s*".join(re.escape(word) for word in _WHITESPACE_RUN.split(piece)) for piece in pieces]
    return re.compile(r"\s*:\s*".join(escaped))


def find_container_start(text: str, container_key: str) -> Optional[int]:
    """Index just past the ``[`` that opens the container array, or None."""
    for pos in iter_value_positions(text, container_key):
        if text[pos] == "[":
            return pos + 1
    return None


def find_record_end(text: str, start: int, end: int) -> int:
    """
    Scan ``text[start:end]`` for the brace that closes the current record.

    The scan begins just inside the record's opening brace (nesting depth 1).
    Braces inside string literals are ignored, and inside a literal a
    backslash consumes the following character.

    Returns:
        Index just past the balancing ``}``, or ``end`` if the record never
        closes inside the window.
    """
    depth = 1
    in_string = False
    escaped = False
    for i in range(start, end):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return end


def _generate_spans(text: str, body_start: int, pattern: Pattern[str]) -> Iterator[RecordSpan]:
    matches = pattern.finditer(text, body_start)
    current = next(matches, None)
    while current is not None:
        following = next(matches, None)
        window_end = following.start() if following is not None else len(text)
        yield RecordSpan(current.start(), find_record_end(text, current.start(), window_end))
        current = following


def iter_record_spans(text: str, marker: str, container_key: str = "items") -> Iterator[RecordSpan]:
    """
    Lazily yield one span per marker occurrence inside the container array.

    Spans are produced in order of appearance and are only computed when
    pulled, so a consumer that stops early bounds the work done on
    pathological input.

    Raises:
        ConfigurationError: If ``marker`` or ``container_key`` is blank.
    """
    if not marker or not marker.strip():
        raise ConfigurationError("Record marker must be a non-empty string")
    if not container_key:
        raise ConfigurationError("Container key must be a non-empty string")

    body_start = find_container_start(text, container_key)
    if body_start is None:
        logger.debug("Container array not found", container_key=container_key)
        return iter(())
    return _generate_spans(text, body_start, marker_pattern(marker))


def segment_records(
    text: str,
    marker: str,
    container_key: str = "items",
    limit: Optional[int] = None,
) -> List[RecordSpan]:
    """Eager variant of :func:`iter_record_spans`, optionally stopping after ``limit`` spans."""
    return list(islice(iter_record_spans(text, marker, container_key), limit))
