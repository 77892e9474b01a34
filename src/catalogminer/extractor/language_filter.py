"""
Latin-letter ratio heuristic used as a cheap "is this English" check.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Tuple

DEFAULT_LATIN_THRESHOLD = 0.8


def count_letters(text: str) -> Tuple[int, int]:
    """Return ``(alphabetic, basic_latin)`` letter counts for ``text``."""
    alphabetic = 0
    latin = 0
    for ch in text:
        if ch.isalpha():
            alphabetic += 1
            if "a" <= ch <= "z" or "A" <= ch <= "Z":
                latin += 1
    return alphabetic, latin


class LanguageHeuristicFilter:
    """
    Accepts text whose letters are predominantly basic Latin (``a-z``, ``A-Z``).

    Text with no alphabetic characters at all (numbers, symbols) is accepted.
    The comparison is exact: with the default threshold, 4 Latin letters out
    of 5 pass and 79 out of 100 do not.
    """

    def __init__(self, threshold: float = DEFAULT_LATIN_THRESHOLD) -> None:
        if not 0.0 < threshold <= 1.0:
            raise ValueError("threshold must be in (0, 1]")
        self.threshold = threshold
        self._ratio = Fraction(str(threshold))

    def latin_ratio(self, text: str) -> Fraction:
        alphabetic, latin = count_letters(text)
        if alphabetic == 0:
            return Fraction(1)
        return Fraction(latin, alphabetic)

    def accepts(self, text: str) -> bool:
        return self.latin_ratio(text) >= self._ratio


def is_latin_text(text: str, threshold: float = DEFAULT_LATIN_THRESHOLD) -> bool:
    """Functional shorthand for ``LanguageHeuristicFilter(threshold).accepts(text)``."""
    return LanguageHeuristicFilter(threshold).accepts(text)
