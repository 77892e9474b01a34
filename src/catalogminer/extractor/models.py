"""
Data models for record extraction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(slots=True, frozen=True)
class RecordSpan:
    """Half-open ``[start, end)`` character range of one candidate record."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(slots=True)
class CandidateRecord:
    """A record under construction, populated field by field from one span."""

    external_id: Optional[str] = None
    title: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    description: Optional[str] = None
    publisher: Optional[str] = None
    thumbnail_url: Optional[str] = None
    average_rating: Optional[float] = None
    categories: List[str] = field(default_factory=list)

    def promote(self) -> ExtractedRecord:
        """Freeze the candidate into an ExtractedRecord.

        Raises:
            ValueError: If the candidate has no usable title.
        """
        if self.title is None:
            raise ValueError("Candidate has no title")
        return ExtractedRecord(
            title=self.title,
            external_id=self.external_id,
            authors=tuple(self.authors),
            description=self.description,
            publisher=self.publisher,
            thumbnail_url=self.thumbnail_url,
            average_rating=self.average_rating,
            categories=tuple(self.categories),
        )


@dataclass(slots=True, frozen=True)
class ExtractedRecord:
    """Fully decoded, validated record produced by the extraction pipeline."""

    title: str
    external_id: Optional[str] = None
    authors: Tuple[str, ...] = ()
    description: Optional[str] = None
    publisher: Optional[str] = None
    thumbnail_url: Optional[str] = None
    average_rating: Optional[float] = None
    categories: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate the record."""
        if not self.title or not self.title.strip():
            raise ValueError("Title must be a non-empty string")
        if self.average_rating is not None:
            if not math.isfinite(self.average_rating) or self.average_rating < 0:
                raise ValueError("Average rating must be a finite, non-negative number")
        if self.thumbnail_url is not None and self.thumbnail_url.lower().startswith("http://"):
            raise ValueError("Thumbnail URL must use a secure scheme")

    @property
    def primary_author(self) -> Optional[str]:
        return self.authors[0] if self.authors else None

    @property
    def authors_display(self) -> str:
        if not self.authors:
            return "Unknown Author"
        return ", ".join(self.authors)

    @property
    def categories_display(self) -> str:
        if not self.categories:
            return "General"
        return ", ".join(self.categories)

    @property
    def rating_display(self) -> str:
        if self.average_rating:
            return f"{self.average_rating:.1f}"
        return "No ratings yet"

    @property
    def has_valid_thumbnail(self) -> bool:
        return bool(self.thumbnail_url and self.thumbnail_url.strip()) and "no-image" not in (
            self.thumbnail_url or ""
        )

    def short_description(self, limit: int = 200) -> str:
        if not self.description:
            return "No description available."
        if len(self.description) <= limit:
            return self.description
        return self.description[:limit] + "..."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "external_id": self.external_id,
            "title": self.title,
            "authors": list(self.authors),
            "description": self.description,
            "publisher": self.publisher,
            "thumbnail_url": self.thumbnail_url,
            "average_rating": self.average_rating,
            "categories": list(self.categories),
        }
