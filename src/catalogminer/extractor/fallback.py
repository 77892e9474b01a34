"""
Static fallback catalog returned when a response yields no usable records.
"""

from __future__ import annotations

from typing import List, Tuple

from .models import ExtractedRecord

_COVER_URL = "https://covers.openlibrary.org/b/isbn/{isbn}-M.jpg"

_FEATURED: Tuple[ExtractedRecord, ...] = (
    ExtractedRecord(
        external_id="sample1",
        title="The Great Gatsby",
        authors=("F. Scott Fitzgerald",),
        description="A classic American novel about the Jazz Age",
        publisher="Scribner",
        thumbnail_url=_COVER_URL.format(isbn="9780743273565"),
        average_rating=4.0,
    ),
    ExtractedRecord(
        external_id="sample2",
        title="To Kill a Mockingbird",
        authors=("Harper Lee",),
        description="A gripping tale of racial injustice and childhood innocence",
        publisher="J.B. Lippincott & Co.",
        thumbnail_url=_COVER_URL.format(isbn="9780060935467"),
        average_rating=4.3,
    ),
    ExtractedRecord(
        external_id="sample3",
        title="1984",
        authors=("George Orwell",),
        description="A dystopian social science fiction novel",
        publisher="Secker & Warburg",
        thumbnail_url=_COVER_URL.format(isbn="9780451524935"),
        average_rating=4.1,
    ),
)

# (title, author, cover isbn)
_CLASSICS: Tuple[Tuple[str, str, str], ...] = (
    ("Pride and Prejudice", "Jane Austen", "9780141439518"),
    ("The Catcher in the Rye", "J.D. Salinger", "9780316769174"),
    ("Lord of the Flies", "William Golding", "9780571056866"),
    ("The Lord of the Rings", "J.R.R. Tolkien", "9780547928227"),
    ("Harry Potter", "J.K. Rowling", "9780439708180"),
    ("The Hobbit", "J.R.R. Tolkien", "9780547928227"),
    ("Brave New World", "Aldous Huxley", "9780060850524"),
    ("Jane Eyre", "Charlotte Brontë", "9780141441146"),
    ("Wuthering Heights", "Emily Brontë", "9780141439556"),
)

FALLBACK_RECORDS: Tuple[ExtractedRecord, ...] = _FEATURED + tuple(
    ExtractedRecord(
        external_id=f"sample{index + 4}",
        title=title,
        authors=(author,),
        description="This is a classic literary work",
        publisher="Classic Publishers",
        thumbnail_url=_COVER_URL.format(isbn=isbn),
        average_rating=3.5 + (index % 3) * 0.5,
    )
    for index, (title, author, isbn) in enumerate(_CLASSICS)
)


def fallback_catalog() -> List[ExtractedRecord]:
    """Return the fixed fallback records, in display order, as a fresh list."""
    return list(FALLBACK_RECORDS)
