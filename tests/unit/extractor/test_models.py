"""
Unit tests for extraction data models.
"""

import math

import pytest

from catalogminer.extractor.models import CandidateRecord, ExtractedRecord, RecordSpan


class TestRecordSpan:
    def test_slice_and_len(self):
        span = RecordSpan(2, 5)
        assert span.slice("abcdefg") == "cde"
        assert len(span) == 3

    def test_invalid_span(self):
        with pytest.raises(ValueError):
            RecordSpan(5, 2)
        with pytest.raises(ValueError):
            RecordSpan(-1, 2)


class TestExtractedRecord:
    """Test cases for ExtractedRecord validation and presentation."""

    def test_minimal_record(self):
        record = ExtractedRecord(title="Foo")
        assert record.authors == ()
        assert record.primary_author is None
        assert record.authors_display == "Unknown Author"
        assert record.categories_display == "General"
        assert record.rating_display == "No ratings yet"
        assert record.short_description() == "No description available."
        assert not record.has_valid_thumbnail

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValueError):
            ExtractedRecord(title=title)

    @pytest.mark.parametrize("rating", [-1.0, math.inf, math.nan])
    def test_bad_rating_rejected(self, rating):
        with pytest.raises(ValueError):
            ExtractedRecord(title="Foo", average_rating=rating)

    def test_insecure_thumbnail_rejected(self):
        with pytest.raises(ValueError):
            ExtractedRecord(title="Foo", thumbnail_url="HTTP://example.com/a.jpg")

    def test_display_properties(self):
        record = ExtractedRecord(
            title="Foo",
            authors=("Ann", "Bob"),
            categories=("Fiction", "Drama"),
            average_rating=4.5,
            thumbnail_url="https://example.com/a.jpg",
        )
        assert record.primary_author == "Ann"
        assert record.authors_display == "Ann, Bob"
        assert record.categories_display == "Fiction, Drama"
        assert record.rating_display == "4.5"
        assert record.has_valid_thumbnail

    def test_zero_rating_displays_as_unrated(self):
        assert ExtractedRecord(title="Foo", average_rating=0.0).rating_display == "No ratings yet"

    def test_placeholder_thumbnail_is_not_valid(self):
        record = ExtractedRecord(title="Foo", thumbnail_url="https://example.com/no-image.png")
        assert not record.has_valid_thumbnail

    def test_short_description(self):
        record = ExtractedRecord(title="Foo", description="x" * 250)
        assert record.short_description() == "x" * 200 + "..."
        assert record.short_description(limit=300) == "x" * 250

    def test_is_frozen(self):
        record = ExtractedRecord(title="Foo")
        with pytest.raises(AttributeError):
            record.title = "Bar"

    def test_to_dict(self):
        record = ExtractedRecord(title="Foo", external_id="v1", authors=("Bar",), average_rating=4.5)
        assert record.to_dict() == {
            "external_id": "v1",
            "title": "Foo",
            "authors": ["Bar"],
            "description": None,
            "publisher": None,
            "thumbnail_url": None,
            "average_rating": 4.5,
            "categories": [],
        }


class TestCandidateRecord:
    def test_promote(self):
        candidate = CandidateRecord(title="Foo", authors=["Bar"], categories=["Fiction"])
        record = candidate.promote()
        assert record == ExtractedRecord(title="Foo", authors=("Bar",), categories=("Fiction",))

    def test_promote_without_title(self):
        with pytest.raises(ValueError):
            CandidateRecord().promote()
