"""
Unit tests for the extraction pipeline.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from catalogminer.config import ExtractionConfig
from catalogminer.exceptions import ConfigurationError
from catalogminer.extractor import pipeline
from catalogminer.extractor.fallback import fallback_catalog
from catalogminer.extractor.models import ExtractedRecord
from catalogminer.extractor.pipeline import (
    ExtractionPipeline,
    SpanOutcome,
    extract_records,
    run_extraction,
    secure_url,
)
from catalogminer.observability.metrics import METRICS
from tests.helpers import make_response, make_volume, metric_delta, titled_volumes


class TestRoundTrip:
    def test_clean_record(self, single_record_response):
        records = extract_records(single_record_response)

        assert len(records) == 1
        assert records[0].title == "Foo"
        assert list(records[0].authors) == ["Bar"]
        assert records[0].average_rating == 4.5
        assert records[0].external_id == "vol-1"

    def test_minimal_hand_written_response(self):
        raw = '{"items":[{"kind":"books#volume","volumeInfo":{"title":"Foo","authors":["Bar"],"averageRating":4.5}}]}'
        (record,) = extract_records(raw)
        assert (record.title, record.authors, record.average_rating) == ("Foo", ("Bar",), 4.5)

    def test_all_fields(self, realistic_response):
        report = run_extraction(realistic_response)
        google, cafe = report.records

        assert google.external_id == "zyTCAlFPjgYC"
        assert google.authors == ("David A. Vise", "Mark Malseed")
        assert google.publisher == "Random House Digital, Inc."
        assert google.description.startswith('"Here is the story')
        assert "\nof our time." in google.description
        assert google.categories == ("Browsers (Computer programs)", "Business & Economics")
        assert google.thumbnail_url.startswith("https://books.google.com/")
        assert google.average_rating == 3.5

        assert cafe.title == "Café Society"
        assert cafe.authors == ("Renée Dupont",)
        assert cafe.average_rating == 4.0

    def test_report_counts(self, realistic_response):
        report = run_extraction(realistic_response)
        assert report.spans_seen == 3
        assert report.dropped_language == 1
        assert report.dropped == 1
        assert report.counts[SpanOutcome.ACCEPTED.value] == 2
        assert not report.used_fallback


class TestCandidateRules:
    """Test cases for per-candidate dropping rules."""

    def test_missing_title_does_not_abort_later_records(self):
        raw = make_response(
            [make_volume(volume_id="a", title=None), make_volume(volume_id="b", title="Second")]
        )
        report = run_extraction(raw)
        assert [r.title for r in report.records] == ["Second"]
        assert report.dropped_missing_title == 1

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_is_missing(self, title):
        raw = make_response([make_volume(title=title), make_volume(volume_id="b", title="Kept")])
        report = run_extraction(raw)
        assert [r.title for r in report.records] == ["Kept"]
        assert report.dropped_missing_title == 1

    def test_non_latin_title_is_dropped(self):
        raw = make_response([make_volume(title="ノルウェイの森"), make_volume(volume_id="b", title="Norwegian Wood")])
        report = run_extraction(raw)
        assert [r.title for r in report.records] == ["Norwegian Wood"]
        assert report.dropped_language == 1

    def test_non_latin_author_is_removed_but_record_kept(self):
        raw = make_response([make_volume(title="Norwegian Wood", authors=["村上春樹", "Haruki Murakami"])])
        (record,) = extract_records(raw)
        assert record.authors == ("Haruki Murakami",)

    def test_record_without_authors(self):
        (record,) = extract_records(make_response([make_volume(authors=None)]))
        assert record.authors == ()
        assert record.authors_display == "Unknown Author"

    def test_numeric_title_passes_language_check(self):
        (record,) = extract_records(make_response([make_volume(title="1984")]))
        assert record.title == "1984"

    def test_quoted_rating_is_absent(self):
        (record,) = extract_records(make_response([make_volume(rating="4.5")]))
        assert record.average_rating is None

    def test_escaped_quote_and_brace_in_value_keep_record_whole(self):
        raw = make_response(
            [
                make_volume(
                    description='He wrote "}" on the wall',
                    categories=["Mystery"],
                    rating=3.0,
                ),
                make_volume(volume_id="vol-2", title="Next"),
            ]
        )
        first, second = extract_records(raw)
        assert first.description == 'He wrote "}" on the wall'
        assert first.categories == ("Mystery",)
        assert first.average_rating == 3.0
        assert second.title == "Next"

    def test_insecure_thumbnail_is_upgraded(self):
        (record,) = extract_records(make_response([make_volume(thumbnail="http://example.com/cover.jpg")]))
        assert record.thumbnail_url == "https://example.com/cover.jpg"

    def test_span_error_is_counted_and_skipped(self, monkeypatch):
        real = pipeline.normalize_candidate

        def flaky(candidate):
            if candidate.external_id == "bad":
                raise ValueError("boom")
            return real(candidate)

        monkeypatch.setattr(pipeline, "normalize_candidate", flaky)
        raw = make_response([make_volume(volume_id="bad"), make_volume(volume_id="ok", title="Fine")])
        report = run_extraction(raw)
        assert [r.title for r in report.records] == ["Fine"]
        assert report.dropped_error == 1


class TestSecureUrl:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("http://a/b.jpg", "https://a/b.jpg"),
            ("HTTP://a/b.jpg", "https://a/b.jpg"),
            ("https://a/b.jpg", "https://a/b.jpg"),
            ("//a/http://b", "//a/http://b"),
        ],
    )
    def test_secure_url(self, url, expected):
        assert secure_url(url) == expected


class TestCapAndFallback:
    """Test cases for capping and fallback substitution."""

    def test_cap_keeps_first_records_in_order(self):
        raw = make_response(titled_volumes(20))
        report = run_extraction(raw, ExtractionConfig(max_records=5))
        assert [r.title for r in report.records] == [f"Book {i}" for i in range(5)]
        assert report.spans_seen == 5

    def test_cap_counts_only_accepted_records(self):
        items = [make_volume(volume_id="x", title=None)] * 3 + titled_volumes(4)
        report = run_extraction(make_response(items), ExtractionConfig(max_records=2))
        assert [r.title for r in report.records] == ["Book 0", "Book 1"]

    @settings(max_examples=30)
    @given(count=st.integers(min_value=1, max_value=30), cap=st.integers(min_value=1, max_value=15))
    def test_cap_invariant(self, count, cap):
        records = extract_records(make_response(titled_volumes(count)), ExtractionConfig(max_records=cap))
        assert len(records) == min(count, cap)
        assert [r.title for r in records] == [f"Book {i}" for i in range(len(records))]

    @pytest.mark.parametrize("raw", [None, "", "not json at all", '{"kind": "books#volumes", "totalItems": 0}'])
    def test_no_records_uses_fallback(self, raw):
        report = run_extraction(raw)
        assert report.used_fallback
        assert report.records == fallback_catalog()

    @given(st.text().filter(lambda s: "books#volume" not in s))
    def test_fallback_invariant(self, text):
        assert extract_records(text) == fallback_catalog()

    def test_all_candidates_dropped_uses_fallback(self):
        raw = make_response([make_volume(title="村上春樹の本")])
        report = run_extraction(raw)
        assert report.used_fallback
        assert report.dropped_language == 1
        assert report.records == fallback_catalog()

    def test_fallback_ignores_cap(self):
        assert extract_records("", ExtractionConfig(max_records=3)) == fallback_catalog()

    def test_injected_fallback(self):
        substitute = [ExtractedRecord(title="Placeholder")]
        assert extract_records("", ExtractionConfig(fallback=lambda: substitute)) == substitute

    def test_empty_fallback_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            extract_records("", ExtractionConfig(fallback=lambda: []))


class TestConfiguration:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"marker": ""},
            {"marker": "  "},
            {"max_records": 0},
            {"max_records": True},
            {"workers": 0},
            {"workers": True},
            {"latin_threshold": 0.0},
        ],
    )
    def test_unvalidated_config_is_rejected(self, overrides):
        config = ExtractionConfig.model_construct(**overrides)
        with pytest.raises(ConfigurationError):
            run_extraction("{}", config)

    def test_configuration_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            ExtractionPipeline(ExtractionConfig.model_construct(max_records=-1))

    def test_custom_marker(self):
        raw = '{"docs": [{"type": "rec", "title": "A"}, {"type": "rec", "title": "B"}]}'
        config = ExtractionConfig(marker='"type": "rec"', container_key="docs")
        assert [r.title for r in extract_records(raw, config)] == ["A", "B"]


class TestParallelWorkers:
    def test_workers_preserve_order(self):
        items = titled_volumes(30)
        items[3] = make_volume(volume_id="jp", title="ノルウェイの森")
        raw = make_response(items)

        sequential = run_extraction(raw, ExtractionConfig(max_records=20))
        parallel = run_extraction(raw, ExtractionConfig(max_records=20, workers=4))

        assert parallel.records == sequential.records
        assert len(parallel.records) == 20
        assert parallel.dropped_language == 1

    def test_pipeline_object(self):
        raw = make_response(titled_volumes(4))
        extractor = ExtractionPipeline(ExtractionConfig(workers=2))
        assert [r.title for r in extractor.extract(raw)] == [f"Book {i}" for i in range(4)]
        assert extractor.run(raw).spans_seen == 4


class TestMetrics:
    def test_accepted_records_are_counted(self):
        with metric_delta(METRICS["records_extracted"], 3):
            run_extraction(make_response(titled_volumes(3)))

    def test_dropped_candidates_are_counted_by_reason(self):
        raw = make_response([make_volume(title=None), make_volume(title="Kept")])
        with metric_delta(METRICS["candidates_dropped"].labels(reason="missing_title"), 1):
            run_extraction(raw)

    def test_fallback_is_counted(self):
        with metric_delta(METRICS["fallback_used"], 1), metric_delta(METRICS["records_extracted"], 0):
            run_extraction("")
