"""
End-to-end extraction: raw response text to an ordered, capped record list.

Each span goes through extract -> decode -> filter independently of its
siblings, so spans may be processed on worker threads and merged back in
order of appearance. Malformed input never raises; it degrades to dropping
a candidate and, when nothing survives, to the fallback catalog.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from itertools import islice
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import structlog

from ..config.config import ExtractionConfig
from ..exceptions import ConfigurationError
from ..observability.metrics import METRICS
from .decoder import decode_escapes
from .fallback import fallback_catalog
from .language_filter import LanguageHeuristicFilter
from .models import CandidateRecord, ExtractedRecord, RecordSpan
from .scanner import extract_number_field, extract_string_array, extract_string_field
from .segmenter import iter_record_spans

logger = structlog.get_logger(__name__)

FIELD_ID = "id"
FIELD_TITLE = "title"
FIELD_AUTHORS = "authors"
FIELD_DESCRIPTION = "description"
FIELD_PUBLISHER = "publisher"
FIELD_THUMBNAIL = "thumbnail"
FIELD_RATING = "averageRating"
FIELD_CATEGORIES = "categories"


class SpanOutcome(str, Enum):
    """What happened to one candidate span."""

    ACCEPTED = "accepted"
    MISSING_TITLE = "missing_title"
    LANGUAGE = "language"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class ExtractionReport:
    """Records produced by one extraction run plus drop counts for diagnostics."""

    records: List[ExtractedRecord]
    spans_seen: int = 0
    dropped_missing_title: int = 0
    dropped_language: int = 0
    dropped_error: int = 0
    used_fallback: bool = False
    counts: Dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def dropped(self) -> int:
        return self.dropped_missing_title + self.dropped_language + self.dropped_error


def extract_candidate(text: str, span: RecordSpan) -> CandidateRecord:
    """Read the raw (still escaped) fields of one span into a candidate."""
    start, end = span.start, span.end
    return CandidateRecord(
        external_id=extract_string_field(text, FIELD_ID, start, end),
        title=extract_string_field(text, FIELD_TITLE, start, end),
        authors=extract_string_array(text, FIELD_AUTHORS, start, end),
        description=extract_string_field(text, FIELD_DESCRIPTION, start, end),
        publisher=extract_string_field(text, FIELD_PUBLISHER, start, end),
        thumbnail_url=extract_string_field(text, FIELD_THUMBNAIL, start, end),
        average_rating=extract_number_field(text, FIELD_RATING, start, end),
        categories=extract_string_array(text, FIELD_CATEGORIES, start, end),
    )


def secure_url(url: str) -> str:
    """Rewrite a leading ``http://`` to ``https://``."""
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


def _decode_optional(value: Optional[str]) -> Optional[str]:
    return decode_escapes(value) if value is not None else None


def normalize_candidate(candidate: CandidateRecord) -> CandidateRecord:
    """Decode every string field in place and force a secure thumbnail scheme."""
    candidate.external_id = _decode_optional(candidate.external_id)
    candidate.title = _decode_optional(candidate.title)
    if candidate.title is not None and not candidate.title.strip():
        candidate.title = None
    candidate.authors = [decode_escapes(author) for author in candidate.authors]
    candidate.description = _decode_optional(candidate.description)
    candidate.publisher = _decode_optional(candidate.publisher)
    if candidate.thumbnail_url is not None:
        candidate.thumbnail_url = secure_url(decode_escapes(candidate.thumbnail_url))
    candidate.categories = [decode_escapes(category) for category in candidate.categories]
    return candidate


def filter_candidate(candidate: CandidateRecord, language_filter: LanguageHeuristicFilter) -> Optional[SpanOutcome]:
    """
    Apply the required-title rule and the language heuristic.

    Rejected authors are removed from the candidate; a rejected title
    discards it. Returns the drop reason, or None if the candidate passes.
    """
    if candidate.title is None:
        return SpanOutcome.MISSING_TITLE
    if not language_filter.accepts(candidate.title):
        return SpanOutcome.LANGUAGE
    candidate.authors = [author for author in candidate.authors if author.strip() and language_filter.accepts(author)]
    return None


def process_span(
    text: str, span: RecordSpan, language_filter: LanguageHeuristicFilter
) -> Tuple[SpanOutcome, Optional[ExtractedRecord]]:
    """Run one span through extract -> decode -> filter."""
    try:
        candidate = normalize_candidate(extract_candidate(text, span))
        reason = filter_candidate(candidate, language_filter)
        if reason is not None:
            logger.debug("Dropped candidate", reason=reason.value, start=span.start, title=candidate.title)
            return reason, None
        return SpanOutcome.ACCEPTED, candidate.promote()
    except (ValueError, IndexError) as e:
        logger.warning("Failed to build record from span", start=span.start, end=span.end, error=str(e))
        return SpanOutcome.ERROR, None


def _validate_config(config: ExtractionConfig) -> LanguageHeuristicFilter:
    if not isinstance(config.marker, str) or not config.marker.strip():
        raise ConfigurationError("Record marker must be a non-empty string")
    if isinstance(config.max_records, bool) or not isinstance(config.max_records, int) or config.max_records < 1:
        raise ConfigurationError(f"max_records must be >= 1, got {config.max_records!r}")
    if isinstance(config.workers, bool) or not isinstance(config.workers, int) or config.workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {config.workers!r}")
    try:
        return LanguageHeuristicFilter(config.latin_threshold)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def _iter_outcomes(
    text: str,
    spans: Iterator[RecordSpan],
    language_filter: LanguageHeuristicFilter,
    config: ExtractionConfig,
    accepted: List[ExtractedRecord],
) -> Iterator[Tuple[SpanOutcome, Optional[ExtractedRecord]]]:
    """Yield span outcomes in source order, pulling spans only as needed."""
    if config.workers == 1:
        for span in spans:
            yield process_span(text, span, language_filter)
        return

    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="catalogminer") as pool:
        while len(accepted) < config.max_records:
            batch = list(islice(spans, max(config.max_records - len(accepted), config.workers)))
            if not batch:
                return
            yield from pool.map(lambda span: process_span(text, span, language_filter), batch)


def _substitute_fallback(config: ExtractionConfig) -> List[ExtractedRecord]:
    supplier: Callable[[], Sequence[ExtractedRecord]] = config.fallback or fallback_catalog
    records = list(supplier())
    if not records:
        raise ConfigurationError("Fallback catalog is empty")
    return records


def run_extraction(raw_text: Optional[str], config: Optional[ExtractionConfig] = None) -> ExtractionReport:
    """
    Extract records from ``raw_text`` and report what was dropped.

    Args:
        raw_text: Raw response body; None is treated as an empty response
        config: Extraction settings, defaults to ``ExtractionConfig()``

    Returns:
        ExtractionReport whose ``records`` is non-empty, capped at
        ``config.max_records`` and in order of appearance

    Raises:
        ConfigurationError: If the configuration is unusable
    """
    config = config or ExtractionConfig()
    language_filter = _validate_config(config)
    text = raw_text or ""
    started = time.perf_counter()

    counts: Dict[str, int] = {outcome.value: 0 for outcome in SpanOutcome}
    accepted: List[ExtractedRecord] = []
    spans = iter_record_spans(text, config.marker, config.container_key)

    outcomes = _iter_outcomes(text, spans, language_filter, config, accepted)
    try:
        for outcome, record in outcomes:
            counts[outcome.value] += 1
            if record is not None:
                accepted.append(record)
                if len(accepted) >= config.max_records:
                    break
    finally:
        outcomes.close()

    used_fallback = not accepted
    records = _substitute_fallback(config) if used_fallback else accepted

    METRICS["records_extracted"].inc(len(accepted))
    for outcome in (SpanOutcome.MISSING_TITLE, SpanOutcome.LANGUAGE, SpanOutcome.ERROR):
        if counts[outcome.value]:
            METRICS["candidates_dropped"].labels(reason=outcome.value).inc(counts[outcome.value])
    if used_fallback:
        METRICS["fallback_used"].inc()
    METRICS["extraction_duration"].observe(time.perf_counter() - started)

    report = ExtractionReport(
        records=records,
        spans_seen=sum(counts.values()),
        dropped_missing_title=counts[SpanOutcome.MISSING_TITLE.value],
        dropped_language=counts[SpanOutcome.LANGUAGE.value],
        dropped_error=counts[SpanOutcome.ERROR.value],
        used_fallback=used_fallback,
        counts=counts,
    )
    logger.info(
        "Extraction finished",
        spans=report.spans_seen,
        accepted=len(accepted),
        dropped_missing_title=report.dropped_missing_title,
        dropped_language=report.dropped_language,
        dropped_error=report.dropped_error,
        used_fallback=used_fallback,
    )
    return report


def extract_records(raw_text: Optional[str], config: Optional[ExtractionConfig] = None) -> List[ExtractedRecord]:
    """Return the ordered, capped records for ``raw_text`` (fallback if none survive)."""
    return run_extraction(raw_text, config).records


class ExtractionPipeline:
    """Reusable, stateless wrapper binding an ExtractionConfig to the pipeline."""

    def __init__(self, config: Optional[ExtractionConfig] = None) -> None:
        self.config = config or ExtractionConfig()
        _validate_config(self.config)

    def run(self, raw_text: Optional[str]) -> ExtractionReport:
        return run_extraction(raw_text, self.config)

    def extract(self, raw_text: Optional[str]) -> List[ExtractedRecord]:
        return run_extraction(raw_text, self.config).records
