"""
CatalogMiner Record Extraction Module

Turns a catalog-style API response into typed records without a general
purpose parser, tolerating partial, malformed or truncated input:

1. Segmenter: marker split plus string-aware brace balancing
2. Scanners: bounded scalar, numeric and array field extraction
3. Decoder: single-pass backslash/unicode escape decoding
4. Language filter: Latin-letter ratio heuristic
5. Fallback: deterministic record set used when nothing survives
"""

from .decoder import decode_escapes
from .fallback import FALLBACK_RECORDS, fallback_catalog
from .language_filter import LanguageHeuristicFilter, is_latin_text
from .models import CandidateRecord, ExtractedRecord, RecordSpan
from .pipeline import ExtractionPipeline, ExtractionReport, SpanOutcome, extract_records, run_extraction
from .protocols import RecordSource
from .scanner import (
    extract_first_array_value,
    extract_number_field,
    extract_string_array,
    extract_string_field,
    find_array,
)
from .segmenter import find_record_end, iter_record_spans, segment_records

__all__ = [
    "decode_escapes",
    "FALLBACK_RECORDS",
    "fallback_catalog",
    "LanguageHeuristicFilter",
    "is_latin_text",
    "CandidateRecord",
    "ExtractedRecord",
    "RecordSpan",
    "ExtractionPipeline",
    "ExtractionReport",
    "SpanOutcome",
    "extract_records",
    "run_extraction",
    "RecordSource",
    "extract_first_array_value",
    "extract_number_field",
    "extract_string_array",
    "extract_string_field",
    "find_array",
    "find_record_end",
    "iter_record_spans",
    "segment_records",
]
