"""
CatalogMiner - Fault-tolerant record extraction from catalog API responses.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, ExtractionConfig
from .exceptions import CatalogMinerError, ConfigurationError, SourceError
from .extractor import ExtractedRecord, ExtractionReport, extract_records, fallback_catalog, run_extraction

__all__ = [
    "__version__",
    "Config",
    "ExtractionConfig",
    "CatalogMinerError",
    "ConfigurationError",
    "SourceError",
    "ExtractedRecord",
    "ExtractionReport",
    "extract_records",
    "fallback_catalog",
    "run_extraction",
]
