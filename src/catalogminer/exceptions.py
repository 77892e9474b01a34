"""
Exception hierarchy for CatalogMiner.

Malformed input never surfaces as an exception from the extraction core;
only misuse (bad configuration) and transport failures reported by a
record source are modelled here.
"""

from __future__ import annotations


class CatalogMinerError(Exception):
    """Base class for all CatalogMiner errors."""

    pass


class ConfigurationError(CatalogMinerError, ValueError):
    """Raised when extraction is invoked with an unusable configuration."""

    pass


class SourceError(CatalogMinerError):
    """Raised by a RecordSource when the raw response could not be fetched."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source
