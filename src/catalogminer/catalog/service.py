"""
Catalog listings built on an injected RecordSource and the extraction pipeline.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import structlog
from structlog.contextvars import bound_contextvars

from ..config.config import CatalogSettings, ExtractionConfig
from ..exceptions import SourceError
from ..extractor.models import ExtractedRecord
from ..extractor.pipeline import ExtractionReport, run_extraction
from ..extractor.protocols import RecordSource

logger = structlog.get_logger(__name__)


def category_query(category: str) -> str:
    """Search expression selecting records filed under ``category``."""
    return f"subject:{category.strip()}"


class CatalogService:
    """
    Serves catalog listings (search, popular, trending, classics, category,
    landing page) as ordered record lists.

    The source performs all I/O; extraction runs in a worker thread so the
    event loop is never blocked by parsing. Every listing is non-empty: a
    failed fetch is treated as an empty response, which the pipeline answers
    with the fallback catalog.
    """

    def __init__(
        self,
        source: RecordSource,
        extraction: Optional[ExtractionConfig] = None,
        settings: Optional[CatalogSettings] = None,
    ) -> None:
        self.source = source
        self.extraction = extraction or ExtractionConfig()
        self.settings = settings or CatalogSettings()
        self.logger = logger.bind(component="CatalogService", source=getattr(source, "name", "unknown"))

    async def _fetch(self, query: str, max_results: int) -> str:
        try:
            return await self.source.fetch(query, max_results)
        except SourceError as e:
            self.logger.warning("Source fetch failed, using empty response", query=query, error=str(e))
            return ""

    async def search_report(self, query: str, max_results: Optional[int] = None) -> ExtractionReport:
        """Fetch ``query`` and return the full extraction report."""
        limit = self.settings.max_results if max_results is None else max_results
        with bound_contextvars(query=query):
            raw = await self._fetch(query, limit)
            config = self.extraction.model_copy(update={"max_records": limit})
            return await asyncio.to_thread(run_extraction, raw, config)

    async def search(self, query: str, max_results: Optional[int] = None) -> List[ExtractedRecord]:
        report = await self.search_report(query, max_results)
        return report.records

    async def popular(self) -> List[ExtractedRecord]:
        """Concatenate the popular queries' results in query order, capped."""
        per_query = self.settings.popular_per_query
        batches = await asyncio.gather(*(self.search(query, per_query) for query in self.settings.popular_queries))
        combined = [record for batch in batches for record in batch]
        return combined[: self.settings.max_results]

    async def trending(self) -> List[ExtractedRecord]:
        return await self.search(self.settings.trending_query)

    async def classics(self) -> List[ExtractedRecord]:
        return await self.search(self.settings.classics_query)

    async def by_category(self, category: str) -> List[ExtractedRecord]:
        return await self.search(category_query(category))

    async def landing_page(self) -> List[ExtractedRecord]:
        """Primary landing query, topped up from the fallback query when short."""
        limit = self.settings.max_results
        records = await self.search(self.settings.landing_query, limit)
        if len(records) < limit:
            extra = await self.search(self.settings.landing_fallback_query, limit - len(records))
            records = records + extra
        return records[:limit]
