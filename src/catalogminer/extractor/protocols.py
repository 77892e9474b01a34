"""
Protocols for pluggable raw-response sources.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RecordSource(Protocol):
    """Transport that fetches the raw catalog response for a query."""

    name: str

    async def fetch(self, query: str, max_results: int) -> str:
        """Fetch the raw response body for ``query``.

        Args:
            query: Catalog search expression
            max_results: Number of records requested from the remote side

        Returns:
            The response body, already decoded to text

        Raises:
            SourceError: If the response could not be obtained
        """
        ...
