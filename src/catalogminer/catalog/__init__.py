"""Catalog-level helpers: genre mapping, merging and the async listing service."""

from .genres import DEFAULT_CATEGORY_MAP, DEFAULT_GENRE, GenreMapper
from .merge import merge_records
from .service import CatalogService, category_query

__all__ = [
    "DEFAULT_CATEGORY_MAP",
    "DEFAULT_GENRE",
    "GenreMapper",
    "merge_records",
    "CatalogService",
    "category_query",
]
