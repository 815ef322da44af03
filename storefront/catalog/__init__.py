"""Catalog package: filter state and query builder."""
from .query import (
    ALL_CATEGORIES,
    CATEGORIES,
    RATING_OPTIONS,
    PRICE_CEILING,
    SORT_EXPRESSIONS,
    CatalogFilterState,
    QueryDescriptor,
    build_query,
    clamp_quantity,
)

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORIES",
    "RATING_OPTIONS",
    "PRICE_CEILING",
    "SORT_EXPRESSIONS",
    "CatalogFilterState",
    "QueryDescriptor",
    "build_query",
    "clamp_quantity",
]
