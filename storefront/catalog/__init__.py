"""Catalog package: per-category cache and title search."""
from .cache import ALL_CATEGORY, CacheState, CatalogCache
from .search import filter_products

__all__ = [
    "ALL_CATEGORY",
    "CacheState",
    "CatalogCache",
    "filter_products",
]
