"""
Storefront Core Module

This package contains the storefront engine:
- services: Catalog Source client, product models, money helpers
- catalog: per-category catalog cache and search filter
- cart: consolidated cart store with persisted snapshot
- storefront: top-level owner wiring cache, cart and views together

Note: Imports are lazy so that importing a submodule does not pull in
the HTTP client or Redis client.
"""

__all__ = [
    "Storefront",
    "CatalogCache",
    "CartStore",
    "get_settings",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "Storefront":
        from storefront.storefront import Storefront
        return Storefront
    if name == "CatalogCache":
        from storefront.catalog import CatalogCache
        return CatalogCache
    if name == "CartStore":
        from storefront.cart import CartStore
        return CartStore
    if name == "get_settings":
        from storefront.config import get_settings
        return get_settings
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
