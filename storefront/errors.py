"""
Storefront Errors

Exception taxonomy for the catalog and cart, plus the user-facing
fallback messages shown when something goes wrong.
"""

from typing import Optional

# User-facing messages
ERROR_PRODUCTS_UNAVAILABLE = "Failed to load products."
ERROR_DETAILS_UNAVAILABLE = "Error loading details."
ERROR_CATEGORY_NOT_FOUND = "Category not found"
ERROR_PRODUCT_NOT_FOUND = "Product not found"
MESSAGE_CART_EMPTY = "Your cart is empty."


class StorefrontError(Exception):
    """Base class for storefront errors."""


class FetchFailed(StorefrontError):
    """Catalog Source request failed (transport error, bad status or bad payload)."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"status {status_code}" if status_code is not None else (reason or "request failed")
        super().__init__(f"Fetch failed for {url}: {detail}")


class PersistenceFailed(StorefrontError):
    """Cart snapshot could not be read or written."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        self.reason = reason
        super().__init__(f"Cart snapshot '{key}' unavailable: {reason}")


class CategoryNotFound(StorefrontError):
    """Category is not a member of the category index."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"{ERROR_CATEGORY_NOT_FOUND}: {category}")


__all__ = [
    "ERROR_PRODUCTS_UNAVAILABLE",
    "ERROR_DETAILS_UNAVAILABLE",
    "ERROR_CATEGORY_NOT_FOUND",
    "ERROR_PRODUCT_NOT_FOUND",
    "MESSAGE_CART_EMPTY",
    "StorefrontError",
    "FetchFailed",
    "PersistenceFailed",
    "CategoryNotFound",
]
