"""Title search over an already cached product list."""
from typing import List

from storefront.services.models import Product


def _fold(text: str) -> str:
    return text.casefold()


def filter_products(products: List[Product], query: str) -> List[Product]:
    """
    Keep products whose title contains the query, case-insensitively.

    An empty or whitespace-only query returns the input list itself.
    Any other query is matched as typed, spaces included. Order is
    preserved; there is no ranking or tokenization.
    """
    if not query or not query.strip():
        return products
    needle = _fold(query)
    return [p for p in products if needle in _fold(p.title)]
