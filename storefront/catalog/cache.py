"""
Catalog Cache

Memoizes product lists per category for the lifetime of the session.
A category is fetched from the Catalog Source at most once: after a
successful fetch its entry is never refetched, replaced or evicted.
The synthetic "all" entry doubles as the price/title index used by the
cart.
"""
import asyncio
from enum import Enum
from typing import Dict, List, Optional, Protocol

from storefront.logging import get_logger, loggable
from storefront.services.models import Product

logger = get_logger(__name__)

ALL_CATEGORY = "all"


class ProductSource(Protocol):
    """The part of the Catalog Source the cache depends on."""

    async def list_products(self) -> List[Product]: ...

    async def list_by_category(self, category: str) -> List[Product]: ...


class CacheState(str, Enum):
    """Lifecycle of a single category key."""
    UNFETCHED = "unfetched"
    FETCHING = "fetching"
    CACHED = "cached"


class CatalogCache:
    """
    Category-keyed product cache.

    State per key: UNFETCHED -> FETCHING -> CACHED (terminal), or back to
    UNFETCHED when the fetch fails so the next select() retries.
    Concurrent selects of the same uncached category share one request.
    """

    def __init__(self, source: ProductSource):
        self.source = source
        self._entries: Dict[str, List[Product]] = {}
        self._by_id: Dict[int, Product] = {}
        self._inflight: Dict[str, "asyncio.Task[List[Product]]"] = {}
        self.fetch_count = 0

    def __contains__(self, category: str) -> bool:
        return category in self._entries

    def state(self, category: str) -> CacheState:
        if category in self._entries:
            return CacheState.CACHED
        if category in self._inflight:
            return CacheState.FETCHING
        return CacheState.UNFETCHED

    def peek(self, category: str) -> Optional[List[Product]]:
        """Return the cached list without fetching, or None."""
        return self._entries.get(category)

    def find_product(self, product_id: int) -> Optional[Product]:
        """Look a product up in the "all" entry. None until that entry exists."""
        return self._by_id.get(product_id)

    def warm(self, category: str, products: List[Product]) -> None:
        """Pre-seed an entry. An already cached category keeps its original list."""
        if category in self._entries:
            logger.debug(f"Category {loggable(category)} already cached, warm ignored")
            return
        self._store(category, products)

    async def select(self, category: str) -> List[Product]:
        """
        Get the product list for a category.

        Args:
            category: Category name or "all"

        Returns:
            Cached list (no external call) or the freshly fetched one

        Raises:
            FetchFailed: Catalog Source failed; the cache is left unmodified
        """
        cached = self._entries.get(category)
        if cached is not None:
            return cached

        task = self._inflight.get(category)
        if task is None:
            task = asyncio.ensure_future(self._fetch(category))
            self._inflight[category] = task
            task.add_done_callback(lambda t, c=category: self._forget(c, t))
        return await asyncio.shield(task)

    async def _fetch(self, category: str) -> List[Product]:
        self.fetch_count += 1
        logger.info(f"Fetching category {loggable(category)}")
        if category == ALL_CATEGORY:
            products = await self.source.list_products()
        else:
            products = await self.source.list_by_category(category)
        self._store(category, products)
        return self._entries[category]

    def _store(self, category: str, products: List[Product]) -> None:
        entry = self._entries.setdefault(category, list(products))
        if category == ALL_CATEGORY:
            self._by_id = {p.id: p for p in entry}

    def _forget(self, category: str, task: "asyncio.Task[List[Product]]") -> None:
        if self._inflight.get(category) is task:
            del self._inflight[category]
