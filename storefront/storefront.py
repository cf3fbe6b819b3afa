"""
Storefront - top-level owner of the catalog cache and cart store.

Builds the derived views:
    category -> CatalogCache.select -> search filter -> CatalogView

The category narrows the candidate set and the query narrows it further.
A query typed before a category change is re-applied to the new category.

Rapid category switching: every select is tagged with a sequence number.
When an older request resolves after a newer one was issued, its result
is still cached but not applied to the view.
"""
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Union

from storefront.cart import CartStore, MemorySnapshotStore, SnapshotStore, create_snapshot_store
from storefront.catalog import ALL_CATEGORY, CatalogCache, filter_products
from storefront.config import Settings, get_settings
from storefront.errors import (
    CategoryNotFound,
    ERROR_DETAILS_UNAVAILABLE,
    ERROR_PRODUCTS_UNAVAILABLE,
    FetchFailed,
)
from storefront.intents import (
    AddToCart,
    Decrement,
    Increment,
    Intent,
    IntentType,
    RemoveFromCart,
    Search,
    SelectCategory,
    ShowDetails,
)
from storefront.logging import get_logger, loggable
from storefront.services.catalog_source import CatalogSource
from storefront.services.models import Product
from storefront.view import (
    CartView,
    CatalogView,
    DetailsView,
    ProductCard,
    render_cart,
    render_details,
    render_products,
    render_trending,
)

logger = get_logger(__name__)

ViewRecord = Union[CatalogView, DetailsView, CartView]


class Storefront:
    """
    Owns one CatalogCache and one CartStore for a visitor session.

    Session state:
    - categories: "all" plus the known categories, fixed after startup
    - selected_category / query: current filter inputs
    - base: product list of the selected category (before search)
    """

    def __init__(
        self,
        source: CatalogSource,
        storage: Optional[SnapshotStore] = None,
        cache: Optional[CatalogCache] = None,
    ):
        self.source = source
        self.cache = cache or CatalogCache(source)
        self.cart = CartStore(storage or MemorySnapshotStore(), self.cache)
        self.categories: Tuple[str, ...] = (ALL_CATEGORY,)
        self.selected_category = ALL_CATEGORY
        self.query = ""
        self.trending: List[Product] = []
        self._base: List[Product] = []
        self._error: Optional[str] = None
        self._selection_seq = 0
        self._handlers: Dict[IntentType, Callable[..., Awaitable[ViewRecord]]] = {
            IntentType.SELECT_CATEGORY: self._on_select_category,
            IntentType.SEARCH: self._on_search,
            IntentType.SHOW_DETAILS: self._on_show_details,
            IntentType.ADD_TO_CART: self._on_add_to_cart,
            IntentType.INCREMENT: self._on_increment,
            IntentType.DECREMENT: self._on_decrement,
            IntentType.REMOVE_FROM_CART: self._on_remove_from_cart,
        }

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Storefront":
        """Wire a Storefront from environment settings."""
        settings = settings or get_settings()
        source = CatalogSource(base_url=settings.api_url, timeout=settings.http_timeout)
        return cls(source, storage=create_snapshot_store(settings))

    async def aclose(self) -> None:
        await self.source.aclose()

    # ==================== STARTUP ====================

    async def startup(self) -> CatalogView:
        """
        Initial load: full catalog (seeds "all"), trending, then categories.

        Failures leave the storefront interactive: no products means an
        error view, no categories means the index is just "all".
        """
        try:
            products = await self.source.list_products()
            self.cache.warm(ALL_CATEGORY, products)
            self._base = self.cache.peek(ALL_CATEGORY) or []
            self.trending = self._base[:3]
            self._error = None
            logger.info(f"Catalog loaded: {len(self._base)} products")
        except FetchFailed as e:
            logger.error(f"Initial catalog load failed: {e}")
            self._error = ERROR_PRODUCTS_UNAVAILABLE

        try:
            names = await self.source.list_categories()
            self.categories = (ALL_CATEGORY, *[n for n in names if n != ALL_CATEGORY])
        except FetchFailed as e:
            logger.warning(f"Category list unavailable: {e}")

        return self.current_view()

    # ==================== CATALOG VIEW ====================

    def current_view(self) -> CatalogView:
        if self._error:
            return CatalogView(category=self.selected_category, query=self.query, error=self._error)
        return CatalogView(
            category=self.selected_category,
            query=self.query,
            products=render_products(filter_products(self._base, self.query)),
        )

    async def select_category(self, category: str) -> CatalogView:
        """
        Switch category, then re-apply the current query.

        Raises:
            CategoryNotFound: category is not in the index
        """
        if category not in self.categories:
            raise CategoryNotFound(category)

        self.selected_category = category
        self._selection_seq += 1
        seq = self._selection_seq

        try:
            products = await self.cache.select(category)
        except FetchFailed as e:
            if seq == self._selection_seq:
                logger.warning(f"Category {loggable(category)} unavailable: {e}")
                self._base = []
                self._error = ERROR_PRODUCTS_UNAVAILABLE
            return self.current_view()

        if seq != self._selection_seq:
            logger.info(f"Discarding stale result for category {loggable(category)}")
            return self.current_view()

        self._base = products
        self._error = None
        return self.current_view()

    def search(self, query: str) -> CatalogView:
        """Re-filter the current category's products (no refetch)."""
        self.query = query or ""
        return self.current_view()

    def trending_cards(self) -> List[ProductCard]:
        return render_trending(self.trending)

    async def show_details(self, product_id: int) -> DetailsView:
        """Fetch one product's details; errors become a DetailsView with a message."""
        try:
            product = await self.source.get_product(product_id)
        except FetchFailed as e:
            logger.warning(f"Details for product {product_id} unavailable: {e}")
            return DetailsView(error=ERROR_DETAILS_UNAVAILABLE, not_found=e.status_code == 404)
        return render_details(product)

    # ==================== CART ====================

    def cart_view(self) -> CartView:
        return render_cart(self.cart)

    def add_to_cart(self, product_id: int) -> CartView:
        self.cart.add(product_id)
        return self.cart_view()

    def increment(self, product_id: int) -> CartView:
        self.cart.increment(product_id)
        return self.cart_view()

    def decrement(self, product_id: int) -> CartView:
        self.cart.decrement(product_id)
        return self.cart_view()

    def remove_from_cart(self, product_id: int) -> CartView:
        self.cart.remove(product_id)
        return self.cart_view()

    # ==================== DISPATCH ====================

    async def dispatch(self, intent: Intent) -> ViewRecord:
        """Route an intent to its handler and return the resulting view."""
        handler = self._handlers.get(intent.kind)
        if handler is None:
            raise ValueError(f"Unsupported intent: {intent.kind}")
        return await handler(intent)

    async def _on_select_category(self, intent: SelectCategory) -> CatalogView:
        return await self.select_category(intent.name)

    async def _on_search(self, intent: Search) -> CatalogView:
        return self.search(intent.query)

    async def _on_show_details(self, intent: ShowDetails) -> DetailsView:
        return await self.show_details(intent.product_id)

    async def _on_add_to_cart(self, intent: AddToCart) -> CartView:
        return self.add_to_cart(intent.product_id)

    async def _on_increment(self, intent: Increment) -> CartView:
        return self.increment(intent.product_id)

    async def _on_decrement(self, intent: Decrement) -> CartView:
        return self.decrement(intent.product_id)

    async def _on_remove_from_cart(self, intent: RemoveFromCart) -> CartView:
        return self.remove_from_cart(intent.product_id)
