"""
Catalog Source - remote product catalog client.

Endpoints:
- GET /products                      full product list
- GET /products/category/{category}  products in one category
- GET /products/categories           ordered category names
- GET /products/{id}                 single product

Every failure (transport error, non-2xx status, undecodable or invalid
payload) is raised uniformly as FetchFailed.
"""
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from storefront.config import Settings, get_settings
from storefront.errors import FetchFailed
from storefront.logging import get_logger
from storefront.services.models import Product

logger = get_logger(__name__)

_products_adapter = TypeAdapter(List[Product])
_categories_adapter = TypeAdapter(List[str])


class CatalogSource:
    """Async client for the catalog API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings: Settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self._transport = transport
        # HTTP client (lazy, shared across requests)
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazily create the shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        client = await self._get_http_client()
        try:
            resp = await client.get(path)
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"Catalog request to {url} returned status {status}")
            raise FetchFailed(url, status_code=status) from e
        except httpx.RequestError as e:
            logger.warning(f"Catalog request to {url} failed: {e!r}")
            raise FetchFailed(url, reason=str(e) or type(e).__name__) from e
        except ValueError as e:
            # Body is not JSON
            logger.warning(f"Catalog response from {url} is not JSON: {e}")
            raise FetchFailed(url, reason="invalid JSON") from e

    async def _get_products(self, path: str) -> List[Product]:
        data = await self._get_json(path)
        try:
            return _products_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning(f"Catalog response from {path} has invalid products: {e.error_count()} errors")
            raise FetchFailed(f"{self.base_url}{path}", reason="invalid product list") from e

    async def list_products(self) -> List[Product]:
        """Fetch the full product list."""
        return await self._get_products("/products")

    async def list_by_category(self, category: str) -> List[Product]:
        """Fetch products filtered server-side by category (URL-escaped)."""
        return await self._get_products(f"/products/category/{quote(category, safe='')}")

    async def list_categories(self) -> List[str]:
        """Fetch the ordered list of category names."""
        data = await self._get_json("/products/categories")
        try:
            return _categories_adapter.validate_python(data)
        except ValidationError as e:
            raise FetchFailed(f"{self.base_url}/products/categories", reason="invalid category list") from e

    async def get_product(self, product_id: int) -> Product:
        """Fetch a single product by identifier."""
        path = f"/products/{int(product_id)}"
        data = await self._get_json(path)
        # The public API answers unknown ids with 200 and an empty body
        if data is None:
            raise FetchFailed(f"{self.base_url}{path}", status_code=404)
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            raise FetchFailed(f"{self.base_url}{path}", reason="invalid product") from e
