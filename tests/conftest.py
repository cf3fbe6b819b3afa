"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Keep tests off any real Redis / network configuration
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)
os.environ.setdefault("STOREFRONT_API_URL", "https://catalog.test")

from storefront.cart import CartStore, MemorySnapshotStore
from storefront.catalog import ALL_CATEGORY, CatalogCache
from storefront.services.models import Product


def make_product(product_id, title, price, category="men's clothing", rating=None, **extra):
    """Build a Product the way the catalog API returns it."""
    data = {
        "id": product_id,
        "title": title,
        "price": price,
        "category": category,
        "image": f"https://catalog.test/img/{product_id}.jpg",
        "description": f"{title} description",
        "rating": rating if rating is not None else {"rate": 4.1, "count": 259},
    }
    data.update(extra)
    return Product.model_validate(data)


@pytest.fixture
def blue_shirt():
    """Single-product catalog item"""
    return make_product(1, "Blue Shirt", 19.99, category="men")


@pytest.fixture
def sample_products(blue_shirt):
    """Small catalog spanning three categories"""
    return [
        blue_shirt,
        make_product(2, "Red Hat", 9.5, category="men"),
        make_product(3, "Gold Ring", 168, category="jewelery", rating={"rate": 3.9, "count": 70}),
        make_product(4, "Rain Jacket Women Windbreaker", 39.99, category="women's clothing"),
    ]


@pytest.fixture
def mock_source(sample_products):
    """Mock Catalog Source serving sample_products"""
    source = Mock()

    def by_category(category):
        return [p for p in sample_products if p.category == category]

    source.list_products = AsyncMock(return_value=sample_products)
    source.list_by_category = AsyncMock(side_effect=by_category)
    source.list_categories = AsyncMock(return_value=["men", "jewelery", "women's clothing"])
    source.get_product = AsyncMock(side_effect=lambda pid: next(p for p in sample_products if p.id == pid))
    source.aclose = AsyncMock()
    return source


@pytest.fixture
def memory_storage():
    """Empty in-memory cart snapshot"""
    return MemorySnapshotStore()


@pytest.fixture
def loaded_cache(mock_source, sample_products):
    """Cache with the "all" entry already seeded"""
    cache = CatalogCache(mock_source)
    cache.warm(ALL_CATEGORY, sample_products)
    return cache


@pytest.fixture
def cart(memory_storage, loaded_cache):
    """Empty cart priced against the loaded catalog"""
    return CartStore(memory_storage, loaded_cache)
