"""
Storefront API Router

Thin HTTP layer over the session's Storefront:
- catalog: categories, products (category + search), trending, details
- cart: view, add, increment, decrement, remove
- intents: generic dispatch of any typed intent
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from storefront.errors import CategoryNotFound, ERROR_PRODUCT_NOT_FOUND
from storefront.intents import IntentPayload
from storefront.logging import get_logger
from storefront.storefront import Storefront
from storefront.view import CartView, CatalogView, DetailsView, ProductCard

logger = get_logger(__name__)

router = APIRouter(tags=["storefront"])


class CategoriesResponse(BaseModel):
    categories: List[str]
    selected: str


def get_storefront(request: Request) -> Storefront:
    """Storefront owned by the application (created in lifespan)."""
    storefront = getattr(request.app.state, "storefront", None)
    if storefront is None:
        raise HTTPException(status_code=503, detail="Storefront is not ready")
    return storefront


# ==================== CATALOG ====================

@router.get("/categories", response_model=CategoriesResponse)
async def get_categories(storefront: Storefront = Depends(get_storefront)):
    return CategoriesResponse(categories=list(storefront.categories), selected=storefront.selected_category)


@router.get("/products", response_model=CatalogView)
async def get_products(
    category: Optional[str] = None,
    q: Optional[str] = None,
    storefront: Storefront = Depends(get_storefront),
):
    """Select a category (if given), then apply the search text (if given)."""
    # Reject before touching the session query
    if category is not None and category not in storefront.categories:
        raise HTTPException(status_code=404, detail=str(CategoryNotFound(category)))
    if q is not None:
        storefront.search(q)
    if category is not None:
        return await storefront.select_category(category)
    return storefront.current_view()


@router.get("/trending", response_model=List[ProductCard])
async def get_trending(storefront: Storefront = Depends(get_storefront)):
    return storefront.trending_cards()


@router.get("/products/{product_id}", response_model=DetailsView)
async def get_product(product_id: int, storefront: Storefront = Depends(get_storefront)):
    details = await storefront.show_details(product_id)
    if details.error:
        if details.not_found:
            raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
        logger.warning(f"Details unavailable for product {product_id}")
        raise HTTPException(status_code=502, detail=details.error)
    return details


# ==================== CART ====================

@router.get("/cart", response_model=CartView)
async def get_cart(storefront: Storefront = Depends(get_storefront)):
    return storefront.cart_view()


@router.post("/cart/{product_id}", response_model=CartView)
async def add_to_cart(product_id: int, storefront: Storefront = Depends(get_storefront)):
    return storefront.add_to_cart(product_id)


@router.post("/cart/{product_id}/increment", response_model=CartView)
async def increment_item(product_id: int, storefront: Storefront = Depends(get_storefront)):
    return storefront.increment(product_id)


@router.post("/cart/{product_id}/decrement", response_model=CartView)
async def decrement_item(product_id: int, storefront: Storefront = Depends(get_storefront)):
    return storefront.decrement(product_id)


@router.delete("/cart/{product_id}", response_model=CartView)
async def remove_item(product_id: int, storefront: Storefront = Depends(get_storefront)):
    return storefront.remove_from_cart(product_id)


# ==================== INTENTS ====================

@router.post("/intents")
async def dispatch_intent(
    payload: IntentPayload,
    storefront: Storefront = Depends(get_storefront),
):
    try:
        return await storefront.dispatch(payload.root)
    except CategoryNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
