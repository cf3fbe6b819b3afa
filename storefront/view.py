"""
View Assembler

Turns product lists and cart lines into display records. Records carry
both raw values (for clients doing their own math) and display strings.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from pydantic import BaseModel

from storefront.cart import CartStore
from storefront.catalog import ALL_CATEGORY
from storefront.errors import MESSAGE_CART_EMPTY
from storefront.services.models import Product
from storefront.services.money import format_money, multiply, to_decimal, to_float

CARD_TITLE_WIDTH = 46
CART_TITLE_WIDTH = 30
TRENDING_COUNT = 3


# ==================== FORMATTING ====================

def truncate(text: str, width: int = CARD_TITLE_WIDTH) -> str:
    return text[:width] + "..." if len(text) > width else text


def star_string(rate: float) -> str:
    """Rounded 5-star glyph string, e.g. 3.6 -> "★★★★☆"."""
    # Half-up, so 2.5 shows three stars
    filled = int(to_decimal(rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    filled = max(0, min(5, filled))
    return "★" * filled + "☆" * (5 - filled)


# ==================== RECORDS ====================

class ProductCard(BaseModel):
    id: int
    title: str
    full_title: str
    price: float
    price_display: str
    category: str
    image: str
    rate: float
    rating_count: int
    stars: str


class ProductDetails(BaseModel):
    id: int
    title: str
    description: str
    category: str
    image: str
    price: float
    price_display: str
    rate: float
    rating_count: int


class CatalogView(BaseModel):
    """Grid content for the selected category and query."""
    category: str = ALL_CATEGORY
    query: str = ""
    products: List[ProductCard] = []
    error: Optional[str] = None


class DetailsView(BaseModel):
    product: Optional[ProductDetails] = None
    error: Optional[str] = None
    # Catalog answered that the id does not exist
    not_found: bool = False


class CartRow(BaseModel):
    product_id: int
    title: str
    image: str
    unit_price: float
    unit_price_display: str
    quantity: int
    line_total: float


class CartView(BaseModel):
    rows: List[CartRow] = []
    item_count: int = 0
    amount_due: float = 0.0
    total_display: str = format_money(0)
    message: Optional[str] = None


# ==================== BUILDERS ====================

def product_card(product: Product) -> ProductCard:
    rate = product.rating.rate
    return ProductCard(
        id=product.id,
        title=truncate(product.title),
        full_title=product.title,
        price=to_float(product.price),
        price_display=format_money(product.price),
        category=product.category,
        image=product.image,
        rate=rate,
        rating_count=product.rating.count,
        stars=star_string(rate),
    )


def render_products(products: List[Product]) -> List[ProductCard]:
    return [product_card(p) for p in products]


def render_trending(products: List[Product]) -> List[ProductCard]:
    return render_products(products[:TRENDING_COUNT])


def render_details(product: Product) -> DetailsView:
    return DetailsView(
        product=ProductDetails(
            id=product.id,
            title=product.title,
            description=product.description,
            category=product.category,
            image=product.image,
            price=to_float(product.price),
            price_display=format_money(product.price),
            rate=product.rating.rate,
            rating_count=product.rating.count,
        )
    )


def render_cart(cart: CartStore) -> CartView:
    """
    One row per cart line plus aggregate count and total.

    Title, image and price are joined from the full catalog; a line whose
    product is not loaded yet shows its id and a zero price.
    """
    rows = []
    for line in cart.lines:
        product = cart.catalog.find_product(line.product_id)
        price = product.price if product else 0
        rows.append(
            CartRow(
                product_id=line.product_id,
                title=truncate(product.title, CART_TITLE_WIDTH) if product else f"#{line.product_id}",
                image=product.image if product else "",
                unit_price=to_float(price),
                unit_price_display=format_money(price),
                quantity=line.quantity,
                line_total=to_float(multiply(price, line.quantity)),
            )
        )

    totals = cart.totals()
    return CartView(
        rows=rows,
        item_count=totals.item_count,
        amount_due=to_float(totals.amount_due),
        total_display=format_money(totals.amount_due),
        message=None if rows else MESSAGE_CART_EMPTY,
    )
