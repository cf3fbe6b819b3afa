"""
Storefront intents.

Every visitor action is an explicit, typed intent. The Storefront routes
each intent to one handler by its `kind`.
"""
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, RootModel


class IntentType(str, Enum):
    """Visitor intent kinds."""
    SELECT_CATEGORY = "select_category"
    SEARCH = "search"
    SHOW_DETAILS = "show_details"
    ADD_TO_CART = "add_to_cart"
    INCREMENT = "increment"
    DECREMENT = "decrement"
    REMOVE_FROM_CART = "remove_from_cart"


class SelectCategory(BaseModel):
    kind: Literal[IntentType.SELECT_CATEGORY] = IntentType.SELECT_CATEGORY
    name: str


class Search(BaseModel):
    kind: Literal[IntentType.SEARCH] = IntentType.SEARCH
    query: str = ""


class ShowDetails(BaseModel):
    kind: Literal[IntentType.SHOW_DETAILS] = IntentType.SHOW_DETAILS
    product_id: int


class AddToCart(BaseModel):
    kind: Literal[IntentType.ADD_TO_CART] = IntentType.ADD_TO_CART
    product_id: int


class Increment(BaseModel):
    kind: Literal[IntentType.INCREMENT] = IntentType.INCREMENT
    product_id: int


class Decrement(BaseModel):
    kind: Literal[IntentType.DECREMENT] = IntentType.DECREMENT
    product_id: int


class RemoveFromCart(BaseModel):
    kind: Literal[IntentType.REMOVE_FROM_CART] = IntentType.REMOVE_FROM_CART
    product_id: int


Intent = Annotated[
    Union[SelectCategory, Search, ShowDetails, AddToCart, Increment, Decrement, RemoveFromCart],
    Field(discriminator="kind"),
]


class IntentPayload(RootModel[Intent]):
    """Request body holding one intent, e.g. {"kind": "add_to_cart", "product_id": 3}."""
