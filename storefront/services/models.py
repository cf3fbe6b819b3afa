"""Catalog Models - Pydantic models for catalog entities."""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Rating(BaseModel):
    """Average review score and review count. Missing values read as 0."""
    model_config = ConfigDict(frozen=True)

    rate: float = Field(default=0.0, ge=0, le=5)
    count: int = Field(default=0, ge=0)

    @field_validator("rate", "count", mode="before")
    @classmethod
    def null_as_zero(cls, v):
        return 0 if v is None else v


class Product(BaseModel):
    """Product as returned by the Catalog Source. Immutable once fetched."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    title: str
    price: Decimal = Field(ge=0)
    category: str = ""
    image: str = ""
    description: str = ""
    rating: Rating = Field(default_factory=Rating)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        # Floats go through str to keep 19.99 exact; anything else is
        # left to pydantic's Decimal parsing, which rejects garbage
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, v: Optional[dict]):
        return Rating() if v is None else v
