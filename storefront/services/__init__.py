# Services Module
from .models import Product, Rating
from .catalog_source import CatalogSource

__all__ = ["Product", "Rating", "CatalogSource"]
