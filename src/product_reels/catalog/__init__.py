"""Product catalog access."""

from .models import Product, format_price
from .shopify import Catalog, ShopifyCatalog, product_from_node

__all__ = ["Product", "format_price", "Catalog", "ShopifyCatalog", "product_from_node"]
