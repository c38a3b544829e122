"""Shopify Storefront catalog reader.

Reads products over the Storefront GraphQL API. This is a plain read with no
retry contract; the pipeline treats catalog data as reliable input.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Protocol

import httpx

from ..errors import CatalogError
from .models import Product

logger = logging.getLogger(__name__)

STOREFRONT_API_VERSION = "2024-01"

_PRODUCT_FIELDS = """
    id
    title
    description
    handle
    productType
    tags
    onlineStoreUrl
    priceRange { minVariantPrice { amount currencyCode } }
    images(first: 12) { edges { node { url } } }
"""

PRODUCT_QUERY = f"""
query Product($id: ID!) {{
  product(id: $id) {{ {_PRODUCT_FIELDS} }}
}}
"""

PRODUCTS_QUERY = f"""
query Products($first: Int!) {{
  products(first: $first) {{ edges {{ node {{ {_PRODUCT_FIELDS} }} }} }}
}}
"""


class Catalog(Protocol):
    """Source of products for the pipeline."""

    async def fetch_product(self, product_id: str) -> Product: ...

    async def fetch_random_product(self) -> Product: ...


def product_from_node(node: dict[str, Any], store_domain: str = "") -> Product:
    """Map a Storefront product node to a Product."""
    price = (node.get("priceRange") or {}).get("minVariantPrice") or {}
    images = [
        edge["node"]["url"]
        for edge in (node.get("images") or {}).get("edges", [])
        if edge.get("node", {}).get("url")
    ]
    handle = node.get("handle")
    shop_url = node.get("onlineStoreUrl")
    if not shop_url and handle and store_domain:
        shop_url = f"https://{store_domain}/products/{handle}"

    return Product(
        id=node["id"],
        title=node.get("title") or "",
        description=node.get("description") or "",
        price=float(price.get("amount") or 0),
        currency=price.get("currencyCode") or "INR",
        category=node.get("productType") or "",
        tags=list(node.get("tags") or []),
        images=images,
        shop_url=shop_url,
        handle=handle,
    )


class ShopifyCatalog:
    """Storefront API client implementing the Catalog protocol."""

    def __init__(
        self,
        store_domain: str,
        storefront_token: str,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
        page_size: int = 50,
    ):
        self.store_domain = store_domain
        self.storefront_token = storefront_token
        self.page_size = page_size
        self._transport = transport
        self._rng = rng or random.Random()

    @property
    def endpoint(self) -> str:
        return f"https://{self.store_domain}/api/{STOREFRONT_API_VERSION}/graphql.json"

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Storefront-Access-Token": self.storefront_token,
        }
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogError(f"Shopify request failed: {e}") from e

        if result.get("errors"):
            raise CatalogError(f"Shopify GraphQL error: {result['errors']}")
        return result.get("data") or {}

    async def fetch_product(self, product_id: str) -> Product:
        data = await self._query(PRODUCT_QUERY, {"id": product_id})
        node = data.get("product")
        if not node:
            raise CatalogError(f"Product not found: {product_id}")
        return product_from_node(node, self.store_domain)

    async def fetch_random_product(self) -> Product:
        data = await self._query(PRODUCTS_QUERY, {"first": self.page_size})
        edges = (data.get("products") or {}).get("edges", [])
        products = [product_from_node(edge["node"], self.store_domain) for edge in edges]
        with_images = [p for p in products if p.images]
        if not with_images:
            raise CatalogError("No products with images in catalog")
        product = self._rng.choice(with_images)
        logger.info(f"Picked random product {product.id} ({product.title})")
        return product
