"""Catalog data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A catalog item. Read-only input to the pipeline."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    price: float = 0.0
    currency: str = "INR"
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    shop_url: str | None = None
    handle: str | None = None

    @property
    def price_label(self) -> str:
        """Price as shown on overlays and in captions."""
        return format_price(self.price, self.currency)


CURRENCY_PREFIXES = {
    "INR": "RS.",
    "USD": "$",
    "EUR": "EUR",
    "GBP": "GBP",
}


def format_price(price: float, currency: str = "INR") -> str:
    """Format a price for display, e.g. ``RS. 1299`` or ``$ 19.99``."""
    amount = str(int(price)) if float(price).is_integer() else f"{price:.2f}"
    prefix = CURRENCY_PREFIXES.get(currency.upper(), currency.upper())
    return f"{prefix} {amount}"
