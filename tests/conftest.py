"""Shared test fixtures and configuration.

Network calls go through httpx.MockTransport, and sleep and randomness are
injected, so nothing here touches the network or waits in real time.
"""

from __future__ import annotations

import io
import random
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from product_reels.catalog.models import Product


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float = 0.5):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


class SleepRecorder:
    """Async sleep stand-in that records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fixed_rng() -> FixedRandom:
    """RNG with zero jitter for backoff tests."""
    return FixedRandom(0.5)


@pytest.fixture
def recorded_sleep() -> SleepRecorder:
    """Sleep that returns immediately and remembers its arguments."""
    return SleepRecorder()


def make_png_bytes(size: tuple[int, int] = (64, 96), color: str = "red") -> bytes:
    """Small valid PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing numbered test images into tmp_path."""

    def _make(name: str = "img.png", size: tuple[int, int] = (64, 96), color: str = "red") -> Path:
        path = tmp_path / name
        path.write_bytes(make_png_bytes(size, color))
        return path

    return _make


@pytest.fixture
def sample_product() -> Product:
    """Product with three images, priced in rupees."""
    return Product(
        id="gid://shopify/Product/8812345",
        title="Oversized Black Hoodie",
        description="Heavyweight cotton hoodie with a relaxed fit.",
        price=1299.0,
        currency="INR",
        category="Hoodies",
        tags=["streetwear", "winter"],
        images=[
            "https://cdn.example.com/hoodie-1.jpg",
            "https://cdn.example.com/hoodie-2.jpg",
            "https://cdn.example.com/hoodie-3.jpg",
        ],
        shop_url="https://shop.example.com/products/oversized-black-hoodie",
        handle="oversized-black-hoodie",
    )
