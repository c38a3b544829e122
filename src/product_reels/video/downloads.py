"""Streaming downloads for product images and music."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from ..constants import DOWNLOAD_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


async def download_file(
    url: str,
    dest: Path,
    timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Path:
    """Download a URL to a local file.

    Args:
        url: Source URL.
        dest: Destination path (parent is created).
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests).

    Returns:
        The destination path.

    Raises:
        httpx.HTTPError: On network failure or non-2xx status.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    async with httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        follow_redirects=True,
    ) as client:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)

    logger.debug(f"Downloaded {url} -> {dest.name}")
    return dest
