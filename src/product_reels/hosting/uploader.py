"""Temporary public hosting for rendered reels.

The social platform fetches the video from a public URL, so the file is
pushed to a free temporary host first. file.io is tried once, then
tmpfiles.org once; neither has a documented transient-failure contract, so
there is no retry within a host.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx

from ..constants import UPLOAD_TIMEOUT_SECONDS
from ..errors import AllUploadTargetsFailed
from .models import HostedAsset

logger = logging.getLogger(__name__)


class HostUploadError(Exception):
    """One hosting service rejected the upload."""

    def __init__(self, host: str, message: str):
        self.host = host
        super().__init__(f"{host}: {message}")


class HostingTarget(ABC):
    """A temporary file host reachable by multipart upload."""

    name: str = "host"
    upload_url: str = ""

    def __init__(
        self,
        timeout: float = UPLOAD_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self._transport = transport

    def form_fields(self) -> dict[str, str]:
        return {}

    async def _post(self, path: Path) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                with open(path, "rb") as f:
                    response = await client.post(
                        self.upload_url,
                        files={"file": (path.name, f, "video/mp4")},
                        data=self.form_fields(),
                    )
        except httpx.HTTPError as e:
            raise HostUploadError(self.name, f"network error: {e}") from e

        if not response.is_success:
            raise HostUploadError(
                self.name, f"HTTP {response.status_code}: {response.text[:200]}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise HostUploadError(self.name, "response is not JSON") from e
        if not isinstance(data, dict):
            raise HostUploadError(self.name, "unexpected response shape")
        return data

    @abstractmethod
    async def upload(self, path: Path) -> HostedAsset:
        """Upload a file and return its public location.

        Raises:
            HostUploadError: Any failure, including malformed responses.
        """


class FileIoHost(HostingTarget):
    """file.io: direct download links, one day expiry."""

    name = "file.io"
    upload_url = "https://file.io"

    def form_fields(self) -> dict[str, str]:
        return {"expires": "1d", "autoDelete": "false"}

    async def upload(self, path: Path) -> HostedAsset:
        data = await self._post(path)
        if not data.get("success") or not data.get("link"):
            raise HostUploadError(self.name, f"upload rejected: {data.get('message', data)}")
        return HostedAsset(
            url=data["link"],
            expires=str(data.get("expires") or "1 day"),
            host=self.name,
        )


_TMPFILES_VIEW = re.compile(r"^https?://tmpfiles\.org/(?!dl/)")


def normalize_tmpfiles_url(url: str) -> str:
    """Rewrite a tmpfiles.org view URL into its direct-download form.

    ``http://tmpfiles.org/123/reel.mp4`` -> ``https://tmpfiles.org/dl/123/reel.mp4``
    """
    direct = _TMPFILES_VIEW.sub("https://tmpfiles.org/dl/", url)
    if direct.startswith("http://"):
        direct = "https://" + direct[len("http://"):]
    return direct


class TmpFilesHost(HostingTarget):
    """tmpfiles.org: returns a view page URL, one hour expiry."""

    name = "tmpfiles.org"
    upload_url = "https://tmpfiles.org/api/v1/upload"

    async def upload(self, path: Path) -> HostedAsset:
        data = await self._post(path)
        url = (data.get("data") or {}).get("url")
        if data.get("status") != "success" or not url:
            raise HostUploadError(self.name, f"upload rejected: {data}")
        return HostedAsset(url=normalize_tmpfiles_url(url), expires="1 hour", host=self.name)


class AssetPublisher:
    """Makes a rendered file reachable by public URL.

    Example:
        publisher = AssetPublisher()
        hosted = await publisher.publish(Path("reel.mp4"))
    """

    def __init__(
        self,
        primary: HostingTarget | None = None,
        secondary: HostingTarget | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.primary = primary or FileIoHost(transport=transport)
        self.secondary = secondary or TmpFilesHost(transport=transport)

    async def publish(self, path: Path) -> HostedAsset:
        """Upload to the primary host, falling back once to the secondary.

        Args:
            path: Local file to upload.

        Returns:
            HostedAsset with the public URL and expiry hint.

        Raises:
            AllUploadTargetsFailed: Both hosts failed; carries both messages.
        """
        path = Path(path)
        size_mb = path.stat().st_size / (1024 * 1024)
        logger.info(f"Uploading {path.name} ({size_mb:.1f} MB) to {self.primary.name}")

        try:
            hosted = await self.primary.upload(path)
            logger.info(f"Uploaded to {hosted.host}: {hosted.url}")
            return hosted
        except HostUploadError as e:
            primary_error = str(e)
            logger.warning(f"Primary upload failed, trying {self.secondary.name}: {primary_error}")

        try:
            hosted = await self.secondary.upload(path)
        except HostUploadError as e:
            raise AllUploadTargetsFailed(primary_error, str(e)) from e

        logger.info(f"Uploaded to {hosted.host}: {hosted.url}")
        return hosted
