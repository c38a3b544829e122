"""Instagram Graph API client for reel containers."""

from __future__ import annotations

import logging
import re
import unicodedata

import httpx

from ..constants import INSTAGRAM_CAPTION_MAX_LENGTH
from .models import InstagramConfig

_api_logger = logging.getLogger("instagram_api")


def sanitize_caption(caption: str) -> str:
    """Clean a caption for the Graph API.

    Normalizes to NFC, drops control characters and invisible spacing
    (keeping newlines, tabs and the emoji joiner), collapses runs of blank
    lines and truncates to the platform limit.
    """
    if not caption:
        return ""

    caption = unicodedata.normalize("NFC", caption)

    replacements = {
        '\u00a0': ' ',   # Non-breaking space
        '\u200b': '',    # Zero-width space
        '\ufeff': '',    # BOM
        '\u00ad': '',    # Soft hyphen
        '\u2028': '\n',  # Line separator
        '\u2029': '\n',  # Paragraph separator
    }
    for old, new in replacements.items():
        caption = caption.replace(old, new)

    cleaned = []
    for char in caption:
        if char in "\n\t":
            cleaned.append(char)
        elif char == "\r":
            continue
        elif unicodedata.category(char) == "Cc":
            continue
        else:
            cleaned.append(char)
    caption = "".join(cleaned)

    caption = re.sub(r"\n{3,}", "\n\n", caption)
    return caption.strip()[:INSTAGRAM_CAPTION_MAX_LENGTH]


class InstagramAPIError(Exception):
    """Error returned by the Graph API (or an unreadable response)."""

    def __init__(
        self,
        message: str,
        error_code: int | None = None,
        error_subcode: int | None = None,
        is_retryable: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.is_retryable = is_retryable
        self.status_code = status_code


# Graph error codes that clear up on their own
RETRYABLE_ERROR_CODES = {1, 2, 4, 9, 17, 2207026, 2207032}


class InstagramClient:
    """Instagram Graph API client for publishing reels.

    Implements the container-based publishing workflow:
    1. Create a REELS container from a public video URL
    2. Poll the container until processing finishes
    3. Publish the container

    API Reference:
    https://developers.facebook.com/docs/instagram-platform/instagram-graph-api/content-publishing
    """

    def __init__(
        self,
        config: InstagramConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 60.0,
    ):
        self.config = config
        self.base_url = f"https://graph.facebook.com/{config.api_version}"
        self._transport = transport
        self._timeout = timeout
        self._api_call_count = 0

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
    ) -> dict:
        """Make a request to the Instagram Graph API.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint (without base URL)
            params: Query parameters

        Returns:
            JSON response as dict

        Raises:
            InstagramAPIError: If the API returns an error or a non-JSON body
            httpx.HTTPError: On network failure
        """
        self._api_call_count += 1
        url = f"{self.base_url}/{endpoint}"

        params = dict(params or {})
        log_params = {k: v for k, v in params.items() if k != "caption"}
        params["access_token"] = self.config.access_token
        _api_logger.info(
            f"API CALL #{self._api_call_count} | {method} {endpoint} | params: {log_params}"
        )

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            if method.upper() == "GET":
                response = await client.get(url, params=params)
            elif method.upper() == "POST":
                response = await client.post(url, params=params)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

        try:
            result = response.json()
        except ValueError as e:
            raise InstagramAPIError(
                f"HTTP {response.status_code}: non-JSON response",
                status_code=response.status_code,
                is_retryable=response.status_code >= 500,
            ) from e

        if isinstance(result, dict) and "error" in result:
            error = result["error"]
            _api_logger.error(f"API CALL #{self._api_call_count} | ERROR: {error}")
            error_code = error.get("code")
            raise InstagramAPIError(
                message=error.get("message", "Unknown API error"),
                error_code=error_code,
                error_subcode=error.get("error_subcode"),
                is_retryable=error_code in RETRYABLE_ERROR_CODES,
                status_code=response.status_code,
            )

        if not response.is_success or not isinstance(result, dict):
            raise InstagramAPIError(
                f"HTTP {response.status_code}: unexpected response",
                status_code=response.status_code,
                is_retryable=response.status_code >= 500,
            )

        _api_logger.info(f"API CALL #{self._api_call_count} | SUCCESS: {list(result.keys())}")
        return result

    async def create_reel_container(
        self,
        video_url: str,
        caption: str,
        cover_url: str | None = None,
        share_to_feed: bool = True,
    ) -> str:
        """Create a REELS media container.

        Args:
            video_url: Public URL of the mp4
            caption: Post caption (sanitized and cut to 2200 chars)
            cover_url: Optional cover image URL
            share_to_feed: Also show the reel in the main feed

        Returns:
            Container ID (creation_id)
        """
        endpoint = f"{self.config.instagram_user_id}/media"
        params = {
            "media_type": "REELS",
            "video_url": video_url,
            "caption": sanitize_caption(caption),
            "share_to_feed": "true" if share_to_feed else "false",
        }
        if cover_url:
            params["cover_url"] = cover_url

        result = await self._make_request("POST", endpoint, params=params)
        if "id" not in result:
            raise InstagramAPIError("Container response has no id")
        return result["id"]

    async def get_container_status(self, container_id: str) -> dict:
        """Read a container's processing status.

        Returns:
            Dict with status_code and status fields
        """
        return await self._make_request(
            "GET", container_id, params={"fields": "status_code,status"}
        )

    async def publish_container(self, creation_id: str) -> str:
        """Publish a finished container.

        Returns:
            Media ID of the published post
        """
        endpoint = f"{self.config.instagram_user_id}/media_publish"
        result = await self._make_request("POST", endpoint, params={"creation_id": creation_id})
        if "id" not in result:
            raise InstagramAPIError("Publish response has no id")
        return result["id"]

    async def get_media_permalink(self, media_id: str) -> str | None:
        """Get the permalink for a published media, or None."""
        try:
            result = await self._make_request("GET", media_id, params={"fields": "permalink"})
            return result.get("permalink")
        except (InstagramAPIError, httpx.HTTPError):
            return None
