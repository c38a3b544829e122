"""Image-grounded product analysis through the vision-capable provider."""

from __future__ import annotations

import base64
import json
import logging
import re

import httpx
from pydantic import ValidationError

from ..constants import DOWNLOAD_TIMEOUT_SECONDS
from ..errors import AllProvidersFailed
from ..services.provider_cascade import ProviderCascade
from .models import ImageAnalysis
from .prompts import IMAGE_ANALYSIS_PROMPT

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class ProductImageAnalyzer:
    """Describes a product photo. Best effort: returns None on any failure."""

    def __init__(
        self,
        cascade: ProviderCascade,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cascade = cascade
        self._transport = transport

    async def _download(self, image_url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=DOWNLOAD_TIMEOUT_SECONDS,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            response = await client.get(image_url)
            response.raise_for_status()
            return response.content

    async def analyze(self, image_url: str) -> ImageAnalysis | None:
        try:
            image_bytes = await self._download(image_url)
        except httpx.HTTPError as e:
            logger.warning(f"Image analysis skipped, download failed: {e}")
            return None

        encoded = base64.b64encode(image_bytes).decode("ascii")
        try:
            raw = await self.cascade.generate(
                IMAGE_ANALYSIS_PROMPT,
                temperature=0.3,
                json_mode=True,
                images=[encoded],
            )
        except AllProvidersFailed as e:
            logger.info(f"Image analysis unavailable: {e}")
            return None

        match = _JSON_OBJECT.search(raw)
        try:
            data = json.loads(match.group(0) if match else raw)
            return ImageAnalysis.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Image analysis returned unusable JSON: {e}")
            return None
