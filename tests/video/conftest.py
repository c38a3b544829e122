"""Pytest fixtures for video module tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest

from product_reels.content.models import ReelGoal, ReelScript
from product_reels.video.models import VoiceoverResult


@pytest.fixture
def sample_script() -> ReelScript:
    return ReelScript(
        hook="Wait for this!",
        scenes=["Fast cuts", "Price end frame"],
        on_screen_text=["WAIT FOR THIS"],
        caption="new drop",
        hashtags=["#NewDrop"],
        cta="Link in bio",
        goal=ReelGoal.REACH,
        source="template",
    )


@pytest.fixture
def asset_transport(png_bytes):
    """Serves PNGs for image URLs and fake mp3 bytes for everything else.

    URLs containing ``broken`` answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if "broken" in url:
            return httpx.Response(404, text="not found")
        if url.endswith(".mp3"):
            return httpx.Response(200, content=b"ID3fake-mp3")
        return httpx.Response(200, content=png_bytes)

    return httpx.MockTransport(handler)


@pytest.fixture
def fake_voice():
    """VoiceSynthesizer stand-in that writes a small narration file."""
    voice = AsyncMock()

    async def synthesize(text: str, audio_path: Path) -> VoiceoverResult:
        audio_path.write_bytes(b"ID3voice")
        return VoiceoverResult(text=text, audio_path=audio_path)

    voice.synthesize.side_effect = synthesize
    return voice
