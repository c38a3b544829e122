"""Narration synthesis using edge-tts."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import edge_tts
from pydantic import BaseModel

from .models import VoiceoverResult

logger = logging.getLogger(__name__)


class VoiceConfig(BaseModel):
    """Text-to-speech configuration."""

    voice: str = "en-US-AriaNeural"
    rate: str = "+10%"  # Speed: -50% to +100%
    pitch: str = "+0Hz"  # Pitch: -50Hz to +50Hz
    volume: str = "+0%"  # Volume: -50% to +50%
    timeout_seconds: float = 30.0


class VoiceSynthesizer:
    """Turns the script hook into a narration track.

    Synthesis is optional for a reel, so failures degrade to a
    transcript-only result instead of raising.
    """

    def __init__(self, config: VoiceConfig | None = None):
        self.config = config or VoiceConfig()

    async def _stream_to_file(self, text: str, audio_path: Path) -> None:
        communicate = edge_tts.Communicate(
            text,
            voice=self.config.voice,
            rate=self.config.rate,
            pitch=self.config.pitch,
            volume=self.config.volume,
        )
        with open(audio_path, "wb") as audio_file:
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    audio_file.write(chunk["data"])

    async def synthesize(self, text: str, audio_path: Path) -> VoiceoverResult:
        """Synthesize narration.

        Args:
            text: Text to speak.
            audio_path: Where to write the mp3.

        Returns:
            VoiceoverResult with audio_path set on success, None otherwise.
        """
        text = text.strip()
        if not text:
            return VoiceoverResult(text=text)

        audio_path = Path(audio_path)
        audio_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Generating narration with voice: {self.config.voice}")

        try:
            await asyncio.wait_for(
                self._stream_to_file(text, audio_path),
                timeout=self.config.timeout_seconds,
            )
        except Exception as e:
            logger.warning(f"Narration unavailable, keeping transcript only: {e}")
            audio_path.unlink(missing_ok=True)
            return VoiceoverResult(text=text)

        if not audio_path.exists() or audio_path.stat().st_size == 0:
            logger.warning("Narration produced no audio, keeping transcript only")
            audio_path.unlink(missing_ok=True)
            return VoiceoverResult(text=text)

        return VoiceoverResult(text=text, audio_path=audio_path)
