"""Tests for narration synthesis with edge-tts mocked out."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from product_reels.video.voice import VoiceConfig, VoiceSynthesizer


class FakeCommunicate:
    """Mimics edge_tts.Communicate.stream()."""

    chunks = [
        {"type": "audio", "data": b"ID3"},
        {"type": "WordBoundary", "offset": 0, "duration": 1000, "text": "Wait"},
        {"type": "audio", "data": b"more"},
    ]

    def __init__(self, text, voice, rate, pitch, volume):
        self.text = text
        self.voice = voice

    async def stream(self):
        for chunk in self.chunks:
            yield chunk


class BrokenCommunicate(FakeCommunicate):

    async def stream(self):
        raise ConnectionError("service unavailable")
        yield


@pytest.mark.asyncio
async def test_writes_audio_chunks(tmp_path):
    synthesizer = VoiceSynthesizer(VoiceConfig(voice="en-GB-SoniaNeural"))
    with patch("product_reels.video.voice.edge_tts.Communicate", FakeCommunicate):
        result = await synthesizer.synthesize("Wait for this!", tmp_path / "narration.mp3")

    assert result.audio_path == tmp_path / "narration.mp3"
    assert result.audio_path.read_bytes() == b"ID3more"
    assert not result.transcript_only


@pytest.mark.asyncio
async def test_failure_keeps_transcript_only(tmp_path):
    with patch("product_reels.video.voice.edge_tts.Communicate", BrokenCommunicate):
        result = await VoiceSynthesizer().synthesize("Wait for this!", tmp_path / "narration.mp3")

    assert result.transcript_only
    assert result.text == "Wait for this!"
    assert not (tmp_path / "narration.mp3").exists()


@pytest.mark.asyncio
async def test_blank_text_skips_synthesis(tmp_path):
    with patch("product_reels.video.voice.edge_tts.Communicate") as communicate:
        result = await VoiceSynthesizer().synthesize("   ", tmp_path / "narration.mp3")

    assert result.transcript_only
    communicate.assert_not_called()
