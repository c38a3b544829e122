"""Data models for reel timelines and rendered output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..constants import FADE_OUT_SECONDS, VIDEO_RESOLUTION


class AudioStyle(str, Enum):
    """Background music style tags."""

    PHONK = "phonk"
    LOFI = "lofi"
    UPBEAT = "upbeat"
    CINEMATIC = "cinematic"


@dataclass(frozen=True)
class AudioTrack:
    """A curated background track. bpm is approximate."""

    name: str
    style: AudioStyle
    url: str
    bpm: int


class ZoomDirection(str, Enum):
    """Ken Burns direction for a clip."""

    IN = "in"
    OUT = "out"


class OverlayKind(str, Enum):
    """Which piece of product info an overlay carries."""

    BRAND = "brand"
    TITLE = "title"
    PRICE = "price"


@dataclass(frozen=True)
class TextOverlay:
    """Text drawn over a clip."""

    kind: OverlayKind
    text: str


@dataclass(frozen=True)
class Clip:
    """One still image shown for a fixed duration."""

    image_path: Path
    duration: float
    zoom: ZoomDirection
    overlays: tuple[TextOverlay, ...] = ()


class AudioMix(str, Enum):
    """How the audio tracks are combined."""

    MIXED = "mixed"
    BACKGROUND_ONLY = "background_only"
    NARRATION_ONLY = "narration_only"
    SILENT = "silent"


@dataclass(frozen=True)
class Timeline:
    """Fully specified plan for rendering a reel.

    Built once per run and consumed once by the encoder.
    """

    clips: tuple[Clip, ...]
    total_duration: float
    audio_track: AudioTrack | None = None
    background_path: Path | None = None
    voice_path: Path | None = None
    audio_mix: AudioMix = AudioMix.SILENT
    fade_out_duration: float = FADE_OUT_SECONDS

    @property
    def fade_out_start(self) -> float:
        return max(0.0, round(self.total_duration - self.fade_out_duration, 3))

    @property
    def is_silent(self) -> bool:
        return self.audio_mix == AudioMix.SILENT

    @property
    def clip_plan(self) -> list[tuple[str, float, str, tuple[str, ...]]]:
        """Comparable summary of the clips (path, duration, zoom, overlay texts)."""
        return [
            (str(clip.image_path), clip.duration, clip.zoom.value,
             tuple(overlay.text for overlay in clip.overlays))
            for clip in self.clips
        ]


@dataclass
class VoiceoverResult:
    """Narration synthesis outcome.

    audio_path is None when synthesis was unavailable; text still carries the
    transcript so it can be recorded manually.
    """

    text: str
    audio_path: Path | None = None

    @property
    def transcript_only(self) -> bool:
        return self.audio_path is None


@dataclass
class RenderedAsset:
    """Encoded reel on local disk."""

    path: Path
    duration: float
    resolution: str = VIDEO_RESOLUTION
    degraded: bool = False
