"""Typed per-clip effect operations.

Timeline semantics are expressed here as plain data. Nothing in this module
knows ffmpeg syntax; video/ffmpeg.py renders these operations to filter
strings in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..constants import (
    COLOR_CONTRAST,
    COLOR_SATURATION,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
)
from ..constants.video import (
    BRAND_COLOR,
    BRAND_FONT_SIZE,
    OVERSAMPLE_FACTOR,
    PRICE_COLOR,
    PRICE_FONT_SIZE,
    TITLE_COLOR,
    TITLE_FONT_SIZE,
    ZOOM_OUT_START,
    ZOOM_STEP_PER_FRAME,
)
from .models import Clip, OverlayKind, TextOverlay, ZoomDirection


@dataclass(frozen=True)
class Canvas:
    """Output frame geometry."""

    width: int = VIDEO_WIDTH
    height: int = VIDEO_HEIGHT
    fps: int = VIDEO_FPS

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def frame_duration(self) -> float:
        return 1.0 / self.fps


@dataclass(frozen=True)
class Oversample:
    """Scale the still up before zoom-pan so panning stays smooth."""

    width: int
    height: int


@dataclass(frozen=True)
class ZoomPan:
    """Centred Ken Burns zoom, one output frame per input frame."""

    direction: ZoomDirection
    width: int
    height: int
    fps: int
    start: float
    step: float


@dataclass(frozen=True)
class Trim:
    """Cut the clip to its on-screen duration and reset timestamps."""

    duration: float


@dataclass(frozen=True)
class ColorBoost:
    saturation: float
    contrast: float


@dataclass(frozen=True)
class DrawText:
    """Text overlay. x/y are expressions over w, h, text_w, text_h."""

    text: str
    color: str
    size: int
    x: str
    y: str
    box: bool = False


@dataclass(frozen=True)
class SetSar:
    """Square pixels so concat accepts every clip."""

    ratio: str = "1"


ClipOperation = Union[Oversample, ZoomPan, Trim, ColorBoost, DrawText, SetSar]

CENTER_X = "(w-text_w)/2"


def overlay_operation(overlay: TextOverlay) -> DrawText:
    """Styling for each overlay kind."""
    if overlay.kind == OverlayKind.BRAND:
        return DrawText(overlay.text, BRAND_COLOR, BRAND_FONT_SIZE, CENTER_X, "100")
    if overlay.kind == OverlayKind.TITLE:
        return DrawText(
            overlay.text, TITLE_COLOR, TITLE_FONT_SIZE, CENTER_X, "(h-text_h)/2", box=True
        )
    return DrawText(overlay.text, PRICE_COLOR, PRICE_FONT_SIZE, CENTER_X, "h-400")


def build_clip_operations(clip: Clip, canvas: Canvas | None = None) -> list[ClipOperation]:
    """Expand a clip into its ordered effect operations."""
    canvas = canvas or Canvas()
    start = ZOOM_OUT_START if clip.zoom == ZoomDirection.OUT else 1.0
    step = -ZOOM_STEP_PER_FRAME if clip.zoom == ZoomDirection.OUT else ZOOM_STEP_PER_FRAME

    operations: list[ClipOperation] = [
        Oversample(canvas.width * OVERSAMPLE_FACTOR, canvas.height * OVERSAMPLE_FACTOR),
        ZoomPan(clip.zoom, canvas.width, canvas.height, canvas.fps, start, step),
        Trim(clip.duration),
        ColorBoost(COLOR_SATURATION, COLOR_CONTRAST),
    ]
    operations.extend(overlay_operation(overlay) for overlay in clip.overlays)
    operations.append(SetSar())
    return operations
