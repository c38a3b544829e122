"""Video-related constants for reel rendering.

This module contains the fixed vertical canvas, the per-clip timing used by
the timeline, the encoder settings and the overlay/mix styling.

MODIFICATION GUIDE:
------------------
- VIDEO_WIDTH/HEIGHT: Keep the 9:16 ratio, the platform rejects other shapes
- CLIP_*: The 7s floor and 15s ceiling are computed from CLIP_DURATION_SECONDS
- *_VOLUME: Multipliers applied before the background and narration are summed
"""

from typing import Final

# =============================================================================
# CANVAS
# =============================================================================

VIDEO_WIDTH: Final[int] = 1080
"""Output video width in pixels."""

VIDEO_HEIGHT: Final[int] = 1920
"""Output video height in pixels. 9:16 with 1080 width."""

VIDEO_RESOLUTION: Final[str] = f"{VIDEO_WIDTH}x{VIDEO_HEIGHT}"
"""Resolution string reported on rendered assets."""

VIDEO_FPS: Final[int] = 30
"""Frames per second of the rendered reel."""

OVERSAMPLE_FACTOR: Final[int] = 2
"""Images are scaled up by this factor before zoom-pan to avoid jitter."""


# =============================================================================
# TIMELINE
# =============================================================================

CLIP_DURATION_SECONDS: Final[float] = 0.6
"""On-screen time of every clip."""

CLIP_TRANSITION_SECONDS: Final[float] = 0.1
"""Extra input hold per clip so trimming never runs short."""

MIN_REEL_DURATION_SECONDS: Final[float] = 7.0
"""Image sequences are looped until the reel reaches this length."""

MAX_REEL_DURATION_SECONDS: Final[float] = 15.0
"""Reels longer than this are truncated to whole clips."""

MAX_SOURCE_IMAGES: Final[int] = 12
"""Only the first N product images are used."""

TITLE_OVERLAY_MAX_CHARS: Final[int] = 15
"""Product title overlays are cut to this many characters."""

ZOOM_STEP_PER_FRAME: Final[float] = 0.002
"""Zoom change per output frame for the Ken Burns effect."""

ZOOM_OUT_START: Final[float] = 1.5
"""Starting zoom for zoom-out clips."""


# =============================================================================
# ENCODING
# =============================================================================

VIDEO_CODEC: Final[str] = "libx264"
"""Video codec for output."""

VIDEO_PRESET: Final[str] = "fast"
"""x264 preset."""

VIDEO_CRF: Final[int] = 23
"""x264 constant rate factor."""

VIDEO_PIXEL_FORMAT: Final[str] = "yuv420p"
"""Pixel format accepted by every mobile player."""

AUDIO_CODEC: Final[str] = "aac"
"""Audio codec for output."""


# =============================================================================
# STYLING
# =============================================================================

COLOR_SATURATION: Final[float] = 1.5
"""Saturation multiplier applied to every clip."""

COLOR_CONTRAST: Final[float] = 1.2
"""Contrast multiplier applied to every clip."""

BRAND_COLOR: Final[str] = "0x39FF14"
"""Neon green brand mark."""

BRAND_FONT_SIZE: Final[int] = 80

TITLE_COLOR: Final[str] = "white"

TITLE_FONT_SIZE: Final[int] = 90

PRICE_COLOR: Final[str] = "0xFF0099"
"""Hot pink price label."""

PRICE_FONT_SIZE: Final[int] = 100


# =============================================================================
# AUDIO MIX
# =============================================================================

BACKGROUND_VOLUME: Final[float] = 0.4
"""Background music attenuation when narration is present."""

NARRATION_VOLUME: Final[float] = 1.5
"""Narration boost when mixed over background music."""

FADE_OUT_SECONDS: Final[float] = 2.0
"""Audio fade-out length at the end of the reel."""
