"""Timeline planning and ffmpeg rendering for product reels.

Components:
    - audio_library.py: Curated background tracks by style
    - voice.py: edge-tts narration
    - timeline.py: Clip plan and audio mix
    - effects.py: Typed per-clip operations
    - ffmpeg.py: Filter syntax, argument lists, subprocess runner
    - encoder.py: Primary and degraded render paths
"""

from .audio_library import TRACKS, AudioLibrary
from .effects import Canvas, build_clip_operations
from .encoder import MediaEncoder
from .ffmpeg import EncoderProcessError, FFmpegCommandBuilder, find_ffmpeg, run_command
from .models import (
    AudioMix,
    AudioStyle,
    AudioTrack,
    Clip,
    OverlayKind,
    RenderedAsset,
    TextOverlay,
    Timeline,
    VoiceoverResult,
    ZoomDirection,
)
from .timeline import TimelineBuilder, clip_count_for, plan_clips
from .voice import VoiceConfig, VoiceSynthesizer

__all__ = [
    "AudioLibrary",
    "TRACKS",
    "Canvas",
    "build_clip_operations",
    "MediaEncoder",
    "EncoderProcessError",
    "FFmpegCommandBuilder",
    "find_ffmpeg",
    "run_command",
    "AudioMix",
    "AudioStyle",
    "AudioTrack",
    "Clip",
    "OverlayKind",
    "RenderedAsset",
    "TextOverlay",
    "Timeline",
    "VoiceoverResult",
    "ZoomDirection",
    "TimelineBuilder",
    "clip_count_for",
    "plan_clips",
    "VoiceConfig",
    "VoiceSynthesizer",
]
