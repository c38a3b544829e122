"""FFmpeg glue: locating the binary, rendering effect operations to filter
syntax, building argument lists and running the subprocess.

This is the only module that knows ffmpeg's argument and filtergraph syntax.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Awaitable, Callable

from ..constants import (
    AUDIO_CODEC,
    BACKGROUND_VOLUME,
    CLIP_TRANSITION_SECONDS,
    NARRATION_VOLUME,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_PIXEL_FORMAT,
    VIDEO_PRESET,
)
from .effects import (
    Canvas,
    ClipOperation,
    ColorBoost,
    DrawText,
    Oversample,
    SetSar,
    Trim,
    ZoomPan,
    build_clip_operations,
)
from .models import AudioMix, Timeline

logger = logging.getLogger("ffmpeg")

CommandRunner = Callable[[list[str], float], Awaitable[str]]


class EncoderProcessError(Exception):
    """FFmpeg/ffprobe could not be run, timed out or exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None):
        self.returncode = returncode
        super().__init__(message)


# =============================================================================
# LOCATING THE ENGINE
# =============================================================================

@lru_cache(maxsize=1)
def find_ffmpeg() -> str | None:
    """Locate ffmpeg once per process.

    Checks FFMPEG_BINARY first, then PATH.
    """
    configured = os.getenv("FFMPEG_BINARY")
    if configured and Path(configured).exists():
        return configured
    found = shutil.which("ffmpeg")
    if found:
        logger.info(f"Using ffmpeg at {found}")
    else:
        logger.warning("ffmpeg not found on PATH")
    return found


@lru_cache(maxsize=1)
def find_ffprobe() -> str | None:
    """Locate ffprobe next to ffmpeg, falling back to PATH."""
    ffmpeg = find_ffmpeg()
    if ffmpeg:
        sibling = Path(ffmpeg).with_name(Path(ffmpeg).name.replace("ffmpeg", "ffprobe"))
        if sibling.exists():
            return str(sibling)
    return shutil.which("ffprobe")


# =============================================================================
# RUNNING
# =============================================================================

async def run_command(args: list[str], timeout: float) -> str:
    """Run an external command without blocking the event loop.

    The child is killed when the timeout expires or the awaiting task is
    cancelled, so a run deadline also stops a running encode.

    Args:
        args: Full argument list, binary first.
        timeout: Seconds before the process is killed.

    Returns:
        Captured stdout.

    Raises:
        EncoderProcessError: Binary missing, timeout or non-zero exit.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise EncoderProcessError(f"Could not start {args[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        await _kill(process)
        raise EncoderProcessError(f"{Path(args[0]).name} timed out after {timeout:.0f}s") from e
    except asyncio.CancelledError:
        await _kill(process)
        raise

    if process.returncode != 0:
        error = stderr.decode("utf-8", errors="replace").strip()
        raise EncoderProcessError(
            f"{Path(args[0]).name} failed: {error[-300:]}",
            returncode=process.returncode,
        )
    return stdout.decode("utf-8", errors="replace")


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


# =============================================================================
# FILTER SYNTAX
# =============================================================================

def escape_ffmpeg_filter_path(path: str) -> str:
    """Escape a file path for use inside a single-quoted filter argument.

    Example:
        >>> escaped = escape_ffmpeg_filter_path("/tmp/John's font.ttf")
        >>> filter_arg = f"fontfile='{escaped}'"
    """
    return (
        path
        .replace("\\", "/")
        .replace("'", "'\\''")
        .replace(":", "\\:")
    )


def escape_drawtext(text: str) -> str:
    """Make overlay text safe inside ``text='...'``.

    Quotes and backslashes cannot survive both levels of filter unquoting,
    so they are replaced; colons are escaped for the option parser.
    """
    return (
        text
        .replace("\\", "/")
        .replace("'", "\u2019")
        .replace(":", "\\:")
    )


def _number(value: float) -> str:
    return f"{value:g}"


def render_operation(operation: ClipOperation, font_path: str | None = None) -> str:
    """Render one effect operation to an ffmpeg filter."""
    if isinstance(operation, Oversample):
        return f"scale={operation.width}:{operation.height}"

    if isinstance(operation, ZoomPan):
        sign = "-" if operation.step < 0 else "+"
        zoom = f"{_number(operation.start)}{sign}{_number(abs(operation.step))}*on"
        return (
            f"zoompan=z='{zoom}'"
            f":x='iw/2-(iw/zoom/2)':y='ih/2-(ih/zoom/2)'"
            f":d=1:s={operation.width}x{operation.height}:fps={operation.fps}"
        )

    if isinstance(operation, Trim):
        return f"trim=duration={_number(operation.duration)},setpts=PTS-STARTPTS"

    if isinstance(operation, ColorBoost):
        return (
            f"eq=saturation={_number(operation.saturation)}"
            f":contrast={_number(operation.contrast)}"
        )

    if isinstance(operation, DrawText):
        options = []
        if font_path:
            options.append(f"fontfile='{escape_ffmpeg_filter_path(font_path)}'")
        options.extend([
            f"text='{escape_drawtext(operation.text)}'",
            "expansion=none",
            f"fontcolor={operation.color}",
            f"fontsize={operation.size}",
            f"x={operation.x}",
            f"y={operation.y}",
        ])
        if operation.box:
            options.extend(["box=1", "boxcolor=black@0.5", "boxborderw=20"])
        return "drawtext=" + ":".join(options)

    if isinstance(operation, SetSar):
        return f"setsar={operation.ratio}"

    raise TypeError(f"Unsupported clip operation: {operation!r}")


def concat_list_entry(path: Path) -> str:
    """``file`` line for the concat demuxer."""
    return "file '{}'".format(str(Path(path).resolve()).replace("'", "'\\''"))


@dataclass
class VideoInfo:
    """What ffprobe reports about an encoded file."""

    width: int
    height: int
    duration: float

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


def parse_stream_info(stdout: str) -> VideoInfo:
    """Parse ``ffprobe -of json`` output for the first video stream.

    Raises:
        EncoderProcessError: No video stream or unreadable output.
    """
    try:
        data = json.loads(stdout)
        stream = data["streams"][0]
        duration = stream.get("duration") or data.get("format", {}).get("duration")
        return VideoInfo(
            width=int(stream["width"]),
            height=int(stream["height"]),
            duration=float(duration),
        )
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise EncoderProcessError(f"Unreadable ffprobe output: {e}") from e


class FFmpegCommandBuilder:
    """Builds ffmpeg/ffprobe argument lists from timelines.

    Args:
        ffmpeg: Path to the ffmpeg binary.
        canvas: Output geometry.
        font_path: Optional TTF for drawtext (needed on builds without fontconfig).
    """

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        canvas: Canvas | None = None,
        font_path: str | None = None,
    ):
        self.ffmpeg = ffmpeg
        self.canvas = canvas or Canvas()
        self.font_path = font_path

    def _encode_flags(self, total_duration: float) -> list[str]:
        return [
            "-c:v", VIDEO_CODEC,
            "-preset", VIDEO_PRESET,
            "-crf", str(VIDEO_CRF),
            "-pix_fmt", VIDEO_PIXEL_FORMAT,
            "-r", str(self.canvas.fps),
            "-t", _number(total_duration),
        ]

    def clip_chain(self, index: int, timeline: Timeline) -> str:
        operations = build_clip_operations(timeline.clips[index], self.canvas)
        filters = ",".join(render_operation(op, self.font_path) for op in operations)
        return f"[{index}:v]{filters}[v{index}]"

    def audio_chain(self, timeline: Timeline, background_index: int, voice_index: int) -> str:
        """Audio filtergraph ending in ``[aout]``. Empty for silent timelines."""
        fade = (
            f"afade=t=out:st={_number(timeline.fade_out_start)}"
            f":d={_number(timeline.fade_out_duration)}"
        )
        if timeline.audio_mix == AudioMix.MIXED:
            return (
                f"[{background_index}:a]volume={_number(BACKGROUND_VOLUME)}[bg];"
                f"[{voice_index}:a]volume={_number(NARRATION_VOLUME)}[voc];"
                f"[bg][voc]amix=inputs=2:duration=longest,{fade}[aout]"
            )
        if timeline.audio_mix == AudioMix.BACKGROUND_ONLY:
            return f"[{background_index}:a]{fade}[aout]"
        if timeline.audio_mix == AudioMix.NARRATION_ONLY:
            return f"[{voice_index}:a]apad,{fade}[aout]"
        return ""

    def filter_graph(self, timeline: Timeline) -> str:
        clip_count = len(timeline.clips)
        chains = [self.clip_chain(index, timeline) for index in range(clip_count)]
        labels = "".join(f"[v{index}]" for index in range(clip_count))
        chains.append(
            f"{labels}concat=n={clip_count}:v=1:a=0,format={VIDEO_PIXEL_FORMAT}[vout]"
        )

        next_input = clip_count
        background_index = voice_index = -1
        if timeline.audio_mix in (AudioMix.MIXED, AudioMix.BACKGROUND_ONLY):
            background_index = next_input
            next_input += 1
        if timeline.audio_mix in (AudioMix.MIXED, AudioMix.NARRATION_ONLY):
            voice_index = next_input

        audio = self.audio_chain(timeline, background_index, voice_index)
        if audio:
            chains.append(audio)
        return ";".join(chains)

    def primary(self, timeline: Timeline, output_path: Path) -> list[str]:
        """Full-effects encode: zoom-pan, colour boost, overlays and audio mix."""
        args = [self.ffmpeg, "-y", "-hide_banner", "-loglevel", "error"]
        hold = _number(timeline.clips[0].duration + CLIP_TRANSITION_SECONDS) if timeline.clips else "0"
        for clip in timeline.clips:
            args.extend([
                "-loop", "1",
                "-framerate", str(self.canvas.fps),
                "-t", hold,
                "-i", str(clip.image_path),
            ])

        if timeline.audio_mix in (AudioMix.MIXED, AudioMix.BACKGROUND_ONLY):
            args.extend(["-stream_loop", "-1", "-i", str(timeline.background_path)])
        if timeline.audio_mix in (AudioMix.MIXED, AudioMix.NARRATION_ONLY):
            args.extend(["-i", str(timeline.voice_path)])

        args.extend(["-filter_complex", self.filter_graph(timeline), "-map", "[vout]"])
        if not timeline.is_silent:
            args.extend(["-map", "[aout]", "-c:a", AUDIO_CODEC, "-b:a", "192k"])
        else:
            args.append("-an")

        args.extend(self._encode_flags(timeline.total_duration))
        args.extend(["-movflags", "+faststart", str(output_path)])
        return args

    def degraded(self, list_path: Path, total_duration: float, output_path: Path) -> list[str]:
        """Simple encode from a concat-demuxer list of pre-scaled stills."""
        scale = (
            f"scale={self.canvas.width}:{self.canvas.height},"
            f"setsar=1,fps={self.canvas.fps},format={VIDEO_PIXEL_FORMAT}"
        )
        return [
            self.ffmpeg, "-y", "-hide_banner", "-loglevel", "error",
            "-f", "concat", "-safe", "0",
            "-i", str(list_path),
            "-vf", scale,
            "-an",
            *self._encode_flags(total_duration),
            "-movflags", "+faststart",
            str(output_path),
        ]

    @staticmethod
    def stream_info(ffprobe: str, path: Path) -> list[str]:
        return [
            ffprobe, "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height,duration:format=duration",
            "-of", "json",
            str(path),
        ]
