"""Render a Timeline to an mp4.

The primary path builds one filter graph with zoom-pan, colour boost,
overlays and the audio mix. Any failure there (crash, timeout, bad output)
switches to the degraded path: stills letterboxed with Pillow, concatenated
with fixed durations, no overlays and no audio. The encoder itself is never
retried.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageOps

from ..constants import DEGRADED_ENCODE_TIMEOUT_SECONDS, PRIMARY_ENCODE_TIMEOUT_SECONDS
from ..errors import EncodingFailed
from .effects import Canvas
from .ffmpeg import (
    CommandRunner,
    EncoderProcessError,
    FFmpegCommandBuilder,
    VideoInfo,
    concat_list_entry,
    find_ffmpeg,
    find_ffprobe,
    parse_stream_info,
    run_command,
)
from .models import RenderedAsset, Timeline

logger = logging.getLogger(__name__)


def letterbox_image(source: Path, dest: Path, canvas: Canvas) -> Path:
    """Fit an image inside the canvas, padding with black."""
    with Image.open(source) as image:
        image = ImageOps.exif_transpose(image).convert("RGB")
        fitted = ImageOps.pad(
            image,
            (canvas.width, canvas.height),
            method=Image.Resampling.LANCZOS,
            color=(0, 0, 0),
        )
        fitted.save(dest, "JPEG", quality=92)
    return dest


class MediaEncoder:
    """Renders timelines with ffmpeg.

    Args:
        runner: Async command runner (injected in tests).
        canvas: Output geometry.
        font_path: Optional TTF used by drawtext.
        ffmpeg_path: Override for the ffmpeg binary.
        ffprobe_path: Override for ffprobe; output checks are skipped
            when none can be found.
        verify_output: Inspect the result for resolution and duration.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        canvas: Canvas | None = None,
        font_path: str | None = None,
        ffmpeg_path: str | None = None,
        ffprobe_path: str | None = None,
        verify_output: bool = True,
        primary_timeout: float = PRIMARY_ENCODE_TIMEOUT_SECONDS,
        degraded_timeout: float = DEGRADED_ENCODE_TIMEOUT_SECONDS,
    ):
        self.runner = runner or run_command
        self.canvas = canvas or Canvas()
        self.font_path = font_path
        self._ffmpeg_path = ffmpeg_path
        self._ffprobe_path = ffprobe_path
        self.verify_output = verify_output
        self.primary_timeout = primary_timeout
        self.degraded_timeout = degraded_timeout

    def _commands(self) -> FFmpegCommandBuilder:
        ffmpeg = self._ffmpeg_path or find_ffmpeg()
        if not ffmpeg:
            raise EncoderProcessError("ffmpeg not found (install it or set FFMPEG_BINARY)")
        return FFmpegCommandBuilder(ffmpeg, self.canvas, self.font_path)

    async def inspect(self, path: Path) -> VideoInfo | None:
        """Read resolution and duration, or None when ffprobe is unavailable."""
        ffprobe = self._ffprobe_path or find_ffprobe()
        if not ffprobe:
            return None
        stdout = await self.runner(FFmpegCommandBuilder.stream_info(ffprobe, path), 30.0)
        return parse_stream_info(stdout)

    async def _check_output(self, path: Path, expected_duration: float) -> float:
        """Validate an encoded file and return its duration.

        Raises:
            EncoderProcessError: Missing/empty file, wrong size or duration.
        """
        if not path.exists() or path.stat().st_size == 0:
            raise EncoderProcessError(f"Encoder produced no output at {path}")
        if not self.verify_output:
            return expected_duration

        info = await self.inspect(path)
        if info is None:
            return expected_duration
        if info.resolution != self.canvas.resolution:
            raise EncoderProcessError(
                f"Output is {info.resolution}, expected {self.canvas.resolution}"
            )
        if abs(info.duration - expected_duration) > self.canvas.frame_duration + 1e-6:
            raise EncoderProcessError(
                f"Output lasts {info.duration:.3f}s, expected {expected_duration:.3f}s"
            )
        return info.duration

    async def render_primary(self, timeline: Timeline, output_path: Path) -> RenderedAsset:
        """Full-effects render. Raises on any failure."""
        args = self._commands().primary(timeline, output_path)
        logger.info(
            f"Rendering {len(timeline.clips)} clips, {timeline.total_duration:.1f}s, "
            f"audio={timeline.audio_mix.value}"
        )
        await self.runner(args, self.primary_timeout)
        duration = await self._check_output(output_path, timeline.total_duration)
        return RenderedAsset(path=output_path, duration=duration, resolution=self.canvas.resolution)

    async def render_degraded(self, timeline: Timeline, output_path: Path) -> RenderedAsset:
        """Simplified render from letterboxed stills. Raises on any failure."""
        workdir = output_path.parent
        scaled: dict[Path, Path] = {}
        for clip in timeline.clips:
            if clip.image_path not in scaled:
                dest = workdir / f"scaled_{len(scaled)}.jpg"
                try:
                    scaled[clip.image_path] = letterbox_image(clip.image_path, dest, self.canvas)
                except OSError as e:
                    raise EncoderProcessError(f"Cannot prepare {clip.image_path.name}: {e}") from e

        lines = []
        for clip in timeline.clips:
            lines.append(concat_list_entry(scaled[clip.image_path]))
            lines.append(f"duration {clip.duration:g}")
        # concat demuxer ignores the duration of the final entry
        lines.append(concat_list_entry(scaled[timeline.clips[-1].image_path]))

        list_path = workdir / "concat.txt"
        list_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

        args = self._commands().degraded(list_path, timeline.total_duration, output_path)
        await self.runner(args, self.degraded_timeout)
        duration = await self._check_output(output_path, timeline.total_duration)
        return RenderedAsset(
            path=output_path,
            duration=duration,
            resolution=self.canvas.resolution,
            degraded=True,
        )

    async def encode(self, timeline: Timeline, output_path: Path) -> RenderedAsset:
        """Render a timeline, falling back to the degraded path once.

        Args:
            timeline: Planned clips and audio.
            output_path: Destination mp4.

        Returns:
            RenderedAsset at output_path.

        Raises:
            EncodingFailed: Both render paths failed.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            return await self.render_primary(timeline, output_path)
        except Exception as e:
            primary_error = str(e)
            logger.warning(f"Primary render failed, switching to simple render: {primary_error}")
            output_path.unlink(missing_ok=True)

        try:
            asset = await self.render_degraded(timeline, output_path)
        except Exception as e:
            output_path.unlink(missing_ok=True)
            logger.error(f"Simple render failed: {e}")
            raise EncodingFailed(primary_error, str(e)) from e

        logger.info(f"Simple render succeeded: {asset.path.name} ({asset.duration:.1f}s)")
        return asset
