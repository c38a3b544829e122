"""Timeline construction: product images + script -> clip and audio plan.

The clip plan is a pure function of the image list and product fields.
Downloads, music selection and narration happen in build(), which then
hands the local paths to the planner.
"""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path

import httpx

from ..catalog.models import Product
from ..constants import (
    CLIP_DURATION_SECONDS,
    MAX_REEL_DURATION_SECONDS,
    MAX_SOURCE_IMAGES,
    MIN_REEL_DURATION_SECONDS,
)
from ..constants.video import TITLE_OVERLAY_MAX_CHARS
from ..content.models import ReelScript
from ..errors import NoProductImages
from .audio_library import AudioLibrary
from .downloads import download_file
from .models import (
    AudioMix,
    AudioStyle,
    AudioTrack,
    Clip,
    OverlayKind,
    TextOverlay,
    Timeline,
    VoiceoverResult,
    ZoomDirection,
)
from .voice import VoiceSynthesizer

logger = logging.getLogger(__name__)


def clip_count_for(
    image_count: int,
    clip_duration: float = CLIP_DURATION_SECONDS,
    min_duration: float = MIN_REEL_DURATION_SECONDS,
    max_duration: float = MAX_REEL_DURATION_SECONDS,
) -> int:
    """Number of clips after looping up to the floor and cutting at the ceiling."""
    if image_count < 1:
        raise NoProductImages("At least one image is required to plan a timeline")

    count = min(image_count, MAX_SOURCE_IMAGES)
    while count * clip_duration < min_duration:
        count *= 2

    max_clips = math.floor(max_duration / clip_duration + 1e-9)
    return min(count, max_clips)


def plan_clips(
    image_paths: list[Path],
    product: Product,
    brand: str,
    clip_duration: float = CLIP_DURATION_SECONDS,
) -> tuple[Clip, ...]:
    """Lay out the clip sequence for a set of local images.

    Images are capped at the first 12 and the sequence is concatenated with
    itself until the reel reaches the minimum duration, then cut to the
    maximum. Zoom alternates by index parity. The brand mark is on every
    clip; the title sits on even clips and the price on odd ones.

    Raises:
        NoProductImages: image_paths is empty.
    """
    sources = list(image_paths[:MAX_SOURCE_IMAGES])
    count = clip_count_for(len(sources), clip_duration)

    sequence = list(sources)
    while len(sequence) < count:
        sequence.extend(sequence)
    sequence = sequence[:count]

    brand_overlay = TextOverlay(OverlayKind.BRAND, brand)
    title_overlay = TextOverlay(
        OverlayKind.TITLE,
        product.title.upper()[:TITLE_OVERLAY_MAX_CHARS],
    )
    price_overlay = TextOverlay(OverlayKind.PRICE, product.price_label)

    clips = []
    for index, image_path in enumerate(sequence):
        even = index % 2 == 0
        clips.append(Clip(
            image_path=Path(image_path),
            duration=clip_duration,
            zoom=ZoomDirection.OUT if even else ZoomDirection.IN,
            overlays=(brand_overlay, title_overlay if even else price_overlay),
        ))
    return tuple(clips)


def choose_mix(background_path: Path | None, voice_path: Path | None) -> AudioMix:
    if background_path and voice_path:
        return AudioMix.MIXED
    if background_path:
        return AudioMix.BACKGROUND_ONLY
    if voice_path:
        return AudioMix.NARRATION_ONLY
    return AudioMix.SILENT


class TimelineBuilder:
    """Builds the Timeline for one run.

    Example:
        builder = TimelineBuilder(brand="ACME")
        timeline = await builder.build(product, script, workdir, AudioStyle.PHONK)
    """

    def __init__(
        self,
        brand: str = "BRAND",
        audio_library: AudioLibrary | None = None,
        voice: VoiceSynthesizer | None = None,
        narrate: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.brand = brand
        self.audio_library = audio_library or AudioLibrary()
        self.voice = voice or VoiceSynthesizer()
        self.narrate = narrate
        self._transport = transport

    def plan(self, image_paths: list[Path], product: Product) -> tuple[Clip, ...]:
        return plan_clips(image_paths, product, self.brand)

    async def _download_images(self, product: Product, workdir: Path) -> list[Path]:
        urls = product.images[:MAX_SOURCE_IMAGES]
        results = await asyncio.gather(
            *(
                download_file(url, workdir / f"img_{index}.jpg", transport=self._transport)
                for index, url in enumerate(urls)
            ),
            return_exceptions=True,
        )

        paths = []
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                logger.warning(f"Skipping image {url}: {result}")
                continue
            paths.append(result)
        return paths

    async def _fetch_background(self, track: AudioTrack, workdir: Path) -> Path | None:
        try:
            return await download_file(track.url, workdir / "music.mp3", transport=self._transport)
        except (httpx.HTTPError, OSError) as e:
            logger.warning(f"Background track '{track.name}' unavailable: {e}")
            return None

    async def _narrate(self, text: str, workdir: Path) -> VoiceoverResult:
        if not self.narrate or not text.strip():
            return VoiceoverResult(text=text)
        return await self.voice.synthesize(text, workdir / "narration.mp3")

    async def build(
        self,
        product: Product,
        script: ReelScript,
        workdir: Path,
        audio_style: AudioStyle | str | None = None,
    ) -> Timeline:
        """Download assets and assemble the timeline.

        Args:
            product: Catalog product.
            script: Composed script (hook is narrated).
            workdir: Per-run temp directory.
            audio_style: Music style, or None for a random track.

        Returns:
            Timeline ready for encoding.

        Raises:
            NoProductImages: No image could be downloaded.
        """
        workdir.mkdir(parents=True, exist_ok=True)
        track = self.audio_library.pick(audio_style, seed=product.id)

        image_paths, background_path, voiceover = await asyncio.gather(
            self._download_images(product, workdir),
            self._fetch_background(track, workdir),
            self._narrate(script.hook, workdir),
        )
        if not image_paths:
            raise NoProductImages(f"No downloadable images for product {product.id}")

        clips = self.plan(image_paths, product)
        total_duration = round(len(clips) * clips[0].duration, 3)
        mix = choose_mix(background_path, voiceover.audio_path)

        logger.info(
            f"Timeline: {len(clips)} clips from {len(image_paths)} images, "
            f"{total_duration:.1f}s, audio={mix.value}"
            + (f" ({track.name})" if background_path else "")
        )
        return Timeline(
            clips=clips,
            total_duration=total_duration,
            audio_track=track if background_path else None,
            background_path=background_path,
            voice_path=voiceover.audio_path,
            audio_mix=mix,
        )
