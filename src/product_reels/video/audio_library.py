"""Curated background music library, tagged by style."""

from __future__ import annotations

import random
import zlib

from .models import AudioStyle, AudioTrack

_CDN = "https://cdn.pixabay.com/audio"

TRACKS: tuple[AudioTrack, ...] = (
    AudioTrack("Aggressive Phonk", AudioStyle.PHONK, f"{_CDN}/2022/03/24/audio_784dc9b48c.mp3", 120),
    AudioTrack("Drift Phonk", AudioStyle.PHONK, f"{_CDN}/2023/04/13/audio_8e29e5576a.mp3", 130),
    AudioTrack("Sigma Grind", AudioStyle.PHONK, f"{_CDN}/2024/01/15/audio_273188825c.mp3", 125),
    AudioTrack("Fashion House", AudioStyle.UPBEAT, f"{_CDN}/2022/05/27/audio_1808fbf07a.mp3", 128),
    AudioTrack("Summer Pop", AudioStyle.UPBEAT, f"{_CDN}/2022/10/25/audio_1454504543.mp3", 124),
    AudioTrack("Runway Strut", AudioStyle.UPBEAT, f"{_CDN}/2023/09/06/audio_243453303c.mp3", 126),
    AudioTrack("Chill Lofi", AudioStyle.LOFI, f"{_CDN}/2022/05/27/audio_1808fbf07a.mp3", 85),
    AudioTrack("Late Night Drive", AudioStyle.LOFI, f"{_CDN}/2022/01/18/audio_d0a13f69d0.mp3", 90),
    AudioTrack("Study Session", AudioStyle.LOFI, f"{_CDN}/2022/11/22/audio_febc508520.mp3", 80),
    AudioTrack("Epic Trailer", AudioStyle.CINEMATIC, f"{_CDN}/2022/03/10/audio_c8c8a73467.mp3", 100),
    AudioTrack("Suspense Rise", AudioStyle.CINEMATIC, f"{_CDN}/2022/08/02/audio_884fe92c21.mp3", 95),
)


class AudioLibrary:
    """Selects background tracks.

    An explicit style always maps to the same track for the same seed, so
    re-running a product with the same style yields the same plan. Without a
    style the pick is random across the whole library.
    """

    def __init__(
        self,
        tracks: tuple[AudioTrack, ...] = TRACKS,
        rng: random.Random | None = None,
    ):
        if not tracks:
            raise ValueError("Audio library needs at least one track")
        self.tracks = tracks
        self._rng = rng or random.Random()

    def by_style(self, style: AudioStyle) -> list[AudioTrack]:
        return [track for track in self.tracks if track.style == style]

    def pick(self, style: AudioStyle | str | None = None, seed: str = "") -> AudioTrack:
        """Pick a track.

        Args:
            style: Requested style, or None for a random pick.
            seed: Stable key (product id) that fixes the pick within a style.

        Returns:
            The selected track. Falls back to the whole library when no
            track carries the requested style.
        """
        if style is None:
            return self._rng.choice(self.tracks)

        candidates = self.by_style(AudioStyle(style)) or list(self.tracks)
        index = zlib.crc32(seed.encode("utf-8")) % len(candidates)
        return candidates[index]
