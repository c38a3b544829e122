"""Tests for background track selection."""

from __future__ import annotations

import random

import pytest

from product_reels.video.audio_library import TRACKS, AudioLibrary
from product_reels.video.models import AudioStyle


def test_every_style_has_tracks():
    library = AudioLibrary()
    for style in AudioStyle:
        assert library.by_style(style)


def test_explicit_style_is_stable_per_product():
    library = AudioLibrary()
    first = library.pick(AudioStyle.PHONK, seed="gid://shopify/Product/1")
    again = AudioLibrary().pick("phonk", seed="gid://shopify/Product/1")

    assert first == again
    assert first.style == AudioStyle.PHONK


def test_no_style_picks_from_whole_library():
    library = AudioLibrary(rng=random.Random(7))
    picks = {library.pick(None).name for _ in range(50)}

    assert len({track.style for track in TRACKS if track.name in picks}) > 1


def test_unknown_style_is_rejected():
    with pytest.raises(ValueError):
        AudioLibrary().pick("polka")


def test_empty_library_is_rejected():
    with pytest.raises(ValueError):
        AudioLibrary(tracks=())
