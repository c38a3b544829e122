"""Tests for the ``tracks`` maintenance command."""

from __future__ import annotations

from typer.testing import CliRunner

from product_reels.cli.app import app

runner = CliRunner()


def test_tracks_filters_by_style(monkeypatch):
    shown = []
    monkeypatch.setattr(
        "product_reels.cli.maintenance.commands.show_tracks",
        lambda console, tracks: shown.extend(tracks),
    )

    result = runner.invoke(app, ["tracks", "--style", "LoFi"])

    assert result.exit_code == 0
    assert {t.name for t in shown} == {"Chill Lofi", "Late Night Drive", "Study Session"}


def test_tracks_without_style_lists_everything(monkeypatch):
    from product_reels.video.audio_library import TRACKS

    shown = []
    monkeypatch.setattr(
        "product_reels.cli.maintenance.commands.show_tracks",
        lambda console, tracks: shown.extend(tracks),
    )

    result = runner.invoke(app, ["tracks"])

    assert result.exit_code == 0
    assert shown == list(TRACKS)


def test_tracks_rejects_unknown_style():
    result = runner.invoke(app, ["tracks", "--style", "polka"])
    assert result.exit_code == 1
