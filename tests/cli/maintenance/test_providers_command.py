"""Tests for the ``providers`` maintenance command."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from product_reels.cli.app import app
from product_reels.services.provider_cascade import ProviderStatus

runner = CliRunner()


@pytest.fixture
def fake_cascade(monkeypatch):
    cascade = MagicMock()
    cascade.check_providers = AsyncMock()
    monkeypatch.setattr(
        "product_reels.cli.maintenance.commands.ProviderCascade",
        lambda provider_config: cascade,
    )
    return cascade


def test_reports_each_provider(fake_cascade, monkeypatch):
    statuses = [
        ProviderStatus("groq", "groq", "llama-3.3-70b-versatile", 1, True),
        ProviderStatus("gemini", "gemini", "gemini-2.0-flash", 2, False, "missing GEMINI_API_KEY"),
    ]
    fake_cascade.check_providers.return_value = statuses
    shown = []
    monkeypatch.setattr(
        "product_reels.cli.maintenance.commands.show_provider_status",
        lambda console, items: shown.extend(items),
    )

    result = runner.invoke(app, ["providers"])

    assert result.exit_code == 0
    assert shown == statuses


def test_no_enabled_providers_is_not_an_error(fake_cascade):
    fake_cascade.check_providers.return_value = []

    result = runner.invoke(app, ["providers"])

    assert result.exit_code == 0
