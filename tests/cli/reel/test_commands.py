"""Tests for the ``run`` command wiring."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from product_reels.cli.app import app
from product_reels.cli.core.types import Failure
from product_reels.content.models import ReelScript
from product_reels.hosting.models import HostedAsset
from product_reels.pipeline.orchestrator import ReelRunResult
from product_reels.video.models import RenderedAsset

try:
    runner = CliRunner(mix_stderr=False)
except TypeError:
    # click 8.2 always keeps stderr out of result.stdout
    runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setattr("product_reels.cli.reel.commands.get_logs_dir", lambda: tmp_path)
    monkeypatch.setenv("SHOPIFY_STORE_DOMAIN", "acme.myshopify.com")
    monkeypatch.setenv("SHOPIFY_STOREFRONT_TOKEN", "storefront-token")


class ChattyOrchestrator:
    """Prints provider progress the way the cascade does, then succeeds."""

    def __init__(self, console, result: ReelRunResult):
        self.console = console
        self.result = result

    async def run(self, **kwargs) -> ReelRunResult:
        self.console.print("  [dim][AI] ollama/llama3.2 [1/3]...[/dim]")
        self.console.print("  [green][AI] ollama: OK (812ms)[/green]")
        return self.result


@pytest.fixture
def run_result(sample_product) -> ReelRunResult:
    return ReelRunResult(
        product=sample_product,
        script=ReelScript(
            hook="Wait for this!",
            scenes=["cuts"],
            caption="new drop",
            hashtags=["#NewDrop"],
            cta="Link in bio",
            source="ai",
        ),
        rendered=RenderedAsset(path=Path("/tmp/reel.mp4"), duration=7.2),
        hosted=HostedAsset(url="https://file.io/abc", expires="1 day", host="file.io"),
        post_error="Instagram is not configured",
    )


def test_run_rejects_unknown_goal(cli_env):
    result = runner.invoke(app, ["run", "--goal", "virality"])

    assert result.exit_code == 1


def test_run_exits_nonzero_on_pipeline_failure(cli_env):
    """Test that a top-level pipeline error maps to exit code 1."""
    async def failing_run(self, params):
        return Failure("encode failed: EncodingFailed: boom", {"stage": "encode"})

    with patch("product_reels.cli.reel.commands.ReelRunService.run", failing_run):
        result = runner.invoke(app, ["run", "--no-publish", "--json"])

    assert result.exit_code == 1
    assert result.stdout.strip() == ""


def test_json_output_is_the_only_thing_on_stdout(cli_env, run_result):
    """Test that provider progress goes to stderr when --json is set."""
    consoles = []

    def build(settings, provider_config=None, console=None, deadline_seconds=None):
        consoles.append(console)
        return ChattyOrchestrator(console, run_result)

    with patch(
        "product_reels.cli.reel.service.PipelineOrchestrator.from_settings",
        side_effect=build,
    ):
        result = runner.invoke(app, ["run", "--no-publish", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["video"]["public_url"] == "https://file.io/abc"
    assert payload["post_error"] == "Instagram is not configured"
    assert consoles[0].stderr is True


def test_progress_stays_on_stdout_without_json(cli_env, run_result):
    consoles = []

    def build(settings, provider_config=None, console=None, deadline_seconds=None):
        consoles.append(console)
        return ChattyOrchestrator(console, run_result)

    with patch(
        "product_reels.cli.reel.service.PipelineOrchestrator.from_settings",
        side_effect=build,
    ):
        result = runner.invoke(app, ["run", "--no-publish"])

    assert result.exit_code == 0
    assert consoles[0].stderr is False
