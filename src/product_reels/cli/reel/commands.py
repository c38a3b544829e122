"""Reel CLI commands - thin wrappers orchestrating params, validation, display, and service."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional

import typer

from ...constants import get_logs_dir
from ...providers.config import ReelSettings
from ..core.console import console, progress_console
from ..core.logging_setup import setup_logging
from ..core.types import Failure
from .display import show_run_config, show_run_error, show_run_result
from .params import ReelRunParams
from .service import ReelRunService
from .validators import validate_reel_run_params


def run_reel(
    product_id: Optional[str] = typer.Option(None, "--product-id", "-p", help="Catalog product id (default: random)"),
    goal: str = typer.Option("reach", "--goal", "-g", help="Reel goal: reach, engagement or conversion"),
    audio_style: Optional[str] = typer.Option(None, "--audio-style", "-a", help="Music style: phonk, lofi, upbeat, cinematic"),
    trend: Optional[List[str]] = typer.Option(None, "--trend", "-t", help="Trending topic hint (repeatable)"),
    no_publish: bool = typer.Option(False, "--no-publish", help="Render and host only, do not post"),
    analyze_images: bool = typer.Option(False, "--analyze-images", help="Describe the lead image with a vision model"),
    deadline: Optional[float] = typer.Option(None, "--deadline", help="Whole-run deadline in seconds"),
    as_json: bool = typer.Option(False, "--json", help="Print the result payload as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show pipeline logs"),
) -> None:
    """Produce a reel for one product and (optionally) post it to Instagram."""
    params = ReelRunParams.from_cli(
        product_id=product_id,
        goal=goal,
        audio_style=audio_style,
        trend=trend,
        no_publish=no_publish,
        analyze_images=analyze_images,
        deadline=deadline,
        verbose=verbose,
        as_json=as_json,
    )

    setup_logging(
        level=logging.INFO if params.verbose else logging.WARNING,
        log_dir=get_logs_dir(),
    )

    settings = ReelSettings()
    validation = validate_reel_run_params(params, settings)
    if isinstance(validation, Failure):
        show_run_error(progress_console(params.json_output), validation.error, validation.details)
        raise typer.Exit(1)

    if not params.json_output:
        show_run_config(console, params)

    result = asyncio.run(ReelRunService(settings).run(params))
    if isinstance(result, Failure):
        show_run_error(progress_console(params.json_output), result.error, result.details)
        raise typer.Exit(1)

    if params.json_output:
        typer.echo(json.dumps(result.value.to_dict(), ensure_ascii=False, indent=2))
    else:
        show_run_result(console, result.value)
