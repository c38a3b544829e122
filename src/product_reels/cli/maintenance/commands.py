"""Maintenance CLI commands: provider health and audio library listing."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from ...providers.config import load_provider_config
from ...services.provider_cascade import ProviderCascade
from ...video.audio_library import TRACKS
from ...video.models import AudioStyle
from ..core.console import console, print_error, print_info, print_success, print_warning
from .display import show_provider_status, show_tracks


def providers() -> None:
    """Check each configured text provider and show whether it is usable."""
    cascade = ProviderCascade(provider_config=load_provider_config())
    statuses = asyncio.run(cascade.check_providers())
    if not statuses:
        print_warning("No text providers are enabled in config/providers.yaml")
        return

    show_provider_status(console, statuses)
    ready = sum(1 for status in statuses if status.ready)
    if ready == len(statuses):
        print_success(f"All {ready} providers ready")
    elif ready:
        print_info(f"{ready}/{len(statuses)} providers ready")
    else:
        print_warning("No provider is ready; scripts will use the built-in templates")


def tracks(
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Only list one style"),
) -> None:
    """List the curated background music library."""
    selected = list(TRACKS)
    if style:
        key = style.strip().lower()
        if key not in AudioStyle._value2member_map_:
            print_error(
                f"Invalid audio style: {style}",
                {"valid_styles": ", ".join(s.value for s in AudioStyle)},
            )
            raise typer.Exit(1)
        selected = [track for track in selected if track.style == AudioStyle(key)]

    show_tracks(console, selected)
