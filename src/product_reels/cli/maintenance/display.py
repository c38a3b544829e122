"""Display functions for maintenance commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...services.provider_cascade import ProviderStatus
from ...video.models import AudioTrack


def show_provider_status(console: Console, statuses: list[ProviderStatus]) -> None:
    """Display the provider chain in priority order."""
    table = Table(title="Text Providers")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Provider", style="cyan")
    table.add_column("Type")
    table.add_column("Model")
    table.add_column("Status")

    for status in statuses:
        state = "[green]ready[/green]" if status.ready else f"[red]{status.reason}[/red]"
        table.add_row(str(status.priority), status.name, status.type, status.model, state)

    console.print(table)


def show_tracks(console: Console, tracks: list[AudioTrack]) -> None:
    """Display the curated background music library."""
    table = Table(title="Audio Library")
    table.add_column("Style", style="yellow")
    table.add_column("Track", style="cyan")
    table.add_column("BPM", justify="right")
    table.add_column("URL", style="dim", overflow="fold")

    for track in tracks:
        table.add_row(track.style.value, track.name, str(track.bpm), track.url)

    console.print(table)
