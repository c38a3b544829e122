"""Display functions for reel commands - pure functions for Rich output."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...pipeline.orchestrator import ReelRunResult
from ..core.console import print_error
from .params import ReelRunParams


def show_run_config(console: Console, params: ReelRunParams) -> None:
    """Display run configuration panel."""
    publish_style = "green" if params.auto_publish else "dim"
    publish_info = "Enabled" if params.auto_publish else "Disabled"
    trends = ", ".join(params.trend_hints) if params.trend_hints else "None"

    console.print(Panel(
        f"Product: [cyan]{params.product_id or 'Random from catalog'}[/cyan]\n"
        f"Goal: [yellow]{params.goal.value}[/yellow]\n"
        f"Audio: [yellow]{params.audio_style.value if params.audio_style else 'random'}[/yellow]\n"
        f"Trends: [green]{trends}[/green]\n"
        f"Image analysis: [yellow]{'Enabled' if params.analyze_images else 'Disabled'}[/yellow]\n"
        f"Auto-publish: [{publish_style}]{publish_info}[/{publish_style}]",
        title="Product Reel",
    ))


def show_run_result(console: Console, result: ReelRunResult) -> None:
    """Display a finished run."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Product", f"{result.product.title} ({result.product.id})")
    table.add_row("Script", f"{result.script.source} / {result.script.goal.value}")
    table.add_row("Hook", result.script.hook)
    render_mode = "[yellow]simple[/yellow]" if result.rendered.degraded else "full effects"
    table.add_row(
        "Video",
        f"{result.rendered.duration:.1f}s {result.rendered.resolution} ({render_mode})",
    )
    table.add_row("URL", f"[cyan]{result.hosted.url}[/cyan]")
    table.add_row("Expires", f"{result.hosted.expires} ({result.hosted.host})")

    if result.published:
        posted = result.published.media_id
        if result.published.permalink:
            posted += f"  {result.published.permalink}"
        table.add_row("Posted", f"[green]{posted}[/green]")
    elif result.post_error:
        table.add_row("Posted", f"[red]{result.post_error}[/red]")
    else:
        table.add_row("Posted", "[dim]skipped[/dim]")

    border = "yellow" if result.post_error else "green"
    console.print(Panel(table, title="Reel Complete", border_style=border))


def show_run_error(console: Console, error: str, details: Optional[dict] = None) -> None:
    """Display pipeline error."""
    console.print()
    print_error(error, details, target=console)
