"""Typer app configuration and command registration."""

from __future__ import annotations

import typer
from dotenv import load_dotenv

load_dotenv()

app = typer.Typer(
    name="product-reels",
    help="Turn catalog products into short vertical reels",
    add_completion=False,
)


def register_commands() -> None:
    """Register all commands from feature modules."""
    from .reel.commands import run_reel

    app.command(name="run")(run_reel)

    from .maintenance.commands import providers, tracks

    app.command(name="providers")(providers)
    app.command(name="tracks")(tracks)


register_commands()


def main() -> None:
    """CLI entry point."""
    app()
