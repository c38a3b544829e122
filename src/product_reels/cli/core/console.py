"""Rich consoles shared by every command.

``console`` is stdout. ``err_console`` is stderr and carries progress and
diagnostics whenever stdout is reserved for a machine-readable payload.
"""

from __future__ import annotations

import sys

from rich.console import Console

# Windows cp1252 consoles cannot draw the unicode box characters
_safe_box = sys.platform == "win32"

console = Console(safe_box=_safe_box)
err_console = Console(stderr=True, safe_box=_safe_box)


def progress_console(json_output: bool) -> Console:
    """Console for progress lines: stderr when stdout holds a JSON payload."""
    return err_console if json_output else console


def print_error(message: str, details: dict | None = None, target: Console | None = None) -> None:
    """Print an error line followed by indented ``key: value`` details."""
    out = target or console
    out.print(f"[red]Error: {message}[/red]")
    for key, value in (details or {}).items():
        out.print(f"  [dim]{key}:[/dim] [yellow]{value}[/yellow]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    console.print(f"[cyan]{message}[/cyan]")
