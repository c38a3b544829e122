"""Tests for the shared CLI consoles."""

from __future__ import annotations

import io

from rich.console import Console

from product_reels.cli.core.console import console, err_console, print_error, progress_console


def test_progress_moves_to_stderr_for_json_output():
    assert progress_console(json_output=True) is err_console
    assert progress_console(json_output=False) is console
    assert err_console.stderr is True


def test_print_error_writes_details_to_the_given_console():
    buffer = io.StringIO()
    target = Console(file=buffer, width=120, color_system=None)

    print_error("Invalid goal: virality", {"valid_goals": "reach, engagement"}, target=target)

    lines = buffer.getvalue().splitlines()
    assert lines[0] == "Error: Invalid goal: virality"
    assert lines[1].strip() == "valid_goals: reach, engagement"
