"""Tests for run_command, the subprocess runner behind the encoder."""

from __future__ import annotations

import asyncio
import sys

import pytest

from product_reels.video.ffmpeg import EncoderProcessError, run_command


def python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def write_after(delay: float, path) -> list[str]:
    return python(
        f"import pathlib, time; time.sleep({delay}); pathlib.Path({str(path)!r}).write_text('done')"
    )


@pytest.mark.asyncio
async def test_returns_stdout():
    assert await run_command(python("print('hello')"), timeout=30) == "hello\n"


@pytest.mark.asyncio
async def test_non_zero_exit_carries_stderr_and_code():
    with pytest.raises(EncoderProcessError) as exc_info:
        await run_command(python("import sys; sys.stderr.write('No such filter'); sys.exit(3)"), timeout=30)

    assert exc_info.value.returncode == 3
    assert "No such filter" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_binary_is_an_encoder_error(tmp_path):
    with pytest.raises(EncoderProcessError, match="Could not start"):
        await run_command([str(tmp_path / "no-ffmpeg-here")], timeout=5)


@pytest.mark.asyncio
async def test_timeout_kills_the_child(tmp_path):
    marker = tmp_path / "finished"

    with pytest.raises(EncoderProcessError, match="timed out"):
        await run_command(write_after(1.5, marker), timeout=0.3)

    await asyncio.sleep(2.0)
    assert not marker.exists()


@pytest.mark.asyncio
async def test_cancelling_the_task_kills_the_child(tmp_path):
    """A run deadline cancels the encode task; ffmpeg must not outlive it."""
    marker = tmp_path / "finished"
    task = asyncio.create_task(run_command(write_after(1.5, marker), timeout=60))
    await asyncio.sleep(0.3)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await asyncio.sleep(2.0)
    assert not marker.exists()


@pytest.mark.asyncio
async def test_deadline_around_a_running_command_stops_it(tmp_path):
    marker = tmp_path / "finished"

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(run_command(write_after(1.5, marker), timeout=60), timeout=0.3)

    await asyncio.sleep(2.0)
    assert not marker.exists()
