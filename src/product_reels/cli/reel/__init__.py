"""Reel feature - the end-to-end pipeline command."""

from .commands import run_reel
from .params import ReelRunParams
from .service import ReelRunService

__all__ = ["run_reel", "ReelRunParams", "ReelRunService"]
