"""Maintenance feature - provider health and audio library commands."""

from .commands import providers, tracks

__all__ = ["providers", "tracks"]
