"""Command line interface for product reels."""

from .app import app, main

__all__ = ["app", "main"]
