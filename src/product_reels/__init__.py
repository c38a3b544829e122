"""Product Reels - turn a catalog product into a published vertical reel."""

__version__ = "0.4.0"
