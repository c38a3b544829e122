"""Hosted asset model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HostedAsset:
    """A rendered file reachable at a public URL. Remote-owned."""

    url: str
    expires: str
    host: str
