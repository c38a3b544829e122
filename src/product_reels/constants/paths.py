"""Path helpers for temporary reel work and logs."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Final

PROJECT_ROOT: Final[Path] = Path(__file__).parent.parent.parent.parent
"""Repository root (src/product_reels/constants -> root)."""

TEMP_DIR_NAME: Final[str] = "product-reels"
"""Directory under the system temp dir that holds per-product workdirs."""

LOGS_DIR_NAME: Final[str] = "logs"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def safe_path_component(value: str) -> str:
    """Make an identifier safe to use as a single directory name.

    Shopify ids look like ``gid://shopify/Product/123``, so anything outside
    ``[A-Za-z0-9_-]`` becomes an underscore.
    """
    cleaned = _UNSAFE_CHARS.sub("_", value).strip("_")
    return cleaned or "product"


def get_temp_dir() -> Path:
    """Get the shared temp directory, creating it if needed.

    Returns:
        Path to temp directory.
    """
    temp_dir = Path(tempfile.gettempdir()) / TEMP_DIR_NAME
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def get_reel_workdir(product_id: str, base_dir: Path | None = None) -> Path:
    """Get the per-product working directory for a run.

    Args:
        product_id: Catalog product id.
        base_dir: Override for the parent directory (tests).

    Returns:
        Path to the (created) workdir.
    """
    parent = base_dir if base_dir is not None else get_temp_dir()
    workdir = parent / safe_path_component(product_id)
    workdir.mkdir(parents=True, exist_ok=True)
    return workdir


def _is_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(exist_ok=True)
    except OSError:
        return False
    return os.access(path, os.W_OK)


def get_logs_dir(root: Path | None = None) -> Path:
    """Get the logs directory, creating it if needed.

    Logs go next to the project in a source checkout. An installed package
    usually sits in a read-only site-packages tree, so an unwritable root
    falls back to the shared temp directory.

    Args:
        root: Preferred parent directory (defaults to the project root).

    Returns:
        Path to logs directory.
    """
    preferred = (root if root is not None else PROJECT_ROOT) / LOGS_DIR_NAME
    if _is_writable_dir(preferred):
        return preferred

    fallback = get_temp_dir() / LOGS_DIR_NAME
    fallback.mkdir(exist_ok=True)
    return fallback
