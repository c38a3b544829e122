"""Console and file logging for CLI runs."""

from __future__ import annotations

import logging
from pathlib import Path


class ColoredToolFormatter(logging.Formatter):
    """Formatter that adds colors to tool/logger names."""

    COLORS = {
        "ffmpeg": "\033[32m",      # Green - FFmpeg
        "edge_tts": "\033[34m",    # Blue - Edge TTS
        "httpx": "\033[36m",       # Cyan - HTTP
        "ai_calls": "\033[33m",    # Yellow - provider cascade
        "instagram_api": "\033[35m",  # Magenta - Graph API
        "product_reels.pipeline": "\033[37m",  # White - Pipeline
    }
    RESET = "\033[0m"

    NAME_MAP = {
        "ffmpeg": "ffmpeg",
        "edge_tts": "tts",
        "voice": "tts",
        "httpx": "http",
        "ai_calls": "ai",
        "provider_cascade": "ai",
        "instagram": "insta",
        "uploader": "upload",
        "pipeline": "pipeline",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.RESET
        for name_prefix, col in self.COLORS.items():
            if record.name.startswith(name_prefix):
                color = col
                break

        short_name = record.name.split(".")[-1]
        for key, short in self.NAME_MAP.items():
            if key in record.name.lower():
                short_name = short
                break

        original_name = record.name
        record.name = f"{color}{short_name:8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.name = original_name


def setup_logging(level: int = logging.WARNING, log_dir: Path | None = None) -> None:
    """Configure logging for a CLI run.

    Args:
        level: Console log level.
        log_dir: When given, Graph API and provider traffic is also written
            to ``instagram_api.log`` and ``ai_calls.log`` there.
    """
    formatter = ColoredToolFormatter(
        fmt="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for logger_name in ["httpx", "httpcore", "asyncio"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    file_format = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    for channel in ("ai_calls", "instagram_api"):
        channel_logger = logging.getLogger(channel)
        channel_logger.setLevel(logging.DEBUG)
        for handler in channel_logger.handlers[:]:
            if isinstance(handler, logging.FileHandler):
                channel_logger.removeHandler(handler)
                handler.close()
        file_handler = logging.FileHandler(log_dir / f"{channel}.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_format)
        channel_logger.addHandler(file_handler)
