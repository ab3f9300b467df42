"""Centralized Loguru logging setup.

Semantic levels are registered on package import so modules can log with
`logger.log("HIT", ...)` even before `setup_logging()` configures sinks.
Call `setup_logging()` once at startup to install the console sink.
"""

from __future__ import annotations

from loguru import logger
import os
import sys


def _ensure_level(name: str, no: int, color: str) -> None:
    try:
        logger.level(name)
    except ValueError:
        logger.level(name, no=no, color=color)


def register_levels() -> None:
    """Register custom levels for chat traffic, trigger hits, sends and refreshes."""
    _ensure_level("CHAT", no=21, color="<cyan>")
    _ensure_level("HIT", no=22, color="<magenta>")
    _ensure_level("SEND", no=24, color="<green>")
    _ensure_level("EMOTES", no=26, color="<blue>")


def setup_logging(debug: bool = False) -> None:
    """Configure Loguru sinks and levels.

    - Logs to stderr with a concise format suitable for a console bot.
    - Respects `LOG_LEVEL` env var (default: INFO); `debug=True` forces DEBUG.
    - Avoid duplicate handlers if called multiple times.
    """
    logger.remove()
    register_levels()

    log_level = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()

    logger.add(
        sys.stderr,
        level=log_level,
        backtrace=False,
        diagnose=False,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )
