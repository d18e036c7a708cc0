"""CLI utility functions for gitscribe."""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_file: Path | None = None) -> logging.Handler | None:
    """Send gitscribe debug logs to a file.

    The full-screen wizard owns the terminal, so nothing is logged to the
    console. Without a log file, logging stays at the library default.

    Args:
        log_file: File to write DEBUG logs to (truncated on each run)

    Returns:
        The installed file handler, or None if no file was given
    """
    if log_file is None:
        return None

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))

    package_logger = logging.getLogger("gitscribe")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    package_logger.debug("Debug logging to %s", log_file)
    return handler
