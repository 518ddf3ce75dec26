"""Logging setup for the ``synczone`` namespace."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """Configure the package logger.

    Args:
        level: Logging level, either numeric or a name such as ``"DEBUG"``.
        log_file: Optional path that receives a copy of every record.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("synczone")
    logger.setLevel(level)

    # Avoid duplicate handlers when the app module is reloaded
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at level %s", logging.getLevelName(level))
