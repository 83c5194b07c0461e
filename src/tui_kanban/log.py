"""Logging setup for TUI Kanban.

The terminal belongs to the UI, so records go to a file or nowhere.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "tui_kanban"


def setup_logging(level: int | str = logging.WARNING, log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger. Without *log_file* records are dropped."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Logging initialized")
    return logger
