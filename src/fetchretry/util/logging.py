"""Logging setup utilities."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = "fetchretry"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _is_console(handler: logging.Handler) -> bool:
    # FileHandler subclasses StreamHandler
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def configure_logging(*, log_path: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Route ``fetchretry`` retry logs to stdout and, optionally, ``log_path``.

    Safe to call repeatedly: a console handler and a handler per log file are
    installed once, while ``level`` is reapplied on every call.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    wanted: list[logging.Handler] = []
    if not any(_is_console(h) for h in logger.handlers):
        wanted.append(logging.StreamHandler(stream=sys.stdout))

    if log_path is not None:
        open_files = {getattr(h, "baseFilename", None) for h in logger.handlers}
        if os.path.abspath(log_path) not in open_files:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            wanted.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in wanted:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


__all__ = ["LOG_FORMAT", "LOGGER_NAME", "configure_logging"]
