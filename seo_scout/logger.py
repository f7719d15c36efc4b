# === FILE: seo_scout/logger.py ===
"""Logging setup for **SeoScout**.

Every module logs through the ``"SeoScout"`` logger. Console output goes to
stderr so that the summary table printed by the CLI stays on stdout; a
rotating log file can be added with ``--log-file``.

Usage::

    from seo_scout.logger import logger
    logger.info("Crawl started")
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SeoScout"
MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
LOG_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _console(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_file(path: Path | str, fmt: str) -> RotatingFileHandler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(str(path), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: Level = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Attach handlers to the SeoScout logger and set its level.

    Parameters
    ----------
    level
        Level name or number, e.g. ``"DEBUG"``.
    log_file
        Optional log file, rotated at 5 MB with three backups.
    log_format
        :class:`logging.Formatter` format string.
    replace_handlers
        Drop previously attached handlers first (the default).
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    lg.addHandler(_console(log_format))
    if log_file is not None:
        lg.addHandler(_rotating_file(log_file, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: Level = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Configure logging from scratch; called by the CLI once options are parsed."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME"]
