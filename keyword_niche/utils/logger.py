"""Keyword Niche - Structured logging setup."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_LOGGERS: dict[str, logging.Logger] = {}

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FILE = "keyword_niche.log"


def setup_logger(
    name: str,
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Create or reconfigure a logger with a stderr handler.

    Logs never go to stdout, which carries CLI results. A rotating file
    handler is added only when *log_dir* is given.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Get or create a logger by name."""
    if name not in _LOGGERS:
        _LOGGERS[name] = setup_logger(name, log_level, log_dir)
    return _LOGGERS[name]
