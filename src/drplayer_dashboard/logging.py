"""Logging configuration using Loguru.

Every component logs through a Loguru logger bound to a component name.
The web server's own stdlib loggers (uvicorn) are routed into the same
sinks, so one daily log file under ~/.local/share/drplayer-dashboard/logs/
holds the whole picture.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from .constants import DEFAULT_LOG_DIR, LOG_DATE_FORMAT

# Remove default handler to avoid duplicate console output
logger.remove()

_configured = False

# Stdlib loggers forwarded into Loguru
_FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class _InterceptHandler(logging.Handler):
    """Forward stdlib log records to Loguru under their logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> None:
    """Configure Loguru logging.

    Args:
        verbose: If True, show DEBUG level on stderr
        log_dir: Override log directory (default: ~/.local/share/drplayer-dashboard/logs/)
    """
    global _configured
    if _configured:
        return

    level = "DEBUG" if verbose else "INFO"
    log_path = log_dir or DEFAULT_LOG_DIR
    log_path.mkdir(parents=True, exist_ok=True)

    log_file = log_path / f"{datetime.now().strftime(LOG_DATE_FORMAT)}.log"

    # Compact format for the terminal
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | <cyan>{extra[name]}</cyan> - <level>{message}</level>",
        colorize=True,
        filter=lambda record: "name" in record["extra"],
    )

    # Detailed format for the file, new file at midnight
    logger.add(
        log_file,
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]} - {message}",
        rotation="00:00",
        retention="30 days",
        filter=lambda record: "name" in record["extra"],
    )

    for name in _FORWARDED_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [_InterceptHandler()]
        stdlib_logger.propagate = False

    _configured = True
    logger.bind(name="logging").info(f"Logging initialized: {log_file}")


def get_logger(name: str):
    """Get a logger bound to a specific component name."""
    return logger.bind(name=name)
