"""Logging configuration for FleetRental."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from fleet_rental.config import (
    LOG_BACKUP_COUNT,
    LOG_FILENAME,
    LOG_LEVEL_ENV_VAR,
    LOG_MAX_BYTES,
)
from fleet_rental.paths import get_logs_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Optional[int]) -> int:
    if level is not None:
        return level
    name = os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    log_dir: Optional[Path] = None,
    level: Optional[int] = None,
    console: bool = True,
) -> None:
    """Send records to a rotating file in the data folder and, optionally, stderr.

    Uncaught exceptions are routed to the log as well.
    """
    level = _resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        (log_dir or get_logs_dir()) / LOG_FILENAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [file_handler]
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        root_logger.addHandler(handler)
    logging.getLogger("reportlab").setLevel(logging.WARNING)

    def handle_exception(
        exc_type: type[BaseException],
        exc: BaseException,
        traceback: object,
    ) -> None:
        root_logger.error("Unhandled exception", exc_info=(exc_type, exc, traceback))

    sys.excepthook = handle_exception


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
