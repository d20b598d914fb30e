"""Filesystem locations for FleetRental data."""

from __future__ import annotations

import os
from pathlib import Path

from fleet_rental.config import (
    APP_DATA_DIRNAME,
    DB_FILENAME,
    HOME_ENV_VAR,
    LOGS_DIRNAME,
    PDF_DIRNAME,
)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_app_data_dir() -> Path:
    """Data directory: ``$FLEET_RENTAL_HOME`` when set, else under APPDATA or home."""
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return _ensure_dir(Path(override))
    appdata = os.getenv("APPDATA")
    base_dir = Path(appdata) if appdata else Path.home() / ".fleet_rental"
    return _ensure_dir(base_dir / APP_DATA_DIRNAME)


def get_db_path() -> Path:
    return get_app_data_dir() / DB_FILENAME


def get_logs_dir() -> Path:
    return _ensure_dir(get_app_data_dir() / LOGS_DIRNAME)


def get_pdfs_dir() -> Path:
    """Default output folder for rendered invoices."""
    return _ensure_dir(get_app_data_dir() / PDF_DIRNAME)
