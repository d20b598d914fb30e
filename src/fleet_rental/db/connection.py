"""Database connection helpers."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

BUSY_TIMEOUT_SECONDS = 5.0


def _check_json_support(connection: sqlite3.Connection) -> None:
    try:
        connection.execute("SELECT json_extract('{\"a\": 1}', '$.a')").fetchone()
    except sqlite3.OperationalError as exc:
        raise RuntimeError("SQLite build lacks the JSON1 functions.") from exc


def get_connection(database_path: Path | str) -> sqlite3.Connection:
    """Open the document database.

    The document table is queried through ``json_extract``, so a SQLite build
    without JSON support is rejected up front.
    """
    connection = sqlite3.connect(str(database_path), timeout=BUSY_TIMEOUT_SECONDS)
    connection.row_factory = sqlite3.Row
    _check_json_support(connection)
    return connection


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit on success, roll back and re-raise on error."""
    try:
        yield connection
    except Exception:
        connection.rollback()
        raise
    else:
        connection.commit()
