"""Database migrations for SQLite schema versioning."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from fleet_rental.db.connection import transaction


@dataclass(frozen=True)
class Migration:
    version: int
    script: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        script="""
        CREATE TABLE IF NOT EXISTS documents (
            collection TEXT NOT NULL,
            id TEXT NOT NULL,
            data TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (collection, id)
        );

        CREATE INDEX IF NOT EXISTS idx_documents_collection
            ON documents(collection);
        """,
    ),
    Migration(
        version=2,
        script="""
        CREATE INDEX IF NOT EXISTS idx_documents_invoice_number
            ON documents(collection, json_extract(data, '$.invoice_number'));
        CREATE INDEX IF NOT EXISTS idx_documents_payment_number
            ON documents(collection, json_extract(data, '$.payment_number'));
        CREATE INDEX IF NOT EXISTS idx_documents_due_date
            ON documents(collection, json_extract(data, '$.due_date'));
        """,
    ),
]


def _fetch_schema_version(connection: sqlite3.Connection) -> int:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS app_meta (
            schema_version INTEGER NOT NULL
        );
        """
    )
    row = connection.execute(
        "SELECT schema_version FROM app_meta LIMIT 1"
    ).fetchone()
    if row is None:
        connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
        return 0
    return int(row[0])


def apply_migrations(connection: sqlite3.Connection) -> None:
    """Apply pending database migrations."""
    with transaction(connection):
        current_version = _fetch_schema_version(connection)

    for migration in MIGRATIONS:
        if migration.version <= current_version:
            continue

        with transaction(connection):
            connection.executescript(migration.script)
            connection.execute(
                "UPDATE app_meta SET schema_version = ?",
                (migration.version,),
            )

        current_version = migration.version
