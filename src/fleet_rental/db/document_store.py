"""Document store abstraction and its SQLite implementation.

Documents are JSON objects grouped in named collections. Every write is an
independent operation committed on its own; there is no transaction spanning
several documents.
"""

from __future__ import annotations

import json
import re
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from fleet_rental.db.connection import transaction
from fleet_rental.logging_config import get_logger

OPERATORS = {"==", "!=", "<", "<=", ">", ">=", "in"}
_FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Filter:
    """Condition on a single top-level document field."""

    field: str
    op: str
    value: Any


def where(field: str, op: str, value: Any) -> Filter:
    """Build a query filter, validating the field and the operator."""
    if op not in OPERATORS:
        raise ValueError(f"Unsupported operator: {op}")
    if not _FIELD_PATTERN.match(field):
        raise ValueError(f"Invalid field name: {field}")
    return Filter(field=field, op=op, value=value)


class DocumentStore(Protocol):
    """Operations the services expect from a persistent collection store."""

    def insert(self, collection: str, data: dict[str, Any]) -> str:
        ...

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        ...

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        ...

    def delete(self, collection: str, doc_id: str) -> bool:
        ...

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        ...


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _json_path(field: str) -> str:
    return f"json_extract(data, '$.{field}')"


def _build_clause(condition: Filter) -> tuple[str, list[Any]]:
    path = _json_path(condition.field)
    if condition.op == "in":
        values = list(condition.value)
        if not values:
            return "0", []
        placeholders = ", ".join(["?"] * len(values))
        return f"{path} IN ({placeholders})", values
    if condition.value is None:
        if condition.op == "==":
            return f"{path} IS NULL", []
        if condition.op == "!=":
            return f"{path} IS NOT NULL", []
        raise ValueError(f"Operator {condition.op} cannot compare with null")
    op = "=" if condition.op == "==" else condition.op
    return f"{path} {op} ?", [condition.value]


class SqliteDocumentStore:
    """Document store persisting JSON documents in a single SQLite table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    @staticmethod
    def _to_document(row: sqlite3.Row) -> dict[str, Any]:
        document = json.loads(row["data"])
        document["id"] = row["id"]
        return document

    def insert(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        payload = {key: value for key, value in data.items() if key != "id"}
        timestamp = _now_iso()
        try:
            with transaction(self._connection):
                self._connection.execute(
                    """
                    INSERT INTO documents (collection, id, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        collection,
                        doc_id,
                        json.dumps(payload, ensure_ascii=False),
                        timestamp,
                        timestamp,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to insert document collection=%s", collection)
            raise
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        try:
            row = self._connection.execute(
                "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ).fetchone()
        except Exception:
            self._logger.exception(
                "Failed to fetch document collection=%s id=%s", collection, doc_id
            )
            raise
        return self._to_document(row) if row else None

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        """Merge ``fields`` into the stored document; absent keys are kept."""
        try:
            with transaction(self._connection):
                row = self._connection.execute(
                    "SELECT data FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                ).fetchone()
                if row is None:
                    return False
                data = json.loads(row["data"])
                data.update({key: value for key, value in fields.items() if key != "id"})
                cursor = self._connection.execute(
                    """
                    UPDATE documents
                    SET data = ?,
                        updated_at = ?
                    WHERE collection = ?
                      AND id = ?
                    """,
                    (json.dumps(data, ensure_ascii=False), _now_iso(), collection, doc_id),
                )
        except Exception:
            self._logger.exception(
                "Failed to update document collection=%s id=%s", collection, doc_id
            )
            raise
        return cursor.rowcount > 0

    def delete(self, collection: str, doc_id: str) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "DELETE FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                )
        except Exception:
            self._logger.exception(
                "Failed to delete document collection=%s id=%s", collection, doc_id
            )
            raise
        return cursor.rowcount > 0

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        clauses = ["collection = ?"]
        params: list[Any] = [collection]
        for condition in filters:
            clause, values = _build_clause(condition)
            clauses.append(clause)
            params.extend(values)
        direction = "DESC" if descending else "ASC"
        if order_by:
            if not _FIELD_PATTERN.match(order_by):
                raise ValueError(f"Invalid field name: {order_by}")
            order_clause = f"ORDER BY {_json_path(order_by)} {direction}, rowid"
        else:
            order_clause = "ORDER BY rowid"
        limit_clause = ""
        if limit is not None:
            limit_clause = "LIMIT ?"
            params.append(int(limit))
        sql = f"""
            SELECT id, data
            FROM documents
            WHERE {' AND '.join(clauses)}
            {order_clause}
            {limit_clause}
        """
        try:
            rows = self._connection.execute(sql, params).fetchall()
        except Exception:
            self._logger.exception("Failed to query documents collection=%s", collection)
            raise
        return [self._to_document(row) for row in rows]
