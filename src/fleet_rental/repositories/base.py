"""Typed access to one document collection."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Generic, Optional, TypeVar

from fleet_rental.db.document_store import DocumentStore, Filter
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.mappers import (
    Document,
    patch_to_document,
    record_to_document,
    to_document_value,
)

T = TypeVar("T")


class CollectionRepository(Generic[T]):
    """Maps a collection's documents to one domain dataclass."""

    collection: str = ""
    default_order: Optional[str] = None
    default_descending: bool = False

    def __init__(
        self,
        store: DocumentStore,
        from_document: Callable[[Document], T],
    ) -> None:
        self._store = store
        self._from_document = from_document
        self._logger = get_logger(self.__class__.__name__)

    def create(self, record: T, **extra: Any) -> T:
        """Insert ``record`` and return it with its generated id.

        ``extra`` fields are stored alongside the record's own fields.
        """
        document = record_to_document(record)
        document.update({key: to_document_value(value) for key, value in extra.items()})
        doc_id = self._store.insert(self.collection, document)
        self._logger.debug("Created %s id=%s", self.collection, doc_id)
        return replace(record, id=doc_id)

    def get_by_id(self, doc_id: str) -> Optional[T]:
        document = self._store.get(self.collection, doc_id)
        return self._from_document(document) if document else None

    def update_fields(self, doc_id: str, **values: Any) -> bool:
        fields = {key: to_document_value(value) for key, value in values.items()}
        return self._store.update(self.collection, doc_id, fields)

    def apply(self, doc_id: str, patch: object) -> bool:
        return self._store.update(self.collection, doc_id, patch_to_document(patch))

    def delete(self, doc_id: str) -> bool:
        return self._store.delete(self.collection, doc_id)

    def find(
        self,
        *filters: Filter,
        order_by: Optional[str] = None,
        descending: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> list[T]:
        encoded = [
            Filter(item.field, item.op, to_document_value(item.value)) for item in filters
        ]
        if order_by is None:
            order_by = self.default_order
            if descending is None:
                descending = self.default_descending
        documents = self._store.query(
            self.collection,
            encoded,
            order_by=order_by,
            descending=bool(descending),
            limit=limit,
        )
        return [self._from_document(document) for document in documents]

    def list_all(self) -> list[T]:
        return self.find()
