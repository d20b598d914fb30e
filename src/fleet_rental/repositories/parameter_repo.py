"""Repository for configuration parameters."""

from __future__ import annotations

from typing import Optional

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import Parameter, ParameterType
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import parameter_from_document


class ParameterRepo(CollectionRepository[Parameter]):
    collection = "parameters"
    default_order = "label"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, parameter_from_document)

    def list_by_type(self, parameter_type: ParameterType) -> list[Parameter]:
        return self.find(where("type", "==", parameter_type))

    def find_config_entry(self, key: str) -> Optional[Parameter]:
        rows = self.find(
            where("type", "==", ParameterType.GENERAL_CONFIG),
            where("label", "==", key),
            limit=1,
        )
        return rows[0] if rows else None
