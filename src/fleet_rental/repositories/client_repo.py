"""Repository for clients."""

from __future__ import annotations

from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import Client
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import client_from_document


class ClientRepo(CollectionRepository[Client]):
    collection = "clients"
    default_order = "last_name"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, client_from_document)
