"""Repository for application users."""

from __future__ import annotations

from typing import Optional

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import User
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import user_from_document


class UserRepo(CollectionRepository[User]):
    collection = "users"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, user_from_document)

    def get_by_email(self, email: str) -> Optional[User]:
        rows = self.find(where("email", "==", email), limit=1)
        return rows[0] if rows else None
