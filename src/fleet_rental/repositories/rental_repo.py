"""Repository for rental contracts."""

from __future__ import annotations

from typing import Iterable

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import BillingStatus, Rental
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import rental_from_document


class RentalRepo(CollectionRepository[Rental]):
    collection = "locations"
    default_order = "start_date"
    default_descending = True

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, rental_from_document)

    def list_by_client_and_status(
        self, client_id: str, status: BillingStatus = BillingStatus.OPEN
    ) -> list[Rental]:
        return self.find(
            where("client_id", "==", client_id),
            where("billing_status", "==", status),
        )

    def set_billing_status(self, rental_ids: Iterable[str], status: BillingStatus) -> int:
        updated = 0
        for rental_id in rental_ids:
            if self.update_fields(rental_id, billing_status=status):
                updated += 1
            else:
                self._logger.warning("Rental id=%s not found while setting %s", rental_id, status.value)
        return updated
