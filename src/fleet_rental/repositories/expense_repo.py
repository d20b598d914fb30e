"""Repository for expenses."""

from __future__ import annotations

from datetime import datetime

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import Expense
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import expense_from_document


class ExpenseRepo(CollectionRepository[Expense]):
    collection = "expenses"
    default_order = "date"
    default_descending = True

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, expense_from_document)

    def list_by_period(self, start: datetime, end: datetime) -> list[Expense]:
        return self.find(where("date", ">=", start), where("date", "<=", end))

    def list_by_vehicle(self, vehicle_id: str) -> list[Expense]:
        return self.find(where("vehicle_id", "==", vehicle_id))
