"""Repositories for payments, payment lines and allocations."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import (
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentLineStatus,
    PaymentMethod,
)
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import (
    payment_allocation_from_document,
    payment_from_document,
    payment_line_from_document,
)


class PaymentRepository(CollectionRepository[Payment]):
    collection = "payments"
    default_order = "payment_date"
    default_descending = True

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, payment_from_document)

    def list_numbers(self) -> list[str]:
        """Payment numbers in descending lexical order."""
        payments = self.find(order_by="payment_number", descending=True)
        return [payment.payment_number for payment in payments if payment.payment_number]

    def list_by_client(self, client_id: str) -> list[Payment]:
        return self.find(where("client_id", "==", client_id))

    def list_by_date_range(self, start: datetime, end: datetime) -> list[Payment]:
        return self.find(
            where("payment_date", ">=", start),
            where("payment_date", "<=", end),
        )


class PaymentLineRepo(CollectionRepository[PaymentLine]):
    collection = "payment_lines"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, payment_line_from_document)

    def list_by_payment(self, payment_id: str) -> list[PaymentLine]:
        return self.find(where("payment_id", "==", payment_id))

    def list_by_method(self, method: PaymentMethod) -> list[PaymentLine]:
        return self.find(where("method", "==", method))

    def list_due_between(
        self,
        start: datetime,
        end: datetime,
        status: PaymentLineStatus = PaymentLineStatus.PENDING,
    ) -> list[PaymentLine]:
        return self.find(
            where("due_date", ">=", start),
            where("due_date", "<=", end),
            where("status", "==", status),
            order_by="due_date",
        )

    def list_due_before(
        self,
        limit_date: datetime,
        status: PaymentLineStatus = PaymentLineStatus.PENDING,
    ) -> list[PaymentLine]:
        return self.find(
            where("due_date", "<", limit_date),
            where("status", "==", status),
            order_by="due_date",
        )

    def list_with_due_date(
        self, status: Optional[PaymentLineStatus] = None
    ) -> list[PaymentLine]:
        filters = [where("due_date", "!=", None)]
        if status is not None:
            filters.append(where("status", "==", status))
        return self.find(*filters, order_by="due_date")


class PaymentAllocationRepo(CollectionRepository[PaymentAllocation]):
    collection = "payment_allocations"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, payment_allocation_from_document)

    def list_by_payment(self, payment_id: str) -> list[PaymentAllocation]:
        return self.find(where("payment_id", "==", payment_id))

    def list_by_invoice(self, invoice_id: str) -> list[PaymentAllocation]:
        return self.find(where("invoice_id", "==", invoice_id))
