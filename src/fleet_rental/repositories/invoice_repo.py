"""Repositories for invoice headers and lines."""

from __future__ import annotations

from typing import Iterable, Optional

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import InvoiceHeader, InvoiceLine, SettlementStatus
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import (
    invoice_from_document,
    invoice_line_from_document,
)


class InvoiceRepo(CollectionRepository[InvoiceHeader]):
    collection = "invoices"
    default_order = "invoice_date"
    default_descending = True

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, invoice_from_document)

    def list_numbers(self) -> list[str]:
        """Invoice numbers in descending lexical order."""
        invoices = self.find(order_by="invoice_number", descending=True)
        return [invoice.invoice_number for invoice in invoices if invoice.invoice_number]

    def list_by_settlement(
        self,
        statuses: Iterable[SettlementStatus],
        client_id: Optional[str] = None,
    ) -> list[InvoiceHeader]:
        filters = [where("settlement_status", "in", list(statuses))]
        if client_id:
            filters.append(where("client_id", "==", client_id))
        return self.find(*filters)


class InvoiceLineRepo(CollectionRepository[InvoiceLine]):
    collection = "invoiceLines"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, invoice_line_from_document)

    def list_by_invoice(self, invoice_id: str) -> list[InvoiceLine]:
        return self.find(where("invoice_id", "==", invoice_id))
