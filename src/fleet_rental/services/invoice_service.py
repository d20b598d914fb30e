"""Invoice service: numbering, invoice building and settlement tracking."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from fleet_rental.config import GeneralConfig
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.billing import (
    MoneyInput,
    SettlementUpdate,
    compute_invoice_totals,
    compute_line_total,
    recompute_settlement,
    to_decimal,
)
from fleet_rental.domain.models import (
    BillingStatus,
    InvoiceHeader,
    InvoiceLine,
    InvoiceStatus,
    Rental,
    SettlementStatus,
)
from fleet_rental.domain.numbering import next_invoice_number
from fleet_rental.domain.rental_rules import Clock, is_billable, system_clock
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.invoice_repo import InvoiceLineRepo, InvoiceRepo
from fleet_rental.repositories.rental_repo import RentalRepo
from fleet_rental.services.client_service import (
    ClientService,
    client_display_name,
    client_tax_reference,
)
from fleet_rental.services.errors import NotFoundError, ValidationError
from fleet_rental.services.fleet_service import FleetService

PERIOD_DATE_FORMAT = "%d/%m/%Y"


def format_period(start: datetime, end: datetime) -> str:
    return f"{start.strftime(PERIOD_DATE_FORMAT)} - {end.strftime(PERIOD_DATE_FORMAT)}"


class InvoiceService:
    """Service turning completed rentals into invoices and tracking settlement."""

    def __init__(
        self,
        store: DocumentStore,
        config_provider: Callable[[], GeneralConfig] = GeneralConfig,
        clock: Clock = system_clock,
    ) -> None:
        self._invoices = InvoiceRepo(store)
        self._lines = InvoiceLineRepo(store)
        self._rentals = RentalRepo(store)
        self._fleet = FleetService(store)
        self._clients = ClientService(store)
        self._config_provider = config_provider
        self._clock = clock
        self._logger = get_logger(self.__class__.__name__)

    def generate_invoice_number(self) -> str:
        """Next number for the current year; not reserved until an invoice is written."""
        return next_invoice_number(self._invoices.list_numbers(), self._clock().year)

    def _billable_rentals(self, client_id: str, rental_ids: Iterable[str]) -> list[Rental]:
        now = self._clock()
        rentals: list[Rental] = []
        for rental_id in rental_ids:
            rental = self._rentals.get_by_id(rental_id)
            if rental is None:
                raise NotFoundError("Rental", rental_id)
            if rental.client_id != client_id:
                raise ValidationError(
                    f"Rental {rental_id} does not belong to client {client_id}."
                )
            if not is_billable(rental, now):
                raise ValidationError(
                    f"Rental {rental_id} is not completed or is already invoiced."
                )
            rentals.append(rental)
        if not rentals:
            raise ValidationError("Select at least one rental to invoice.")
        return rentals

    def _build_line(self, rental: Rental, discount_percent: Decimal) -> InvoiceLine:
        registration, label = self._fleet.describe_vehicle(rental.vehicle_id)
        totals = compute_line_total(rental.unit_price, rental.day_count, discount_percent)
        return InvoiceLine(
            id=None,
            invoice_id=None,
            rental_id=rental.id,
            description=f"Location {label}",
            period=format_period(rental.start_date, rental.end_date),
            vehicle_registration=registration,
            vehicle_label=label,
            quantity=rental.day_count,
            unit_price=rental.unit_price,
            discount_percent=discount_percent,
            discount_amount=totals.discount_amount,
            total_ht=totals.total_ht,
        )

    def build_invoice(
        self,
        client_id: str,
        rental_ids: Iterable[str],
        discount_percent: MoneyInput = 0,
        invoice_date: Optional[datetime] = None,
    ) -> tuple[InvoiceHeader, list[InvoiceLine]]:
        """Prepare a draft invoice for billable rentals of one client.

        Nothing is written; pass the result to :meth:`create_invoice`.
        """
        percent = to_decimal(discount_percent)
        if not 0 <= percent <= 100:
            raise ValidationError("Discount must be between 0 and 100 percent.")
        rentals = self._billable_rentals(client_id, rental_ids)
        lines = [self._build_line(rental, percent) for rental in rentals]
        config = self._config_provider()
        totals = compute_invoice_totals(lines, config.vat_rate, config.stamp_duty)
        client = self._clients.get_client(client_id)
        if client is None:
            self._logger.warning("Client id=%s not found while building invoice", client_id)
        header = InvoiceHeader(
            id=None,
            invoice_number=self.generate_invoice_number(),
            invoice_date=invoice_date or self._clock(),
            client_id=client_id,
            client_name=client_display_name(client),
            client_tax_id=client_tax_reference(client) if client else "",
            rental_ids=[rental.id for rental in rentals],
            subtotal_ht=totals.subtotal_ht,
            discount_amount=totals.discount_amount,
            taxable_amount=totals.taxable_amount,
            vat_rate=totals.vat_rate,
            vat_amount=totals.vat_amount,
            stamp_duty=totals.stamp_duty,
            total_ttc=totals.total_ttc,
            status=InvoiceStatus.DRAFT,
        )
        return header, lines

    def create_invoice(
        self, header: InvoiceHeader, lines: Iterable[InvoiceLine]
    ) -> InvoiceHeader:
        """Write the header, its lines, and mark the source rentals invoiced.

        The writes are independent; a failure part way leaves the earlier
        documents in place and is visible in the log.
        """
        header = replace(
            header,
            paid_amount=Decimal("0"),
            remaining_amount=header.total_ttc,
            settlement_status=SettlementStatus.UNSETTLED,
            created_at=self._clock(),
        )
        created = self._invoices.create(header)
        self._logger.info(
            "Invoice %s created id=%s total_ttc=%s",
            created.invoice_number,
            created.id,
            created.total_ttc,
        )
        line_count = 0
        for line in lines:
            self._lines.create(replace(line, invoice_id=created.id))
            line_count += 1
        self._logger.info("Invoice id=%s: %s lines written", created.id, line_count)
        flipped = self._rentals.set_billing_status(created.rental_ids, BillingStatus.INVOICED)
        self._logger.info(
            "Invoice id=%s: %s of %s rentals marked invoiced",
            created.id,
            flipped,
            len(created.rental_ids),
        )
        return created

    def invoice_rentals(
        self,
        client_id: str,
        rental_ids: Iterable[str],
        discount_percent: MoneyInput = 0,
        invoice_date: Optional[datetime] = None,
    ) -> InvoiceHeader:
        header, lines = self.build_invoice(
            client_id, rental_ids, discount_percent, invoice_date
        )
        return self.create_invoice(header, lines)

    def validate_invoice(self, invoice_id: str) -> None:
        if not self._invoices.update_fields(
            invoice_id, status=InvoiceStatus.VALIDATED, validated_at=self._clock()
        ):
            raise NotFoundError("Invoice", invoice_id)
        self._logger.info("Invoice id=%s validated", invoice_id)

    def cancel_invoice(self, invoice_id: str) -> None:
        if not self._invoices.update_fields(invoice_id, status=InvoiceStatus.CANCELLED):
            raise NotFoundError("Invoice", invoice_id)
        self._logger.info("Invoice id=%s cancelled", invoice_id)

    def apply_settlement(
        self, invoice_id: str, paid_amount: MoneyInput
    ) -> Optional[SettlementUpdate]:
        """Store the settlement derived from the cumulative paid amount.

        A missing invoice is logged and ignored.
        """
        invoice = self._invoices.get_by_id(invoice_id)
        if invoice is None:
            self._logger.warning("Invoice id=%s not found; settlement skipped", invoice_id)
            return None
        update = recompute_settlement(invoice, paid_amount)
        self._invoices.update_fields(
            invoice_id,
            paid_amount=update.paid_amount,
            remaining_amount=update.remaining_amount,
            settlement_status=update.settlement_status,
        )
        self._logger.info(
            "Invoice id=%s settlement %s paid=%s remaining=%s",
            invoice_id,
            update.settlement_status.value,
            update.paid_amount,
            update.remaining_amount,
        )
        return update

    def get_invoice(self, invoice_id: str) -> Optional[InvoiceHeader]:
        return self._invoices.get_by_id(invoice_id)

    def list_invoices(self) -> list[InvoiceHeader]:
        return self._invoices.list_all()

    def get_invoice_lines(self, invoice_id: str) -> list[InvoiceLine]:
        return self._lines.list_by_invoice(invoice_id)

    def list_unsettled_invoices(self, client_id: Optional[str] = None) -> list[InvoiceHeader]:
        return self._invoices.list_by_settlement(
            (SettlementStatus.UNSETTLED, SettlementStatus.PARTIALLY_SETTLED),
            client_id,
        )

    def list_partially_settled_invoices(
        self, client_id: Optional[str] = None
    ) -> list[InvoiceHeader]:
        return self._invoices.list_by_settlement(
            (SettlementStatus.PARTIALLY_SETTLED,), client_id
        )
