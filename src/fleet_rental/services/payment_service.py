"""Payment service: receipts, payment instruments and allocations."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.billing import to_decimal
from fleet_rental.domain.models import (
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentLineStatus,
    PaymentMethod,
    PaymentPatch,
    apply_patch,
)
from fleet_rental.domain.numbering import next_payment_number
from fleet_rental.domain.rental_rules import Clock, system_clock
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.payment_repo import (
    PaymentAllocationRepo,
    PaymentLineRepo,
    PaymentRepository,
)
from fleet_rental.services.errors import NotFoundError, ValidationError


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class PaymentService:
    """Service for client payments.

    Payments never modify invoices. After writing allocations, callers push
    the cumulative amount to ``InvoiceService.apply_settlement`` using
    :meth:`allocated_total`.
    """

    def __init__(self, store: DocumentStore, clock: Clock = system_clock) -> None:
        self._payments = PaymentRepository(store)
        self._lines = PaymentLineRepo(store)
        self._allocations = PaymentAllocationRepo(store)
        self._clock = clock
        self._logger = get_logger(self.__class__.__name__)

    def generate_payment_number(self) -> str:
        return next_payment_number(self._payments.list_numbers(), self._clock().year)

    def _validate(
        self,
        payment: Payment,
        lines: list[PaymentLine],
        allocations: list[PaymentAllocation],
    ) -> None:
        if not payment.client_id:
            raise ValidationError("A payment needs a client.")
        if to_decimal(payment.total_amount) <= 0:
            raise ValidationError("Payment amount must be greater than zero.")
        for line in lines:
            if to_decimal(line.amount) <= 0:
                raise ValidationError("Payment line amounts must be greater than zero.")
        for allocation in allocations:
            if to_decimal(allocation.allocated_amount) <= 0:
                raise ValidationError("Allocated amounts must be greater than zero.")
        allocated = sum(
            (to_decimal(allocation.allocated_amount) for allocation in allocations),
            Decimal("0"),
        )
        if allocations and allocated != to_decimal(payment.total_amount):
            self._logger.warning(
                "Payment %s allocations total %s differ from payment total %s",
                payment.payment_number,
                allocated,
                payment.total_amount,
            )

    def _write_children(
        self,
        payment_id: str,
        lines: Iterable[PaymentLine],
        allocations: Iterable[PaymentAllocation],
    ) -> tuple[list[PaymentLine], list[PaymentAllocation]]:
        now = self._clock()
        written_lines = [
            self._lines.create(replace(line, payment_id=payment_id)) for line in lines
        ]
        self._logger.info("Payment id=%s: %s lines written", payment_id, len(written_lines))
        written_allocations = [
            self._allocations.create(
                replace(allocation, payment_id=payment_id, allocation_date=now)
            )
            for allocation in allocations
        ]
        self._logger.info(
            "Payment id=%s: %s allocations written", payment_id, len(written_allocations)
        )
        return written_lines, written_allocations

    def create_payment(
        self,
        payment: Payment,
        lines: Iterable[PaymentLine],
        allocations: Iterable[PaymentAllocation],
    ) -> Payment:
        """Write a payment, its instruments and its invoice allocations."""
        lines = list(lines)
        allocations = list(allocations)
        self._validate(payment, lines, allocations)
        created = self._payments.create(replace(payment, created_at=self._clock()))
        self._logger.info(
            "Payment %s created id=%s total=%s",
            created.payment_number,
            created.id,
            created.total_amount,
        )
        self._write_children(created.id, lines, allocations)
        return created

    def update_payment(
        self,
        payment_id: str,
        patch: PaymentPatch,
        lines: Iterable[PaymentLine],
        allocations: Iterable[PaymentAllocation],
    ) -> Payment:
        """Patch a payment and replace all of its lines and allocations.

        Prior lines and allocations are deleted before the new sets are
        written. The steps are not atomic; calling again with the same
        arguments converges to the intended state.
        """
        existing = self._payments.get_by_id(payment_id)
        if existing is None:
            raise NotFoundError("Payment", payment_id)
        lines = list(lines)
        allocations = list(allocations)
        updated = apply_patch(existing, patch)
        self._validate(updated, lines, allocations)
        self._payments.apply(payment_id, patch)
        for line in self._lines.list_by_payment(payment_id):
            self._lines.delete(line.id)
        for allocation in self._allocations.list_by_payment(payment_id):
            self._allocations.delete(allocation.id)
        self._logger.info("Payment id=%s: previous lines and allocations removed", payment_id)
        self._write_children(payment_id, lines, allocations)
        return updated

    def update_payment_line_status(self, line_id: str, status: PaymentLineStatus) -> None:
        if not self._lines.update_fields(line_id, status=status):
            raise NotFoundError("Payment line", line_id)
        self._logger.info("Payment line id=%s status %s", line_id, status.value)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self._payments.get_by_id(payment_id)

    def list_payments(self) -> list[Payment]:
        return self._payments.list_all()

    def get_payment_lines(self, payment_id: str) -> list[PaymentLine]:
        return self._lines.list_by_payment(payment_id)

    def get_payment_allocations(self, payment_id: str) -> list[PaymentAllocation]:
        return self._allocations.list_by_payment(payment_id)

    def list_payments_by_client(self, client_id: str) -> list[Payment]:
        return self._payments.list_by_client(client_id)

    def list_allocations_by_invoice(self, invoice_id: str) -> list[PaymentAllocation]:
        return self._allocations.list_by_invoice(invoice_id)

    def list_payments_by_date_range(self, start: datetime, end: datetime) -> list[Payment]:
        return self._payments.list_by_date_range(start, end)

    def list_lines_by_method(self, method: PaymentMethod) -> list[PaymentLine]:
        return self._lines.list_by_method(method)

    def list_upcoming_due_dates(self, days: int = 30) -> list[PaymentLine]:
        """Pending instruments due from today through ``days`` ahead."""
        now = self._clock()
        return self._lines.list_due_between(
            _start_of_day(now), now + timedelta(days=days)
        )

    def list_overdue_due_dates(self) -> list[PaymentLine]:
        """Pending instruments due strictly before today."""
        return self._lines.list_due_before(_start_of_day(self._clock()))

    def list_due_dates(self, status: Optional[PaymentLineStatus] = None) -> list[PaymentLine]:
        return self._lines.list_with_due_date(status)

    def allocated_total(self, invoice_id: str) -> Decimal:
        """Cumulative amount allocated to an invoice across all payments."""
        return sum(
            (
                to_decimal(allocation.allocated_amount)
                for allocation in self._allocations.list_by_invoice(invoice_id)
            ),
            Decimal("0"),
        )

    def get_total_by_client(self, client_id: str) -> Decimal:
        return sum(
            (
                to_decimal(payment.total_amount)
                for payment in self._payments.list_by_client(client_id)
            ),
            Decimal("0"),
        )

    def get_total_collected_by_period(self, start: datetime, end: datetime) -> Decimal:
        return sum(
            (
                to_decimal(payment.total_amount)
                for payment in self._payments.list_by_date_range(start, end)
            ),
            Decimal("0"),
        )
