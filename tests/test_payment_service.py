from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import NOW
from fleet_rental.domain.models import (
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentLineStatus,
    PaymentMethod,
    PaymentPatch,
)
from fleet_rental.services.errors import NotFoundError, ValidationError


def _payment(services, client_id: str, amount: str) -> Payment:
    return Payment(
        id=None,
        payment_number=services.payment_service.generate_payment_number(),
        payment_date=NOW,
        client_id=client_id,
        total_amount=Decimal(amount),
    )


def _line(amount: str, method=PaymentMethod.CASH, due_date=None) -> PaymentLine:
    return PaymentLine(
        id=None,
        payment_id=None,
        method=method,
        amount=Decimal(amount),
        due_date=due_date,
    )


def _allocation(invoice_id: str, amount: str) -> PaymentAllocation:
    return PaymentAllocation(
        id=None, payment_id=None, invoice_id=invoice_id, allocated_amount=Decimal(amount)
    )


def test_create_payment_writes_lines_and_allocations(services, client):
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "150"),
        [_line("100"), _line("50", PaymentMethod.CHEQUE, NOW + timedelta(days=10))],
        [_allocation("inv-1", "150")],
    )

    assert payment.payment_number == "REG2025-0001"
    assert services.payment_service.get_payment(payment.id).created_at == NOW
    lines = services.payment_service.get_payment_lines(payment.id)
    assert sorted(line.amount for line in lines) == [Decimal("50"), Decimal("100")]
    assert all(line.payment_id == payment.id for line in lines)
    [allocation] = services.payment_service.get_payment_allocations(payment.id)
    assert allocation.allocation_date == NOW
    assert services.payment_service.allocated_total("inv-1") == Decimal("150")
    assert services.payment_service.generate_payment_number() == "REG2025-0002"


def test_create_payment_rejects_non_positive_amount(services, client):
    with pytest.raises(ValidationError):
        services.payment_service.create_payment(
            _payment(services, client.id, "0"), [], []
        )


def test_allocation_mismatch_is_only_logged(services, client, caplog):
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "100"), [_line("100")], [_allocation("inv-1", "60")]
    )

    assert payment.id is not None
    assert "differ from payment total" in caplog.text


def test_update_payment_replaces_children(services, client):
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "100"),
        [_line("100")],
        [_allocation("inv-1", "100")],
    )

    for _ in range(2):
        services.payment_service.update_payment(
            payment.id,
            PaymentPatch(total_amount=Decimal("120"), notes="corrected"),
            [_line("70"), _line("50", PaymentMethod.TRANSFER)],
            [_allocation("inv-2", "120")],
        )

    stored = services.payment_service.get_payment(payment.id)
    assert stored.total_amount == Decimal("120")
    assert stored.notes == "corrected"
    assert stored.payment_number == payment.payment_number
    assert len(services.payment_service.get_payment_lines(payment.id)) == 2
    assert services.payment_service.allocated_total("inv-1") == 0
    assert services.payment_service.allocated_total("inv-2") == Decimal("120")


def test_update_missing_payment_raises(services):
    with pytest.raises(NotFoundError):
        services.payment_service.update_payment("missing", PaymentPatch(), [], [])


def test_due_date_queries(services, client):
    today = datetime(NOW.year, NOW.month, NOW.day)
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "400"),
        [
            _line("100", PaymentMethod.CHEQUE, today - timedelta(days=3)),
            _line("100", PaymentMethod.CHEQUE, today),
            _line("100", PaymentMethod.BILL_OF_EXCHANGE, today + timedelta(days=20)),
            _line("100", PaymentMethod.BILL_OF_EXCHANGE, today + timedelta(days=60)),
        ],
        [],
    )

    overdue = services.payment_service.list_overdue_due_dates()
    upcoming = services.payment_service.list_upcoming_due_dates(30)

    assert [line.due_date for line in overdue] == [today - timedelta(days=3)]
    assert [line.due_date for line in upcoming] == [today, today + timedelta(days=20)]
    assert len(services.payment_service.list_due_dates()) == 4

    cleared = overdue[0]
    services.payment_service.update_payment_line_status(cleared.id, PaymentLineStatus.CLEARED)
    assert services.payment_service.list_overdue_due_dates() == []
    assert len(services.payment_service.list_due_dates(PaymentLineStatus.PENDING)) == 3
    assert payment.id is not None



def test_line_status_accepts_any_transition(services, client):
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "100"),
        [_line("100", PaymentMethod.CHEQUE, NOW + timedelta(days=5))],
        [],
    )
    [line] = services.payment_service.get_payment_lines(payment.id)

    for status in (
        PaymentLineStatus.CLEARED,
        PaymentLineStatus.PENDING,
        PaymentLineStatus.REJECTED,
        PaymentLineStatus.CLEARED,
    ):
        services.payment_service.update_payment_line_status(line.id, status)
        [stored] = services.payment_service.get_payment_lines(payment.id)
        assert stored.status == status


def test_line_without_due_date_is_stored_as_null(services, store, client):
    payment = services.payment_service.create_payment(
        _payment(services, client.id, "150"),
        [_line("100"), _line("50", PaymentMethod.CHEQUE, NOW + timedelta(days=3))],
        [],
    )
    cash = next(
        line
        for line in services.payment_service.get_payment_lines(payment.id)
        if line.method == PaymentMethod.CASH
    )

    document = store.get("payment_lines", cash.id)
    assert "due_date" in document
    assert document["due_date"] is None
    due = services.payment_service.list_due_dates()
    assert [line.method for line in due] == [PaymentMethod.CHEQUE]

def test_update_missing_line_status_raises(services):
    with pytest.raises(NotFoundError):
        services.payment_service.update_payment_line_status(
            "missing", PaymentLineStatus.REJECTED
        )


def test_totals_by_client_and_period(services, client):
    services.payment_service.create_payment(_payment(services, client.id, "80"), [], [])
    services.payment_service.create_payment(_payment(services, client.id, "20.500"), [], [])

    assert services.payment_service.get_total_by_client(client.id) == Decimal("100.5")
    assert services.payment_service.get_total_collected_by_period(
        NOW - timedelta(days=1), NOW + timedelta(days=1)
    ) == Decimal("100.5")
    assert services.payment_service.list_lines_by_method(PaymentMethod.CASH) == []
