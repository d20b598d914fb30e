from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from fleet_rental.domain.billing import (
    compute_invoice_totals,
    compute_line_total,
    compute_rental_totals,
    recompute_settlement,
    round_half_up,
    round_money,
    settlement_status,
)
from fleet_rental.domain.models import InvoiceHeader, SettlementStatus


def _invoice(total_ttc: str) -> InvoiceHeader:
    return InvoiceHeader(
        id="inv-1",
        invoice_number="2025-00001",
        invoice_date=datetime(2025, 6, 1),
        client_id="c-1",
        total_ttc=Decimal(total_ttc),
    )


def test_line_total_applies_discount_percent():
    totals = compute_line_total(Decimal("80"), 5, Decimal("10"))

    assert totals.discount_amount == Decimal("40")
    assert totals.total_ht == Decimal("360")


def test_line_total_without_discount():
    totals = compute_line_total("100", 3)

    assert totals.discount_amount == 0
    assert totals.total_ht == Decimal("300")


def test_invoice_totals_are_exact():
    lines = [
        compute_line_total(Decimal("100"), 3, Decimal("10")),
        compute_line_total(Decimal("45.5"), 2),
    ]

    totals = compute_invoice_totals(lines, Decimal("19"), Decimal("1.000"))

    assert totals.subtotal_ht == Decimal("391")
    assert totals.discount_amount == Decimal("30")
    assert totals.taxable_amount == Decimal("361")
    assert totals.vat_amount == Decimal("68.59")
    assert totals.total_ttc == Decimal("430.590")
    expected = (totals.subtotal_ht - totals.discount_amount) * (
        1 + Decimal("19") / 100
    ) + Decimal("1.000")
    assert totals.total_ttc == expected


def test_invoice_totals_of_empty_lines_is_stamp_duty():
    totals = compute_invoice_totals([], 19, Decimal("1"))

    assert totals.taxable_amount == 0
    assert totals.total_ttc == Decimal("1")


def test_rental_totals():
    total_ht, total_ttc = compute_rental_totals(Decimal("100"), 3, Decimal("19"))

    assert total_ht == Decimal("300")
    assert total_ttc == Decimal("357")


@pytest.mark.parametrize(
    ("paid", "expected"),
    [
        ("0", SettlementStatus.UNSETTLED),
        ("0.001", SettlementStatus.PARTIALLY_SETTLED),
        ("357.999", SettlementStatus.PARTIALLY_SETTLED),
        ("358", SettlementStatus.SETTLED),
        ("400", SettlementStatus.SETTLED),
    ],
)
def test_settlement_status_boundaries(paid, expected):
    assert settlement_status(Decimal(paid), Decimal("358.000")) == expected


def test_recompute_settlement_is_idempotent():
    invoice = _invoice("358.000")

    first = recompute_settlement(invoice, Decimal("200"))
    second = recompute_settlement(invoice, Decimal("200"))

    assert first == second
    assert first.remaining_amount == Decimal("158")
    assert first.settlement_status == SettlementStatus.PARTIALLY_SETTLED


def test_overpayment_leaves_negative_remaining():
    update = recompute_settlement(_invoice("100"), Decimal("120"))

    assert update.remaining_amount == Decimal("-20")
    assert update.settlement_status == SettlementStatus.SETTLED


def test_round_money_half_up():
    assert round_money(Decimal("1.2345"), 3) == Decimal("1.235")
    assert round_money(Decimal("2.5"), 0) == Decimal("3")
    assert round_half_up(Decimal("2.5")) == 3
    assert round_half_up(Decimal("2.49")) == 2
