from __future__ import annotations

from decimal import Decimal

from conftest import NOW
from fleet_rental.domain.models import (
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentMethod,
    SettlementStatus,
)


def _pay(services, client_id: str, invoice_id: str, amount: Decimal) -> None:
    services.payment_service.create_payment(
        Payment(
            id=None,
            payment_number=services.payment_service.generate_payment_number(),
            payment_date=NOW,
            client_id=client_id,
            total_amount=amount,
        ),
        [PaymentLine(id=None, payment_id=None, method=PaymentMethod.CASH, amount=amount)],
        [
            PaymentAllocation(
                id=None, payment_id=None, invoice_id=invoice_id, allocated_amount=amount
            )
        ],
    )
    services.invoice_service.apply_settlement(
        invoice_id, services.payment_service.allocated_total(invoice_id)
    )


def test_rental_to_settled_invoice(services, client, completed_rental):
    assert completed_rental.total_ht == Decimal("300")
    assert completed_rental.total_ttc == Decimal("357")

    invoice = services.invoice_service.invoice_rentals(client.id, [completed_rental.id])
    assert invoice.total_ttc == Decimal("358")
    services.invoice_service.validate_invoice(invoice.id)

    _pay(services, client.id, invoice.id, Decimal("200"))
    partial = services.invoice_service.get_invoice(invoice.id)
    assert partial.paid_amount == Decimal("200")
    assert partial.remaining_amount == Decimal("158")
    assert partial.settlement_status == SettlementStatus.PARTIALLY_SETTLED

    _pay(services, client.id, invoice.id, Decimal("158"))
    settled = services.invoice_service.get_invoice(invoice.id)
    assert settled.remaining_amount == 0
    assert settled.settlement_status == SettlementStatus.SETTLED
    assert [p.payment_number for p in services.payment_service.list_payments()] == [
        "REG2025-0001",
        "REG2025-0002",
    ]
