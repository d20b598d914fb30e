"""Money and tax computations for rentals, invoices and settlements.

All amounts are ``Decimal``. Rates are percentages (``19`` means 19%). The
functions here are pure: they never round, never read configuration and never
touch storage. Rounding to the currency's minor unit happens only for display
through :func:`round_money`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol, Union

from fleet_rental.domain.models import InvoiceHeader, SettlementStatus

MoneyInput = Union[Decimal, int, float, str, None]

HUNDRED = Decimal("100")


def to_decimal(value: MoneyInput) -> Decimal:
    """Convert user input into a Decimal; floats go through ``str``."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: MoneyInput, decimals: int) -> Decimal:
    """Round half-up to ``decimals`` fractional digits."""
    quantum = Decimal(1).scaleb(-decimals)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def round_half_up(value: MoneyInput) -> int:
    return int(to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class _BilledLine(Protocol):
    total_ht: Decimal
    discount_amount: Decimal


@dataclass(frozen=True)
class LineTotals:
    discount_amount: Decimal
    total_ht: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal_ht: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    stamp_duty: Decimal
    total_ttc: Decimal


@dataclass(frozen=True)
class SettlementUpdate:
    paid_amount: Decimal
    remaining_amount: Decimal
    settlement_status: SettlementStatus


def compute_line_total(
    unit_price: MoneyInput,
    quantity: MoneyInput,
    discount_percent: MoneyInput = 0,
) -> LineTotals:
    """Compute the discount and net amount of one invoice line."""
    gross = to_decimal(unit_price) * to_decimal(quantity)
    discount_amount = gross * to_decimal(discount_percent) / HUNDRED
    return LineTotals(discount_amount=discount_amount, total_ht=gross - discount_amount)


def compute_invoice_totals(
    lines: Iterable[_BilledLine],
    vat_rate: MoneyInput,
    stamp_duty: MoneyInput,
) -> InvoiceTotals:
    """Aggregate line amounts into invoice header totals.

    ``subtotal_ht`` is the gross amount before discounts (each line's net
    amount plus its discount), so ``taxable_amount`` equals the sum of the
    lines' net amounts. Summing the net amounts into ``subtotal_ht`` instead
    would take the discount off twice.
    """
    subtotal_ht = Decimal("0")
    discount_amount = Decimal("0")
    for line in lines:
        line_discount = to_decimal(line.discount_amount)
        subtotal_ht += to_decimal(line.total_ht) + line_discount
        discount_amount += line_discount
    rate = to_decimal(vat_rate)
    duty = to_decimal(stamp_duty)
    taxable_amount = subtotal_ht - discount_amount
    vat_amount = taxable_amount * rate / HUNDRED
    return InvoiceTotals(
        subtotal_ht=subtotal_ht,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        vat_rate=rate,
        vat_amount=vat_amount,
        stamp_duty=duty,
        total_ttc=taxable_amount + vat_amount + duty,
    )


def compute_rental_totals(
    unit_price: MoneyInput, day_count: int, vat_rate: MoneyInput
) -> tuple[Decimal, Decimal]:
    """Return ``(total_ht, total_ttc)`` for a rental."""
    total_ht = to_decimal(unit_price) * day_count
    total_ttc = total_ht * (1 + to_decimal(vat_rate) / HUNDRED)
    return total_ht, total_ttc


def settlement_status(paid_amount: MoneyInput, total_ttc: MoneyInput) -> SettlementStatus:
    paid = to_decimal(paid_amount)
    if paid >= to_decimal(total_ttc):
        return SettlementStatus.SETTLED
    if paid > 0:
        return SettlementStatus.PARTIALLY_SETTLED
    return SettlementStatus.UNSETTLED


def recompute_settlement(invoice: InvoiceHeader, paid_amount: MoneyInput) -> SettlementUpdate:
    """Derive the settlement fields of ``invoice`` for a cumulative paid amount."""
    paid = to_decimal(paid_amount)
    return SettlementUpdate(
        paid_amount=paid,
        remaining_amount=invoice.total_ttc - paid,
        settlement_status=settlement_status(paid, invoice.total_ttc),
    )
