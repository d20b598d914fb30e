"""Domain models for FleetRental."""

from fleet_rental.domain.models import (
    BillingStatus,
    Client,
    Expense,
    InvoiceHeader,
    InvoiceLine,
    InvoiceStatus,
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentLineStatus,
    PaymentMethod,
    Rental,
    RentalStatus,
    SettlementStatus,
    Vehicle,
)

__all__ = [
    "BillingStatus",
    "Client",
    "Expense",
    "InvoiceHeader",
    "InvoiceLine",
    "InvoiceStatus",
    "Payment",
    "PaymentAllocation",
    "PaymentLine",
    "PaymentLineStatus",
    "PaymentMethod",
    "Rental",
    "RentalStatus",
    "SettlementStatus",
    "Vehicle",
]
