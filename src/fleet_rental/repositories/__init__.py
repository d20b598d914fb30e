"""Repositories for data access."""

from fleet_rental.repositories.client_repo import ClientRepo
from fleet_rental.repositories.expense_repo import ExpenseRepo
from fleet_rental.repositories.fleet_repo import BrandRepo, ModelRepo, VehicleRepo
from fleet_rental.repositories.invoice_repo import InvoiceLineRepo, InvoiceRepo
from fleet_rental.repositories.parameter_repo import ParameterRepo
from fleet_rental.repositories.payment_repo import (
    PaymentAllocationRepo,
    PaymentLineRepo,
    PaymentRepository,
)
from fleet_rental.repositories.rental_repo import RentalRepo
from fleet_rental.repositories.user_repo import UserRepo

__all__ = [
    "BrandRepo",
    "ClientRepo",
    "ExpenseRepo",
    "InvoiceLineRepo",
    "InvoiceRepo",
    "ModelRepo",
    "ParameterRepo",
    "PaymentAllocationRepo",
    "PaymentLineRepo",
    "PaymentRepository",
    "RentalRepo",
    "UserRepo",
    "VehicleRepo",
]
