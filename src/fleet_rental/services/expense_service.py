"""Expense service for business rules."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import (
    EXPENSE_TYPES,
    Expense,
    ExpenseCategory,
    ExpensePatch,
    apply_patch,
)
from fleet_rental.domain.rental_rules import Clock, system_clock
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.expense_repo import ExpenseRepo
from fleet_rental.services.errors import NotFoundError, ValidationError
from fleet_rental.services.parameter_service import ParameterService


class ExpenseService:
    """Service for expense operations."""

    def __init__(self, store: DocumentStore, clock: Clock = system_clock) -> None:
        self._repo = ExpenseRepo(store)
        self._parameters = ParameterService(store)
        self._clock = clock
        self._logger = get_logger(self.__class__.__name__)

    def list_expenses(self) -> list[Expense]:
        return self._repo.list_all()

    def list_by_period(self, start: datetime, end: datetime) -> list[Expense]:
        return self._repo.list_by_period(start, end)

    def list_by_vehicle(self, vehicle_id: str) -> list[Expense]:
        return self._repo.list_by_vehicle(vehicle_id)

    def get_total_by_period(self, start: datetime, end: datetime) -> Decimal:
        expenses = self._repo.list_by_period(start, end)
        return sum(
            (expense.amount for expense in expenses if expense.amount is not None),
            Decimal("0"),
        )

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._repo.get_by_id(expense_id)

    def create_expense(self, expense: Expense) -> Expense:
        self._validate(expense)
        created = self._repo.create(replace(expense, created_at=self._clock()))
        self._logger.info(
            "Expense created id=%s category=%s amount=%s",
            created.id,
            created.category.value,
            created.amount,
        )
        return created

    def update_expense(self, expense_id: str, patch: ExpensePatch) -> Expense:
        existing = self._repo.get_by_id(expense_id)
        if existing is None:
            raise NotFoundError("Expense", expense_id)
        updated = apply_patch(existing, patch)
        self._validate(updated)
        self._repo.apply(expense_id, patch)
        return updated

    def delete_expense(self, expense_id: str) -> None:
        if not self._repo.delete(expense_id):
            raise NotFoundError("Expense", expense_id)

    def _allowed_types(self, category: ExpenseCategory) -> set[str]:
        """Types configured in the parameters, or the built-in set when none are."""
        configured = {
            str(parameter.value) for parameter in self._parameters.list_expense_types(category)
        }
        return configured or set(EXPENSE_TYPES[category])

    def _validate(self, expense: Expense) -> None:
        if expense.date is None:
            raise ValidationError("Expense date is required.")
        if expense.amount is not None and expense.amount < 0:
            raise ValidationError("Expense amount must not be negative.")
        if expense.category == ExpenseCategory.VEHICLE and not expense.vehicle_id:
            raise ValidationError("A vehicle expense must reference a vehicle.")
        if expense.type not in self._allowed_types(expense.category):
            raise ValidationError(
                f"Expense type {expense.type!r} is not valid for category "
                f"{expense.category.value}."
            )
