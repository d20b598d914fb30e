from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import NOW
from fleet_rental.domain.models import (
    Expense,
    ExpenseCategory,
    ExpensePatch,
    Parameter,
    ParameterType,
)
from fleet_rental.services.errors import NotFoundError, ValidationError
from fleet_rental.services.expense_service import ExpenseService


def _expense(**overrides) -> Expense:
    values = dict(
        id=None,
        date=datetime(2025, 6, 3),
        amount=Decimal("45.500"),
        category=ExpenseCategory.FIXED,
        type="rent",
    )
    values.update(overrides)
    return Expense(**values)


def test_create_expense_stamps_created_at(services):
    expense = services.expense_service.create_expense(_expense())

    stored = services.expense_service.get_expense(expense.id)
    assert stored.created_at == NOW
    assert stored.amount == Decimal("45.500")


def test_vehicle_expense_requires_vehicle(services, vehicle):
    with pytest.raises(ValidationError):
        services.expense_service.create_expense(
            _expense(category=ExpenseCategory.VEHICLE, type="fuel")
        )

    expense = services.expense_service.create_expense(
        _expense(category=ExpenseCategory.VEHICLE, type="fuel", vehicle_id=vehicle.id)
    )
    assert [e.id for e in services.expense_service.list_by_vehicle(vehicle.id)] == [expense.id]


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "fuel"},
        {"amount": Decimal("-1")},
        {"date": None},
    ],
)
def test_invalid_expenses(services, overrides):
    with pytest.raises(ValidationError):
        services.expense_service.create_expense(_expense(**overrides))


def test_expense_without_amount_is_allowed(services):
    services.expense_service.create_expense(_expense(amount=None))
    services.expense_service.create_expense(_expense(amount=Decimal("10")))

    total = services.expense_service.get_total_by_period(
        datetime(2025, 6, 1), datetime(2025, 6, 30)
    )
    assert total == Decimal("10")


def test_update_and_delete(services):
    expense = services.expense_service.create_expense(_expense())

    services.expense_service.update_expense(
        expense.id, ExpensePatch(description="June rent", amount=Decimal("50"))
    )
    stored = services.expense_service.get_expense(expense.id)
    assert stored.description == "June rent"
    assert stored.amount == Decimal("50")
    assert stored.type == "rent"

    with pytest.raises(ValidationError):
        services.expense_service.update_expense(expense.id, ExpensePatch(type="washing"))

    services.expense_service.delete_expense(expense.id)
    assert services.expense_service.list_expenses() == []
    with pytest.raises(NotFoundError):
        services.expense_service.update_expense(expense.id, ExpensePatch(description="x"))


def test_list_by_period(services):
    services.expense_service.create_expense(_expense(date=datetime(2025, 5, 31)))
    june = services.expense_service.create_expense(_expense(date=datetime(2025, 6, 1)))

    expenses = services.expense_service.list_by_period(
        datetime(2025, 6, 1), datetime(2025, 6, 30)
    )
    assert [e.id for e in expenses] == [june.id]


def test_expense_type_added_as_parameter_is_accepted(services):
    services.parameter_service.add_parameter(
        Parameter(
            id=None,
            type=ParameterType.EXPENSE_TYPE,
            label="Internet",
            value="internet",
            parent_value=ExpenseCategory.MISC.value,
        )
    )

    expense = services.expense_service.create_expense(
        _expense(category=ExpenseCategory.MISC, type="internet")
    )
    assert services.expense_service.get_expense(expense.id).type == "internet"
    with pytest.raises(ValidationError):
        services.expense_service.create_expense(
            _expense(category=ExpenseCategory.FIXED, type="internet")
        )


def test_builtin_expense_types_apply_without_parameters(store):
    expenses = ExpenseService(store)
    created = expenses.create_expense(_expense())
    assert created.id is not None
    with pytest.raises(ValidationError):
        expenses.create_expense(_expense(type="internet"))
