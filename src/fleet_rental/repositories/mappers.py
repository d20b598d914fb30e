"""Document mappers for domain models.

Datetimes are stored as ISO-8601 strings and amounts as decimal strings; both
are converted back to native types here, at the repository boundary.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from dateutil import parser

from fleet_rental.domain.models import (
    Anomaly,
    BillingStatus,
    Brand,
    CautionType,
    Client,
    ClientType,
    Driver,
    Expense,
    ExpenseCategory,
    ExpensePaymentMethod,
    Gender,
    InvoiceHeader,
    InvoiceLine,
    InvoiceStatus,
    Parameter,
    ParameterType,
    Payment,
    PaymentAllocation,
    PaymentLine,
    PaymentLineStatus,
    PaymentMethod,
    Rental,
    SettlementStatus,
    User,
    UserRole,
    Vehicle,
    VehicleModel,
    patch_fields,
)

Document = Mapping[str, Any]


def to_document_value(value: Any) -> Any:
    """Convert a Python value into its JSON document representation."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()).isoformat(timespec="seconds")
    if isinstance(value, Decimal):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_document_value(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, (list, tuple, set)):
        return [to_document_value(item) for item in value]
    return value


def record_to_document(record: object) -> dict[str, Any]:
    return {
        item.name: to_document_value(getattr(record, item.name))
        for item in fields(record)
        if item.name != "id"
    }


def patch_to_document(patch: object) -> dict[str, Any]:
    return {key: to_document_value(value) for key, value in patch_fields(patch).items()}


def _value(document: Document, key: str, default: Any = None) -> Any:
    value = document.get(key)
    return default if value is None else value


def _datetime(document: Document, key: str) -> Optional[datetime]:
    value = document.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return parser.isoparse(value)


def _decimal(document: Document, key: str, default: Optional[str] = "0") -> Optional[Decimal]:
    value = document.get(key)
    if value is None or value == "":
        return Decimal(default) if default is not None else None
    return Decimal(str(value))


def _enum(enum_type: type[Enum], document: Document, key: str, default: Enum) -> Any:
    raw = document.get(key)
    try:
        return enum_type(raw)
    except ValueError:
        return default


def _anomalies(document: Document, key: str) -> list[Anomaly]:
    return [
        Anomaly(
            type=_value(item, "type", ""),
            description=_value(item, "description", ""),
            location=_value(item, "location", ""),
            photos=list(_value(item, "photos", [])),
        )
        for item in document.get(key) or []
    ]


def brand_from_document(document: Document) -> Brand:
    return Brand(id=document.get("id"), name=document["name"], logo=_value(document, "logo", ""))


def model_from_document(document: Document) -> VehicleModel:
    return VehicleModel(
        id=document.get("id"),
        name=document["name"],
        brand_id=document["brand_id"],
    )


def vehicle_from_document(document: Document) -> Vehicle:
    return Vehicle(
        id=document.get("id"),
        model_id=document["model_id"],
        registration=document["registration"],
        chassis_number=_value(document, "chassis_number", ""),
        first_registration_date=_datetime(document, "first_registration_date"),
        insurer_name=_value(document, "insurer_name", ""),
        insurance_date=_datetime(document, "insurance_date"),
        inspection_date=_datetime(document, "inspection_date"),
        road_tax_date=_datetime(document, "road_tax_date"),
        active=bool(_value(document, "active", True)),
        unit_price=_decimal(document, "unit_price"),
    )


def _driver_from_document(document: Document) -> Driver:
    raw_gender = document.get("gender")
    return Driver(
        last_name=_value(document, "last_name", ""),
        first_name=_value(document, "first_name", ""),
        license_number=_value(document, "license_number", ""),
        license_date=_datetime(document, "license_date"),
        birth_date=_datetime(document, "birth_date"),
        gender=Gender(raw_gender) if raw_gender else None,
        address=_value(document, "address", ""),
        phone=_value(document, "phone", ""),
        comment=_value(document, "comment", ""),
    )


def client_from_document(document: Document) -> Client:
    return Client(
        id=document.get("id"),
        last_name=_value(document, "last_name", ""),
        first_name=_value(document, "first_name", ""),
        client_type=_enum(ClientType, document, "client_type", ClientType.INDIVIDUAL),
        company_name=document.get("company_name"),
        address=_value(document, "address", ""),
        phone=_value(document, "phone", ""),
        email=_value(document, "email", ""),
        national_id=document.get("national_id"),
        tax_id=document.get("tax_id"),
        drivers=[_driver_from_document(item) for item in document.get("drivers") or []],
    )


def rental_from_document(document: Document) -> Rental:
    return Rental(
        id=document.get("id"),
        client_id=document["client_id"],
        vehicle_id=document["vehicle_id"],
        start_date=_datetime(document, "start_date"),
        end_date=_datetime(document, "end_date"),
        unit_price=_decimal(document, "unit_price"),
        day_count=int(_value(document, "day_count", 1)),
        total_ht=_decimal(document, "total_ht"),
        total_ttc=_decimal(document, "total_ttc"),
        start_mileage=int(_value(document, "start_mileage", 0)),
        end_mileage=document.get("end_mileage"),
        start_fuel_level=int(_value(document, "start_fuel_level", 100)),
        end_fuel_level=document.get("end_fuel_level"),
        pickup_anomalies=_anomalies(document, "pickup_anomalies"),
        return_anomalies=_anomalies(document, "return_anomalies"),
        deposit_type=_enum(CautionType, document, "deposit_type", CautionType.CASH),
        deposit_amount=_decimal(document, "deposit_amount"),
        notes=_value(document, "notes", ""),
        billing_status=_enum(BillingStatus, document, "billing_status", BillingStatus.OPEN),
    )


def invoice_from_document(document: Document) -> InvoiceHeader:
    return InvoiceHeader(
        id=document.get("id"),
        invoice_number=document["invoice_number"],
        invoice_date=_datetime(document, "invoice_date"),
        client_id=document["client_id"],
        client_name=_value(document, "client_name", ""),
        client_tax_id=_value(document, "client_tax_id", ""),
        rental_ids=list(_value(document, "rental_ids", [])),
        subtotal_ht=_decimal(document, "subtotal_ht"),
        discount_amount=_decimal(document, "discount_amount"),
        taxable_amount=_decimal(document, "taxable_amount"),
        vat_rate=_decimal(document, "vat_rate"),
        vat_amount=_decimal(document, "vat_amount"),
        stamp_duty=_decimal(document, "stamp_duty"),
        total_ttc=_decimal(document, "total_ttc"),
        status=_enum(InvoiceStatus, document, "status", InvoiceStatus.DRAFT),
        settlement_status=_enum(
            SettlementStatus, document, "settlement_status", SettlementStatus.UNSETTLED
        ),
        paid_amount=_decimal(document, "paid_amount"),
        remaining_amount=_decimal(document, "remaining_amount"),
        created_at=_datetime(document, "created_at"),
        validated_at=_datetime(document, "validated_at"),
    )


def invoice_line_from_document(document: Document) -> InvoiceLine:
    return InvoiceLine(
        id=document.get("id"),
        invoice_id=document.get("invoice_id"),
        rental_id=document["rental_id"],
        description=_value(document, "description", ""),
        period=_value(document, "period", ""),
        vehicle_registration=_value(document, "vehicle_registration", ""),
        vehicle_label=_value(document, "vehicle_label", ""),
        quantity=int(_value(document, "quantity", 0)),
        unit_price=_decimal(document, "unit_price"),
        discount_percent=_decimal(document, "discount_percent"),
        discount_amount=_decimal(document, "discount_amount"),
        total_ht=_decimal(document, "total_ht"),
    )


def payment_from_document(document: Document) -> Payment:
    return Payment(
        id=document.get("id"),
        payment_number=document["payment_number"],
        payment_date=_datetime(document, "payment_date"),
        client_id=document["client_id"],
        total_amount=_decimal(document, "total_amount"),
        notes=_value(document, "notes", ""),
        created_at=_datetime(document, "created_at"),
    )


def payment_line_from_document(document: Document) -> PaymentLine:
    return PaymentLine(
        id=document.get("id"),
        payment_id=document.get("payment_id"),
        method=PaymentMethod(document["method"]),
        amount=_decimal(document, "amount"),
        reference=_value(document, "reference", ""),
        bank_name=_value(document, "bank_name", ""),
        due_date=_datetime(document, "due_date"),
        status=_enum(PaymentLineStatus, document, "status", PaymentLineStatus.PENDING),
    )


def payment_allocation_from_document(document: Document) -> PaymentAllocation:
    return PaymentAllocation(
        id=document.get("id"),
        payment_id=document.get("payment_id"),
        invoice_id=document["invoice_id"],
        allocated_amount=_decimal(document, "allocated_amount"),
        allocation_date=_datetime(document, "allocation_date"),
    )


def expense_from_document(document: Document) -> Expense:
    return Expense(
        id=document.get("id"),
        date=_datetime(document, "date"),
        amount=_decimal(document, "amount", default=None),
        category=ExpenseCategory(document["category"]),
        type=document["type"],
        description=_value(document, "description", ""),
        vehicle_id=document.get("vehicle_id"),
        payment_method=_enum(
            ExpensePaymentMethod, document, "payment_method", ExpensePaymentMethod.CASH
        ),
        created_at=_datetime(document, "created_at"),
    )


def parameter_from_document(document: Document) -> Parameter:
    order = document.get("order")
    return Parameter(
        id=document.get("id"),
        type=ParameterType(document["type"]),
        label=_value(document, "label", ""),
        value=str(_value(document, "value", "")),
        parent_value=document.get("parent_value"),
        order=int(order) if order is not None else None,
    )


def user_from_document(document: Document) -> User:
    return User(
        id=document.get("id"),
        email=_value(document, "email", ""),
        display_name=_value(document, "display_name", ""),
        role=_enum(UserRole, document, "role", UserRole.USER),
    )
