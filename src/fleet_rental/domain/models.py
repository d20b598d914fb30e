"""Domain dataclasses, enums and patch types."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TypeVar

ZERO = Decimal("0")


class RentalStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"


class BillingStatus(str, Enum):
    OPEN = "open"
    INVOICED = "invoiced"


class CautionType(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    CARD = "card"
    TRANSFER = "transfer"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    VALIDATED = "validated"
    PAID = "paid"
    CANCELLED = "cancelled"


class SettlementStatus(str, Enum):
    UNSETTLED = "unsettled"
    PARTIALLY_SETTLED = "partially_settled"
    SETTLED = "settled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    BILL_OF_EXCHANGE = "bill_of_exchange"
    TRANSFER = "transfer"


class PaymentLineStatus(str, Enum):
    PENDING = "pending"
    CLEARED = "cleared"
    REJECTED = "rejected"


class ExpenseCategory(str, Enum):
    FIXED = "fixed"
    VEHICLE = "vehicle"
    MISC = "misc"


class ExpensePaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    TRANSFER = "transfer"
    CARD = "card"


class ClientType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ParameterType(str, Enum):
    CAUTION_TYPE = "caution_type"
    ANOMALY_TYPE = "anomaly_type"
    PAYMENT_METHOD = "payment_method"
    EXPENSE_CATEGORY = "expense_category"
    EXPENSE_TYPE = "expense_type"
    GENERAL_CONFIG = "general_config"


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


EXPENSE_TYPES: dict[ExpenseCategory, tuple[str, ...]] = {
    ExpenseCategory.FIXED: ("rent", "salary", "social_security", "tax", "other_fixed"),
    ExpenseCategory.VEHICLE: (
        "maintenance",
        "insurance",
        "washing",
        "fuel",
        "road_tax",
        "repair",
        "other_vehicle",
    ),
    ExpenseCategory.MISC: (
        "office_supplies",
        "it",
        "cleaning",
        "marketing",
        "other_misc",
    ),
}

MAX_DRIVERS = 2


@dataclass(slots=True)
class Anomaly:
    type: str
    description: str
    location: str
    photos: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Brand:
    id: Optional[str]
    name: str
    logo: str = ""


@dataclass(slots=True)
class VehicleModel:
    id: Optional[str]
    name: str
    brand_id: str


@dataclass(slots=True)
class Vehicle:
    id: Optional[str]
    model_id: str
    registration: str
    chassis_number: str = ""
    first_registration_date: Optional[datetime] = None
    insurer_name: str = ""
    insurance_date: Optional[datetime] = None
    inspection_date: Optional[datetime] = None
    road_tax_date: Optional[datetime] = None
    active: bool = True
    unit_price: Decimal = ZERO


@dataclass(slots=True)
class Driver:
    last_name: str
    first_name: str
    license_number: str = ""
    license_date: Optional[datetime] = None
    birth_date: Optional[datetime] = None
    gender: Optional[Gender] = None
    address: str = ""
    phone: str = ""
    comment: str = ""


@dataclass(slots=True)
class Client:
    id: Optional[str]
    last_name: str
    first_name: str
    client_type: ClientType = ClientType.INDIVIDUAL
    company_name: Optional[str] = None
    address: str = ""
    phone: str = ""
    email: str = ""
    national_id: Optional[str] = None
    tax_id: Optional[str] = None
    drivers: list[Driver] = field(default_factory=list)


@dataclass(slots=True)
class Rental:
    id: Optional[str]
    client_id: str
    vehicle_id: str
    start_date: datetime
    end_date: datetime
    unit_price: Decimal
    day_count: int = 1
    total_ht: Decimal = ZERO
    total_ttc: Decimal = ZERO
    start_mileage: int = 0
    end_mileage: Optional[int] = None
    start_fuel_level: int = 100
    end_fuel_level: Optional[int] = None
    pickup_anomalies: list[Anomaly] = field(default_factory=list)
    return_anomalies: list[Anomaly] = field(default_factory=list)
    deposit_type: CautionType = CautionType.CASH
    deposit_amount: Decimal = ZERO
    notes: str = ""
    billing_status: BillingStatus = BillingStatus.OPEN


@dataclass(slots=True)
class InvoiceHeader:
    id: Optional[str]
    invoice_number: str
    invoice_date: datetime
    client_id: str
    client_name: str = ""
    client_tax_id: str = ""
    rental_ids: list[str] = field(default_factory=list)
    subtotal_ht: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    vat_rate: Decimal = ZERO
    vat_amount: Decimal = ZERO
    stamp_duty: Decimal = ZERO
    total_ttc: Decimal = ZERO
    status: InvoiceStatus = InvoiceStatus.DRAFT
    settlement_status: SettlementStatus = SettlementStatus.UNSETTLED
    paid_amount: Decimal = ZERO
    remaining_amount: Decimal = ZERO
    created_at: Optional[datetime] = None
    validated_at: Optional[datetime] = None


@dataclass(slots=True)
class InvoiceLine:
    id: Optional[str]
    invoice_id: Optional[str]
    rental_id: str
    description: str
    period: str
    vehicle_registration: str
    vehicle_label: str
    quantity: int
    unit_price: Decimal
    discount_percent: Decimal = ZERO
    discount_amount: Decimal = ZERO
    total_ht: Decimal = ZERO


@dataclass(slots=True)
class Payment:
    id: Optional[str]
    payment_number: str
    payment_date: datetime
    client_id: str
    total_amount: Decimal
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class PaymentLine:
    id: Optional[str]
    payment_id: Optional[str]
    method: PaymentMethod
    amount: Decimal
    reference: str = ""
    bank_name: str = ""
    due_date: Optional[datetime] = None
    status: PaymentLineStatus = PaymentLineStatus.PENDING


@dataclass(slots=True)
class PaymentAllocation:
    id: Optional[str]
    payment_id: Optional[str]
    invoice_id: str
    allocated_amount: Decimal
    allocation_date: Optional[datetime] = None


@dataclass(slots=True)
class Expense:
    id: Optional[str]
    date: datetime
    amount: Optional[Decimal]
    category: ExpenseCategory
    type: str
    description: str = ""
    vehicle_id: Optional[str] = None
    payment_method: ExpensePaymentMethod = ExpensePaymentMethod.CASH
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class Parameter:
    id: Optional[str]
    type: ParameterType
    label: str
    value: str
    parent_value: Optional[str] = None
    order: Optional[int] = None


@dataclass(slots=True)
class User:
    id: Optional[str]
    email: str
    display_name: str = ""
    role: UserRole = UserRole.USER


class _Unset:
    """Marker for patch fields that were not supplied."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

T = TypeVar("T")


def patch_fields(patch: object) -> dict[str, Any]:
    """Return the fields explicitly set on a patch."""
    return {
        item.name: getattr(patch, item.name)
        for item in fields(patch)
        if getattr(patch, item.name) is not UNSET
    }


def apply_patch(record: T, patch: object) -> T:
    """Return a copy of ``record`` with the patch's present fields overwritten."""
    return replace(record, **patch_fields(patch))


@dataclass(slots=True)
class BrandPatch:
    name: str = UNSET
    logo: str = UNSET


@dataclass(slots=True)
class ModelPatch:
    name: str = UNSET
    brand_id: str = UNSET


@dataclass(slots=True)
class VehiclePatch:
    model_id: str = UNSET
    registration: str = UNSET
    chassis_number: str = UNSET
    first_registration_date: Optional[datetime] = UNSET
    insurer_name: str = UNSET
    insurance_date: Optional[datetime] = UNSET
    inspection_date: Optional[datetime] = UNSET
    road_tax_date: Optional[datetime] = UNSET
    active: bool = UNSET
    unit_price: Decimal = UNSET


@dataclass(slots=True)
class ClientPatch:
    last_name: str = UNSET
    first_name: str = UNSET
    client_type: ClientType = UNSET
    company_name: Optional[str] = UNSET
    address: str = UNSET
    phone: str = UNSET
    email: str = UNSET
    national_id: Optional[str] = UNSET
    tax_id: Optional[str] = UNSET
    drivers: list[Driver] = UNSET


@dataclass(slots=True)
class RentalPatch:
    client_id: str = UNSET
    vehicle_id: str = UNSET
    start_date: datetime = UNSET
    end_date: datetime = UNSET
    unit_price: Decimal = UNSET
    start_mileage: int = UNSET
    end_mileage: Optional[int] = UNSET
    start_fuel_level: int = UNSET
    end_fuel_level: Optional[int] = UNSET
    pickup_anomalies: list[Anomaly] = UNSET
    return_anomalies: list[Anomaly] = UNSET
    deposit_type: CautionType = UNSET
    deposit_amount: Decimal = UNSET
    notes: str = UNSET


@dataclass(slots=True)
class PaymentPatch:
    payment_date: datetime = UNSET
    client_id: str = UNSET
    total_amount: Decimal = UNSET
    notes: str = UNSET


@dataclass(slots=True)
class ExpensePatch:
    date: datetime = UNSET
    amount: Optional[Decimal] = UNSET
    category: ExpenseCategory = UNSET
    type: str = UNSET
    description: str = UNSET
    vehicle_id: Optional[str] = UNSET
    payment_method: ExpensePaymentMethod = UNSET


@dataclass(slots=True)
class ParameterPatch:
    label: str = UNSET
    value: str = UNSET
    parent_value: Optional[str] = UNSET
    order: Optional[int] = UNSET
