"""Parameter service: enumerations, expense taxonomy and general configuration."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Callable, Mapping, Optional

from fleet_rental.config import GeneralConfig
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import (
    EXPENSE_TYPES,
    ExpenseCategory,
    Parameter,
    ParameterPatch,
    ParameterType,
)
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.parameter_repo import ParameterRepo
from fleet_rental.services.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

CONFIG_CURRENCY = "currency"
CONFIG_DECIMALS = "decimals"
CONFIG_VAT_RATE = "vat_rate"
CONFIG_STAMP_DUTY = "stamp_duty"
CONFIG_KEYS = (CONFIG_CURRENCY, CONFIG_DECIMALS, CONFIG_VAT_RATE, CONFIG_STAMP_DUTY)

_EXPENSE_TYPE_LABELS = {
    "rent": "Loyer",
    "salary": "Salaire",
    "social_security": "CNSS",
    "tax": "Impôt",
    "other_fixed": "Autre",
    "maintenance": "Entretien",
    "insurance": "Assurance",
    "washing": "Lavage",
    "fuel": "Carburant",
    "road_tax": "Taxe",
    "repair": "Réparation",
    "other_vehicle": "Autre",
    "office_supplies": "Fourniture Bureau",
    "it": "Informatique",
    "cleaning": "Nettoyage",
    "marketing": "Marketing",
    "other_misc": "Autre",
}


def _default_parameters() -> list[Parameter]:
    rows = [
        (ParameterType.CAUTION_TYPE, "Espèces", "cash"),
        (ParameterType.CAUTION_TYPE, "Chèque", "cheque"),
        (ParameterType.CAUTION_TYPE, "Carte Bancaire", "card"),
        (ParameterType.CAUTION_TYPE, "Virement", "transfer"),
        (ParameterType.ANOMALY_TYPE, "Choc", "impact"),
        (ParameterType.ANOMALY_TYPE, "Rayure", "scratch"),
        (ParameterType.ANOMALY_TYPE, "Fissure", "crack"),
        (ParameterType.ANOMALY_TYPE, "Bosselure", "dent"),
        (ParameterType.ANOMALY_TYPE, "Éclat peinture", "paint_chip"),
        (ParameterType.ANOMALY_TYPE, "Pare-choc endommagé", "bumper"),
        (ParameterType.ANOMALY_TYPE, "Rétroviseur cassé", "mirror"),
        (ParameterType.ANOMALY_TYPE, "Vitre fissurée", "window"),
        (ParameterType.ANOMALY_TYPE, "Pneu usé", "tyre"),
        (ParameterType.ANOMALY_TYPE, "Autre", "other"),
        (ParameterType.PAYMENT_METHOD, "Espèces", "cash"),
        (ParameterType.PAYMENT_METHOD, "Chèque", "cheque"),
        (ParameterType.PAYMENT_METHOD, "Traite", "bill_of_exchange"),
        (ParameterType.PAYMENT_METHOD, "Virement", "transfer"),
        (ParameterType.EXPENSE_CATEGORY, "Charges Fixes", ExpenseCategory.FIXED.value),
        (ParameterType.EXPENSE_CATEGORY, "Charges Véhicule", ExpenseCategory.VEHICLE.value),
        (ParameterType.EXPENSE_CATEGORY, "Charges Diverses", ExpenseCategory.MISC.value),
    ]
    parameters = [
        Parameter(id=None, type=kind, label=label, value=value)
        for kind, label, value in rows
    ]
    for category, types in EXPENSE_TYPES.items():
        parameters.extend(
            Parameter(
                id=None,
                type=ParameterType.EXPENSE_TYPE,
                label=_EXPENSE_TYPE_LABELS[value],
                value=value,
                parent_value=category.value,
                order=position,
            )
            for position, value in enumerate(types)
        )
    defaults = GeneralConfig()
    parameters.extend(
        Parameter(id=None, type=ParameterType.GENERAL_CONFIG, label=key, value=value)
        for key, value in (
            (CONFIG_CURRENCY, defaults.currency),
            (CONFIG_DECIMALS, str(defaults.decimals)),
            (CONFIG_VAT_RATE, str(defaults.vat_rate)),
            (CONFIG_STAMP_DUTY, str(defaults.stamp_duty)),
        )
    )
    return parameters


def _parse_config(values: Mapping[str, str]) -> GeneralConfig:
    defaults = GeneralConfig()
    currency = (values.get(CONFIG_CURRENCY) or "").strip() or defaults.currency
    decimals = defaults.decimals
    vat_rate = defaults.vat_rate
    stamp_duty = defaults.stamp_duty
    try:
        if values.get(CONFIG_DECIMALS):
            decimals = int(values[CONFIG_DECIMALS])
        if values.get(CONFIG_VAT_RATE):
            vat_rate = Decimal(values[CONFIG_VAT_RATE])
        if values.get(CONFIG_STAMP_DUTY):
            stamp_duty = Decimal(values[CONFIG_STAMP_DUTY])
    except (ValueError, InvalidOperation) as exc:
        raise ValidationError(f"Invalid configuration value: {exc}") from exc
    if decimals < 0:
        raise ValidationError("Decimals must not be negative.")
    if vat_rate < 0 or stamp_duty < 0:
        raise ValidationError("VAT rate and stamp duty must not be negative.")
    return GeneralConfig(
        currency=currency,
        decimals=decimals,
        vat_rate=vat_rate,
        stamp_duty=stamp_duty,
    )


class ParameterService:
    """Service for configuration parameters."""

    def __init__(self, store: DocumentStore) -> None:
        self._repo = ParameterRepo(store)
        self._logger = get_logger(self.__class__.__name__)

    def list_parameters(self, parameter_type: Optional[ParameterType] = None) -> list[Parameter]:
        if parameter_type is None:
            return self._repo.list_all()
        return self._repo.list_by_type(parameter_type)

    def list_expense_types(self, category: ExpenseCategory) -> list[Parameter]:
        return [
            parameter
            for parameter in self._repo.list_by_type(ParameterType.EXPENSE_TYPE)
            if parameter.parent_value == category.value
        ]

    def add_parameter(self, parameter: Parameter) -> Parameter:
        if not parameter.label.strip() or not str(parameter.value).strip():
            raise ValidationError("Parameter label and value are required.")
        return self._repo.create(parameter)

    def update_parameter(self, parameter_id: str, patch: ParameterPatch) -> None:
        if not self._repo.apply(parameter_id, patch):
            raise NotFoundError("Parameter", parameter_id)

    def delete_parameter(self, parameter_id: str) -> None:
        if not self._repo.delete(parameter_id):
            raise NotFoundError("Parameter", parameter_id)

    def seed_defaults(self) -> int:
        """Insert the default parameters when the collection is empty."""
        if self._repo.find(limit=1):
            return 0
        defaults = _default_parameters()
        for parameter in defaults:
            self._repo.create(parameter)
        self._logger.info("Seeded %s default parameters", len(defaults))
        return len(defaults)

    def load_general_config(self) -> GeneralConfig:
        rows = self._repo.list_by_type(ParameterType.GENERAL_CONFIG)
        values = {row.label: row.value for row in rows if row.label in CONFIG_KEYS}
        return _parse_config(values)

    def update_general_config(
        self, values: Mapping[str, object], *, is_admin: bool
    ) -> GeneralConfig:
        """Persist general configuration entries; restricted to administrators."""
        if not is_admin:
            raise PermissionDeniedError("Only administrators can change settings.")
        unknown = set(values) - set(CONFIG_KEYS)
        if unknown:
            raise ValidationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        normalized = {key: str(value) for key, value in values.items()}
        _parse_config(normalized)
        for key, value in normalized.items():
            existing = self._repo.find_config_entry(key)
            if existing is None:
                self._repo.create(
                    Parameter(
                        id=None,
                        type=ParameterType.GENERAL_CONFIG,
                        label=key,
                        value=value,
                    )
                )
            else:
                self._repo.apply(existing.id, ParameterPatch(value=value))
        self._logger.info("General configuration updated keys=%s", sorted(normalized))
        return self.load_general_config()


class ConfigCache:
    """Load-once holder for :class:`GeneralConfig`, owned by the application root."""

    def __init__(self, loader: Callable[[], GeneralConfig]) -> None:
        self._loader = loader
        self._config: Optional[GeneralConfig] = None

    def get(self, force: bool = False) -> GeneralConfig:
        if self._config is None or force:
            self._config = self._loader()
        return self._config

    def invalidate(self) -> None:
        self._config = None
