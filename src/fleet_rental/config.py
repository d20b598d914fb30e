"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from fleet_rental.version import __app_name__, __company__

APP_NAME = __app_name__
APP_DATA_DIRNAME = "FleetRental"
DB_FILENAME = "fleet_rental.db"
LOGS_DIRNAME = "logs"
LOG_FILENAME = "app.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
PDF_DIRNAME = "pdfs"
HOME_ENV_VAR = "FLEET_RENTAL_HOME"
LOG_LEVEL_ENV_VAR = "FLEET_RENTAL_LOG_LEVEL"

DEFAULT_CURRENCY = "TND"
DEFAULT_DECIMALS = 3
DEFAULT_VAT_RATE = Decimal("19")
DEFAULT_STAMP_DUTY = Decimal("1.000")

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class PdfIssuerInfo:
    """Issuer information printed on invoice PDFs."""

    name: str
    phone: str
    tax_id: str
    address: str


PDF_ISSUER = PdfIssuerInfo(
    name="FleetRental SARL",
    phone="+216 70 000 000",
    tax_id="MF 0000000/A/M/000",
    address="Avenue Habib Bourguiba, Tunis",
)


@dataclass(frozen=True)
class GeneralConfig:
    """Business configuration used by billing computations.

    ``vat_rate`` is a percentage (19 means 19%).
    """

    currency: str = DEFAULT_CURRENCY
    decimals: int = DEFAULT_DECIMALS
    vat_rate: Decimal = DEFAULT_VAT_RATE
    stamp_duty: Decimal = DEFAULT_STAMP_DUTY


@dataclass(frozen=True)
class AppConfig:
    """Static configuration values for FleetRental."""

    app_name: str = APP_NAME
    organization_name: str = __company__
