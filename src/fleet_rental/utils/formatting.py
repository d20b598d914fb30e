"""Display formatting helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fleet_rental.config import GeneralConfig
from fleet_rental.domain.billing import MoneyInput, round_money, to_decimal


def format_amount(value: MoneyInput, decimals: int) -> str:
    """Format with a space thousands separator and a comma decimal mark."""
    rounded = round_money(value, decimals)
    formatted = f"{rounded:,.{decimals}f}"
    return formatted.replace(",", " ").replace(".", ",")


def format_currency(value: MoneyInput, config: Optional[GeneralConfig] = None) -> str:
    config = config or GeneralConfig()
    return f"{format_amount(value, config.decimals)} {config.currency}"


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def format_percent(value: MoneyInput) -> str:
    """Whole percentages print bare, fractional ones with one decimal."""
    decimal_value = to_decimal(value)
    decimals = 0 if decimal_value == decimal_value.to_integral_value() else 1
    return f"{format_amount(decimal_value, decimals)} %"
