"""Temporal rules for rentals.

Status is derived from the rental's dates and the current instant; it is never
stored. Callers pass ``now`` explicitly (usually from an injected clock).
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Callable

from fleet_rental.domain.models import BillingStatus, Rental, RentalStatus

Clock = Callable[[], datetime]

ONE_DAY = timedelta(days=1)


def system_clock() -> datetime:
    return datetime.now()


def rental_status(start: datetime, end: datetime, now: datetime) -> RentalStatus:
    if now < start:
        return RentalStatus.PLANNED
    if now > end:
        return RentalStatus.COMPLETED
    return RentalStatus.ACTIVE


def rental_duration(start: datetime, end: datetime) -> int:
    """Number of billed days: partial days round up, minimum one day."""
    days = math.ceil(abs(end - start) / ONE_DAY)
    return max(1, days)


def is_billable(rental: Rental, now: datetime) -> bool:
    return (
        rental_status(rental.start_date, rental.end_date, now) == RentalStatus.COMPLETED
        and rental.billing_status == BillingStatus.OPEN
    )
