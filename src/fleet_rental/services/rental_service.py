"""Rental service for business rules."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from fleet_rental.config import GeneralConfig
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.billing import compute_rental_totals, to_decimal
from fleet_rental.domain.models import (
    Anomaly,
    BillingStatus,
    Rental,
    RentalPatch,
    RentalStatus,
    apply_patch,
    patch_fields,
)
from fleet_rental.domain.rental_rules import (
    Clock,
    is_billable,
    rental_duration,
    rental_status,
    system_clock,
)
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.rental_repo import RentalRepo
from fleet_rental.services.errors import NotFoundError, ValidationError

_PRICING_FIELDS = {"start_date", "end_date", "unit_price"}


class RentalService:
    """Service for rental contracts."""

    def __init__(
        self,
        store: DocumentStore,
        config_provider: Callable[[], GeneralConfig] = GeneralConfig,
        clock: Clock = system_clock,
    ) -> None:
        self._repo = RentalRepo(store)
        self._config_provider = config_provider
        self._clock = clock
        self._logger = get_logger(self.__class__.__name__)

    def _get(self, rental_id: str) -> Rental:
        rental = self._repo.get_by_id(rental_id)
        if rental is None:
            raise NotFoundError("Rental", rental_id)
        return rental

    def _validate(self, rental: Rental) -> None:
        if not rental.client_id or not rental.vehicle_id:
            raise ValidationError("A rental needs a client and a vehicle.")
        if rental.start_date is None or rental.end_date is None:
            raise ValidationError("Rental start and end dates are required.")
        if rental.end_date < rental.start_date:
            raise ValidationError("The end date must not be before the start date.")
        for level in (rental.start_fuel_level, rental.end_fuel_level):
            if level is not None and not 0 <= level <= 100:
                raise ValidationError("Fuel level must be between 0 and 100.")
        if rental.end_mileage is not None and rental.end_mileage < rental.start_mileage:
            raise ValidationError("Return mileage cannot be lower than pickup mileage.")

    def _priced(self, rental: Rental) -> Rental:
        day_count = rental_duration(rental.start_date, rental.end_date)
        unit_price = to_decimal(rental.unit_price)
        total_ht, total_ttc = compute_rental_totals(
            unit_price, day_count, self._config_provider().vat_rate
        )
        return replace(
            rental,
            unit_price=unit_price,
            day_count=day_count,
            total_ht=total_ht,
            total_ttc=total_ttc,
        )

    def create_rental(self, rental: Rental) -> Rental:
        """Record a signed contract; totals are computed, billing starts open."""
        self._validate(rental)
        priced = replace(self._priced(rental), billing_status=BillingStatus.OPEN)
        created = self._repo.create(priced)
        self._logger.info(
            "Rental created id=%s days=%s total_ttc=%s",
            created.id,
            created.day_count,
            created.total_ttc,
        )
        return created

    def update_rental(self, rental_id: str, patch: RentalPatch) -> Rental:
        """Apply a partial update; totals follow date and price changes."""
        existing = self._get(rental_id)
        changes = patch_fields(patch)
        updated = apply_patch(existing, patch)
        self._validate(updated)
        if _PRICING_FIELDS & changes.keys():
            updated = self._priced(updated)
            changes.update(
                unit_price=updated.unit_price,
                day_count=updated.day_count,
                total_ht=updated.total_ht,
                total_ttc=updated.total_ttc,
            )
        if changes:
            self._repo.update_fields(rental_id, **changes)
        return updated

    def record_return(
        self,
        rental_id: str,
        end_mileage: int,
        end_fuel_level: int,
        return_anomalies: Iterable[Anomaly] = (),
        end_date: Optional[datetime] = None,
    ) -> Rental:
        """Record the vehicle's return inspection."""
        patch = RentalPatch(
            end_mileage=end_mileage,
            end_fuel_level=end_fuel_level,
            return_anomalies=list(return_anomalies),
        )
        if end_date is not None:
            patch.end_date = end_date
        return self.update_rental(rental_id, patch)

    def delete_rental(self, rental_id: str) -> None:
        if not self._repo.delete(rental_id):
            raise NotFoundError("Rental", rental_id)

    def get_rental(self, rental_id: str) -> Optional[Rental]:
        return self._repo.get_by_id(rental_id)

    def list_rentals(self) -> list[Rental]:
        return self._repo.list_all()

    def list_open_rentals(self, client_id: str) -> list[Rental]:
        return self._repo.list_by_client_and_status(client_id, BillingStatus.OPEN)

    def list_billable_rentals(self, client_id: Optional[str] = None) -> list[Rental]:
        """Completed rentals not yet invoiced, evaluated at the current instant."""
        now = self._clock()
        if client_id:
            rentals = self._repo.list_by_client_and_status(client_id, BillingStatus.OPEN)
        else:
            rentals = self._repo.list_all()
        return [rental for rental in rentals if is_billable(rental, now)]

    def get_status(self, rental: Rental) -> RentalStatus:
        return rental_status(rental.start_date, rental.end_date, self._clock())

    def mark_billing_status(self, rental_ids: Iterable[str], status: BillingStatus) -> int:
        return self._repo.set_billing_status(rental_ids, status)
