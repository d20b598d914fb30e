"""Fleet catalogue service: brands, models and vehicles."""

from __future__ import annotations

from typing import Optional

from fleet_rental.config import UNKNOWN_LABEL
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import (
    Brand,
    BrandPatch,
    ModelPatch,
    Vehicle,
    VehicleModel,
    VehiclePatch,
)
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.fleet_repo import BrandRepo, ModelRepo, VehicleRepo
from fleet_rental.services.errors import NotFoundError, ValidationError


def _brand_model_name(model: Optional[VehicleModel], brand: Optional[Brand]) -> str:
    parts = [brand.name if brand else "", model.name if model else ""]
    return " ".join(part for part in parts if part)


def vehicle_label(
    vehicle: Optional[Vehicle],
    models: dict[str, VehicleModel],
    brands: dict[str, Brand],
) -> str:
    """Human readable ``"Brand Model (REG)"``; ``Unknown`` when unresolved."""
    if vehicle is None:
        return UNKNOWN_LABEL
    model = models.get(vehicle.model_id)
    brand = brands.get(model.brand_id) if model else None
    name = _brand_model_name(model, brand)
    return f"{name or UNKNOWN_LABEL} ({vehicle.registration})"


class FleetService:
    """Service for the vehicle catalogue."""

    def __init__(self, store: DocumentStore) -> None:
        self._brands = BrandRepo(store)
        self._models = ModelRepo(store)
        self._vehicles = VehicleRepo(store)
        self._logger = get_logger(self.__class__.__name__)

    def list_brands(self) -> list[Brand]:
        return self._brands.list_all()

    def add_brand(self, brand: Brand) -> Brand:
        if not brand.name.strip():
            raise ValidationError("Brand name is required.")
        return self._brands.create(brand)

    def update_brand(self, brand_id: str, patch: BrandPatch) -> None:
        if not self._brands.apply(brand_id, patch):
            raise NotFoundError("Brand", brand_id)

    def delete_brand(self, brand_id: str) -> None:
        if not self._brands.delete(brand_id):
            raise NotFoundError("Brand", brand_id)

    def list_models(self, brand_id: Optional[str] = None) -> list[VehicleModel]:
        if brand_id:
            return self._models.list_by_brand(brand_id)
        return self._models.list_all()

    def add_model(self, model: VehicleModel) -> VehicleModel:
        if not model.name.strip():
            raise ValidationError("Model name is required.")
        return self._models.create(model)

    def update_model(self, model_id: str, patch: ModelPatch) -> None:
        if not self._models.apply(model_id, patch):
            raise NotFoundError("Model", model_id)

    def delete_model(self, model_id: str) -> None:
        if not self._models.delete(model_id):
            raise NotFoundError("Model", model_id)

    def list_vehicles(self) -> list[Vehicle]:
        return self._vehicles.list_all()

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return self._vehicles.get_by_id(vehicle_id)

    def add_vehicle(self, vehicle: Vehicle) -> Vehicle:
        if not vehicle.registration.strip():
            raise ValidationError("Vehicle registration is required.")
        if vehicle.unit_price < 0:
            raise ValidationError("Vehicle daily price must not be negative.")
        return self._vehicles.create(vehicle)

    def update_vehicle(self, vehicle_id: str, patch: VehiclePatch) -> None:
        if not self._vehicles.apply(vehicle_id, patch):
            raise NotFoundError("Vehicle", vehicle_id)

    def delete_vehicle(self, vehicle_id: str) -> None:
        if not self._vehicles.delete(vehicle_id):
            raise NotFoundError("Vehicle", vehicle_id)

    def catalogue(self) -> tuple[dict[str, VehicleModel], dict[str, Brand]]:
        """Models and brands keyed by id, for label resolution."""
        models = {model.id: model for model in self._models.list_all() if model.id}
        brands = {brand.id: brand for brand in self._brands.list_all() if brand.id}
        return models, brands

    def describe_vehicle(self, vehicle_id: str) -> tuple[str, str]:
        """Return ``(registration, "Brand Model")`` for invoice snapshots."""
        vehicle = self._vehicles.get_by_id(vehicle_id)
        if vehicle is None:
            self._logger.warning("Vehicle id=%s not found for description", vehicle_id)
            return UNKNOWN_LABEL, UNKNOWN_LABEL
        model = self._models.get_by_id(vehicle.model_id)
        brand = self._brands.get_by_id(model.brand_id) if model else None
        name = _brand_model_name(model, brand)
        return vehicle.registration, name or UNKNOWN_LABEL
