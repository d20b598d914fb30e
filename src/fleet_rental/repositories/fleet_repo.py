"""Repositories for brands, models and vehicles."""

from __future__ import annotations

from fleet_rental.db.document_store import DocumentStore, where
from fleet_rental.domain.models import Brand, Vehicle, VehicleModel
from fleet_rental.repositories.base import CollectionRepository
from fleet_rental.repositories.mappers import (
    brand_from_document,
    model_from_document,
    vehicle_from_document,
)


class BrandRepo(CollectionRepository[Brand]):
    collection = "brands"
    default_order = "name"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, brand_from_document)


class ModelRepo(CollectionRepository[VehicleModel]):
    collection = "models"
    default_order = "name"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, model_from_document)

    def list_by_brand(self, brand_id: str) -> list[VehicleModel]:
        return self.find(where("brand_id", "==", brand_id))


class VehicleRepo(CollectionRepository[Vehicle]):
    collection = "vehicles"
    default_order = "registration"

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store, vehicle_from_document)
