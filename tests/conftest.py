from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from fleet_rental.app import AppServices, build_services
from fleet_rental.db.connection import get_connection
from fleet_rental.db.document_store import SqliteDocumentStore
from fleet_rental.db.migrations import apply_migrations
from fleet_rental.domain.models import Brand, Client, Rental, Vehicle, VehicleModel

NOW = datetime(2025, 6, 15, 10, 0, 0)


class FixedClock:
    """Callable clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def connection(tmp_path):
    conn = get_connection(tmp_path / "test.db")
    apply_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(connection) -> SqliteDocumentStore:
    return SqliteDocumentStore(connection)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def services(connection, clock) -> AppServices:
    app_services = build_services(connection, clock)
    app_services.parameter_service.seed_defaults()
    return app_services


@pytest.fixture
def vehicle(services) -> Vehicle:
    brand = services.fleet_service.add_brand(Brand(id=None, name="Renault"))
    model = services.fleet_service.add_model(
        VehicleModel(id=None, name="Clio", brand_id=brand.id)
    )
    return services.fleet_service.add_vehicle(
        Vehicle(id=None, model_id=model.id, registration="200 TU 1000")
    )


@pytest.fixture
def client(services) -> Client:
    return services.client_service.add_client(
        Client(id=None, last_name="Trabelsi", first_name="Amina", national_id="01234567")
    )


@pytest.fixture
def completed_rental(services, client, vehicle) -> Rental:
    """Three day rental at 100 per day that ended two days before ``NOW``."""
    start = NOW - timedelta(days=5)
    return services.rental_service.create_rental(
        Rental(
            id=None,
            client_id=client.id,
            vehicle_id=vehicle.id,
            start_date=start,
            end_date=start + timedelta(days=3),
            unit_price=Decimal("100"),
        )
    )
