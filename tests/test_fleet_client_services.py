from __future__ import annotations

import pytest

from fleet_rental.domain.models import (
    Client,
    ClientPatch,
    ClientType,
    Driver,
    User,
    UserRole,
    VehiclePatch,
)
from fleet_rental.services.client_service import client_display_name
from fleet_rental.services.errors import NotFoundError, ValidationError


def test_describe_vehicle(services, vehicle):
    assert services.fleet_service.describe_vehicle(vehicle.id) == ("200 TU 1000", "Renault Clio")
    assert services.fleet_service.describe_vehicle("missing") == ("Unknown", "Unknown")


def test_models_by_brand(services, vehicle):
    [brand] = services.fleet_service.list_brands()
    assert [m.name for m in services.fleet_service.list_models(brand.id)] == ["Clio"]
    assert services.fleet_service.list_models("other") == []


def test_update_vehicle(services, vehicle):
    services.fleet_service.update_vehicle(vehicle.id, VehiclePatch(active=False))

    stored = services.fleet_service.get_vehicle(vehicle.id)
    assert stored.active is False
    assert stored.registration == "200 TU 1000"
    with pytest.raises(NotFoundError):
        services.fleet_service.update_vehicle("missing", VehiclePatch(active=True))


def test_client_rules(services, client):
    driver = Driver(last_name="A", first_name="B")
    with pytest.raises(ValidationError):
        services.client_service.update_client(
            client.id, ClientPatch(drivers=[driver, driver, driver])
        )
    with pytest.raises(ValidationError):
        services.client_service.add_client(
            Client(id=None, last_name="", first_name="", client_type=ClientType.COMPANY)
        )

    services.client_service.update_client(client.id, ClientPatch(drivers=[driver]))
    assert services.client_service.get_client(client.id).drivers == [driver]


def test_client_display_name():
    company = Client(
        id="c", last_name="", first_name="", client_type=ClientType.COMPANY, company_name="STB"
    )
    assert client_display_name(company) == "STB"
    assert client_display_name(None) == "Unknown"


def test_admin_lookup(services):
    admin = services.user_service.add_user(
        User(id=None, email="admin@example.com", role=UserRole.ADMIN)
    )

    assert services.user_service.is_admin(admin.id)
    assert services.user_service.is_admin(None, "admin@example.com")
    assert not services.user_service.is_admin("nobody")
