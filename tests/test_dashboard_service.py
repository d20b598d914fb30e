from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from conftest import NOW
from fleet_rental.domain.models import Brand, Rental, Vehicle, VehicleModel
from fleet_rental.services.dashboard_service import DashboardFilter


def _rental(services, client_id, vehicle_id, start, days, price="100") -> Rental:
    return services.rental_service.create_rental(
        Rental(
            id=None,
            client_id=client_id,
            vehicle_id=vehicle_id,
            start_date=start,
            end_date=start + timedelta(days=days),
            unit_price=Decimal(price),
        )
    )


def test_ten_day_window_has_eleven_daily_buckets(services):
    chart = services.dashboard_service.get_revenue_chart(
        DashboardFilter(start=datetime(2025, 6, 1), end=datetime(2025, 6, 11))
    )

    assert len(chart.labels) == 11
    assert chart.labels[0] == "01/06"
    assert chart.labels[-1] == "11/06"


def test_ninety_day_window_is_monthly(services):
    chart = services.dashboard_service.get_revenue_chart(
        DashboardFilter(start=datetime(2025, 3, 1), end=datetime(2025, 5, 30))
    )

    assert chart.labels == ["03/2025", "04/2025", "05/2025"]


def test_default_window_covers_six_months(services):
    chart = services.dashboard_service.get_revenue_chart(DashboardFilter())

    assert chart.labels == [
        "01/2025",
        "02/2025",
        "03/2025",
        "04/2025",
        "05/2025",
        "06/2025",
    ]


def test_revenue_chart_sums_invoices_per_bucket(services, completed_rental, client):
    invoice = services.invoice_service.invoice_rentals(client.id, [completed_rental.id])

    chart = services.dashboard_service.get_revenue_chart(
        DashboardFilter(start=NOW - timedelta(days=2), end=NOW)
    )

    revenue, counts = chart.datasets
    assert revenue.data[-1] == invoice.total_ttc
    assert counts.data == [0, 0, 1]


def test_stats(services, client, vehicle, completed_rental, clock):
    spare = services.fleet_service.add_vehicle(
        Vehicle(id=None, model_id=vehicle.model_id, registration="201 TU 1000")
    )
    services.fleet_service.add_vehicle(
        Vehicle(id=None, model_id=vehicle.model_id, registration="202 TU 1000", active=False)
    )
    _rental(services, client.id, spare.id, NOW - timedelta(days=1), 2, price="60")

    invoice = services.invoice_service.invoice_rentals(
        client.id, [completed_rental.id], invoice_date=NOW
    )
    services.invoice_service.validate_invoice(invoice.id)
    services.invoice_service.apply_settlement(invoice.id, Decimal("200"))

    stats = services.dashboard_service.get_stats(DashboardFilter())

    assert stats.total_revenue == Decimal("358")
    assert stats.unpaid_amount == Decimal("158")
    assert stats.cash_in == Decimal("200")
    assert stats.pending_revenue == 0
    assert stats.active_rentals == 1
    assert stats.total_vehicles == 3
    assert stats.available_vehicles == 1
    assert stats.maintenance_vehicles == 1
    assert stats.occupancy_rate == 33
    assert stats.avg_daily_rate == 80
    assert stats.avg_rental_duration == 3


def test_pending_revenue_counts_completed_open_rentals(services, completed_rental):
    stats = services.dashboard_service.get_stats(DashboardFilter())

    assert stats.pending_revenue == Decimal("357")


def test_stats_on_empty_store(services):
    stats = services.dashboard_service.get_stats(DashboardFilter())

    assert stats.total_vehicles == 0
    assert stats.occupancy_rate == 0
    assert stats.avg_daily_rate == 0


def test_brand_filter(services, client, vehicle, completed_rental):
    other_brand = services.fleet_service.add_brand(Brand(id=None, name="Fiat"))
    other_model = services.fleet_service.add_model(
        VehicleModel(id=None, name="Tipo", brand_id=other_brand.id)
    )
    other_vehicle = services.fleet_service.add_vehicle(
        Vehicle(id=None, model_id=other_model.id, registration="300 TU 1")
    )
    _rental(services, client.id, other_vehicle.id, NOW - timedelta(days=9), 2)

    chart = services.dashboard_service.get_billing_status_chart(
        DashboardFilter(brand_id=other_brand.id)
    )

    assert chart.datasets[0].data == [0, 1]


def test_top_performers_ties_and_unknown(services, client, vehicle):
    twin = services.fleet_service.add_vehicle(
        Vehicle(id=None, model_id=vehicle.model_id, registration="201 TU 1000")
    )
    start = NOW - timedelta(days=10)
    _rental(services, client.id, vehicle.id, start, 2)
    _rental(services, client.id, twin.id, start, 2)
    _rental(services, "ghost-client", "ghost-vehicle", start, 1, price="500")

    top = services.dashboard_service.get_top_performers(DashboardFilter())

    assert top.vehicles[0].name == "Unknown"
    assert top.vehicles[0].revenue == Decimal("595")
    tied = top.vehicles[1:]
    assert [p.id for p in tied] == sorted([vehicle.id, twin.id])
    assert tied[0].name.startswith("Renault Clio (")
    assert [c.name for c in top.clients] == ["Unknown", "Trabelsi Amina"]
    assert top.clients[1].count == 2


def test_vehicle_status_chart(services, vehicle, completed_rental):
    chart = services.dashboard_service.get_vehicle_status_chart()

    assert chart.labels == ["Available", "Rented", "Maintenance"]
    assert chart.datasets[0].data == [1, 0, 0]
