"""Dashboard aggregation: KPIs, chart series and rankings.

Every method reads whole collections and aggregates in memory; nothing is
written. Revenue sums stay exact ``Decimal`` values while percentages and
averages are rounded half-up to integers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from dateutil.relativedelta import relativedelta

from fleet_rental.config import UNKNOWN_LABEL
from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.billing import round_half_up
from fleet_rental.domain.models import (
    BillingStatus,
    InvoiceHeader,
    InvoiceStatus,
    Rental,
    RentalStatus,
    Vehicle,
)
from fleet_rental.domain.rental_rules import ONE_DAY, Clock, rental_status, system_clock
from fleet_rental.logging_config import get_logger
from fleet_rental.repositories.client_repo import ClientRepo
from fleet_rental.repositories.fleet_repo import BrandRepo, ModelRepo, VehicleRepo
from fleet_rental.repositories.invoice_repo import InvoiceRepo
from fleet_rental.repositories.rental_repo import RentalRepo
from fleet_rental.services.client_service import client_display_name
from fleet_rental.services.fleet_service import vehicle_label

DAILY_BUCKET_LIMIT = 32
DEFAULT_WINDOW_MONTHS = 5
TOP_LIMIT = 5


@dataclass(frozen=True)
class DashboardFilter:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    vehicle_id: Optional[str] = None
    client_id: Optional[str] = None
    brand_id: Optional[str] = None


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: Decimal
    pending_revenue: Decimal
    unpaid_amount: Decimal
    cash_in: Decimal
    active_rentals: int
    occupancy_rate: int
    avg_daily_rate: int
    avg_rental_duration: int
    total_vehicles: int
    available_vehicles: int
    maintenance_vehicles: int


@dataclass(frozen=True)
class ChartDataset:
    label: str
    data: list
    kind: str = "bar"
    colors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChartData:
    labels: list[str]
    datasets: list[ChartDataset] = field(default_factory=list)


@dataclass(frozen=True)
class TopPerformer:
    id: str
    name: str
    revenue: Decimal
    count: int

    @property
    def secondary_text(self) -> str:
        return f"{self.count} rentals"


@dataclass(frozen=True)
class TopPerformers:
    vehicles: list[TopPerformer]
    clients: list[TopPerformer]


def _in_window(value: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, Decimal("0"))


def _average(values: list) -> int:
    if not values:
        return 0
    return round_half_up(Decimal(sum(values)) / len(values))


def _rank(
    rentals: Iterable[Rental],
    key: Callable[[Rental], Optional[str]],
    name_for: Callable[[str], str],
) -> list[TopPerformer]:
    totals: dict[str, tuple[Decimal, int]] = {}
    for rental in rentals:
        ref = key(rental)
        if not ref:
            continue
        revenue, count = totals.get(ref, (Decimal("0"), 0))
        totals[ref] = (revenue + rental.total_ttc, count + 1)
    ranked = sorted(totals.items(), key=lambda item: (-item[1][0], item[0]))
    return [
        TopPerformer(id=ref, name=name_for(ref), revenue=revenue, count=count)
        for ref, (revenue, count) in ranked[:TOP_LIMIT]
    ]


class DashboardService:
    """Read-only aggregations over rentals, invoices and the fleet."""

    def __init__(self, store: DocumentStore, clock: Clock = system_clock) -> None:
        self._rentals = RentalRepo(store)
        self._invoices = InvoiceRepo(store)
        self._vehicles = VehicleRepo(store)
        self._models = ModelRepo(store)
        self._brands = BrandRepo(store)
        self._clients = ClientRepo(store)
        self._clock = clock
        self._logger = get_logger(self.__class__.__name__)

    def _filter_rentals(
        self, rentals: Iterable[Rental], dashboard_filter: DashboardFilter
    ) -> list[Rental]:
        brand_vehicle_ids: Optional[set[str]] = None
        if dashboard_filter.brand_id:
            model_ids = {
                model.id
                for model in self._models.list_by_brand(dashboard_filter.brand_id)
            }
            brand_vehicle_ids = {
                vehicle.id
                for vehicle in self._vehicles.list_all()
                if vehicle.model_id in model_ids
            }
        selected = []
        for rental in rentals:
            if not _in_window(rental.start_date, dashboard_filter.start, dashboard_filter.end):
                continue
            if dashboard_filter.vehicle_id and rental.vehicle_id != dashboard_filter.vehicle_id:
                continue
            if dashboard_filter.client_id and rental.client_id != dashboard_filter.client_id:
                continue
            if brand_vehicle_ids is not None and rental.vehicle_id not in brand_vehicle_ids:
                continue
            selected.append(rental)
        return selected

    @staticmethod
    def _filter_invoices(
        invoices: Iterable[InvoiceHeader], dashboard_filter: DashboardFilter
    ) -> list[InvoiceHeader]:
        return [
            invoice
            for invoice in invoices
            if _in_window(invoice.invoice_date, dashboard_filter.start, dashboard_filter.end)
            and (
                not dashboard_filter.client_id
                or invoice.client_id == dashboard_filter.client_id
            )
        ]

    def _fleet_counts(
        self, vehicles: list[Vehicle], rentals: Iterable[Rental], now: datetime
    ) -> tuple[int, int, int]:
        """Return ``(available, rented, maintenance)`` vehicle counts."""
        rented_ids = {
            rental.vehicle_id
            for rental in rentals
            if rental_status(rental.start_date, rental.end_date, now) == RentalStatus.ACTIVE
        }
        available = sum(1 for v in vehicles if v.active and v.id not in rented_ids)
        rented = sum(1 for v in vehicles if v.id in rented_ids)
        maintenance = sum(1 for v in vehicles if not v.active)
        return available, rented, maintenance

    def get_stats(self, dashboard_filter: DashboardFilter) -> DashboardStats:
        now = self._clock()
        rentals = self._rentals.list_all()
        invoices = self._filter_invoices(self._invoices.list_all(), dashboard_filter)
        vehicles = self._vehicles.list_all()
        filtered = self._filter_rentals(rentals, dashboard_filter)

        total_revenue = _sum(
            invoice.total_ttc
            for invoice in invoices
            if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.VALIDATED)
        )
        unpaid_amount = _sum(
            invoice.remaining_amount
            for invoice in invoices
            if invoice.status == InvoiceStatus.VALIDATED
        )
        cash_in = _sum(invoice.paid_amount for invoice in invoices)
        pending_revenue = _sum(
            rental.total_ttc
            for rental in filtered
            if rental_status(rental.start_date, rental.end_date, now) == RentalStatus.COMPLETED
            and rental.billing_status == BillingStatus.OPEN
        )
        active_rentals = sum(
            1
            for rental in rentals
            if rental_status(rental.start_date, rental.end_date, now) == RentalStatus.ACTIVE
        )

        total_vehicles = len(vehicles)
        available, _, maintenance = self._fleet_counts(vehicles, rentals, now)
        occupancy = 0
        if total_vehicles:
            occupancy = round_half_up(
                Decimal(total_vehicles - available - maintenance) * 100 / total_vehicles
            )
        return DashboardStats(
            total_revenue=total_revenue,
            pending_revenue=pending_revenue,
            unpaid_amount=unpaid_amount,
            cash_in=cash_in,
            active_rentals=active_rentals,
            occupancy_rate=occupancy,
            avg_daily_rate=_average([rental.unit_price for rental in filtered]),
            avg_rental_duration=_average([rental.day_count for rental in filtered]),
            total_vehicles=total_vehicles,
            available_vehicles=available,
            maintenance_vehicles=maintenance,
        )

    def get_revenue_chart(self, dashboard_filter: DashboardFilter) -> ChartData:
        """Invoice revenue and count per day, or per month for long windows."""
        end = dashboard_filter.end or self._clock()
        start = dashboard_filter.start or end - relativedelta(months=DEFAULT_WINDOW_MONTHS)
        span = math.ceil(abs(end - start) / ONE_DAY)
        invoices = [
            invoice
            for invoice in self._invoices.list_all()
            if not dashboard_filter.client_id
            or invoice.client_id == dashboard_filter.client_id
        ]

        labels: list[str] = []
        revenue: list[Decimal] = []
        counts: list[int] = []
        if span < DAILY_BUCKET_LIMIT:
            day = start.date()
            while day <= end.date():
                bucket = [inv for inv in invoices if inv.invoice_date.date() == day]
                labels.append(day.strftime("%d/%m"))
                revenue.append(_sum(inv.total_ttc for inv in bucket))
                counts.append(len(bucket))
                day += ONE_DAY
        else:
            month = date(start.year, start.month, 1)
            last = date(end.year, end.month, 1)
            while month <= last:
                bucket = [
                    inv
                    for inv in invoices
                    if (inv.invoice_date.year, inv.invoice_date.month)
                    == (month.year, month.month)
                ]
                labels.append(month.strftime("%m/%Y"))
                revenue.append(_sum(inv.total_ttc for inv in bucket))
                counts.append(len(bucket))
                month += relativedelta(months=1)
        self._logger.debug("Revenue chart with %s buckets", len(labels))
        return ChartData(
            labels=labels,
            datasets=[
                ChartDataset(label="Revenue", data=revenue, kind="line", colors=("#3b82f6",)),
                ChartDataset(label="Invoices", data=counts, kind="bar", colors=("#94a3b8",)),
            ],
        )

    def get_vehicle_status_chart(self) -> ChartData:
        available, rented, maintenance = self._fleet_counts(
            self._vehicles.list_all(), self._rentals.list_all(), self._clock()
        )
        return ChartData(
            labels=["Available", "Rented", "Maintenance"],
            datasets=[
                ChartDataset(
                    label="Fleet status",
                    data=[available, rented, maintenance],
                    kind="doughnut",
                    colors=("#10b981", "#3b82f6", "#f59e0b"),
                )
            ],
        )

    def get_billing_status_chart(self, dashboard_filter: DashboardFilter) -> ChartData:
        filtered = self._filter_rentals(self._rentals.list_all(), dashboard_filter)
        invoiced = sum(1 for r in filtered if r.billing_status == BillingStatus.INVOICED)
        open_count = sum(1 for r in filtered if r.billing_status == BillingStatus.OPEN)
        return ChartData(
            labels=["Invoiced", "Not invoiced"],
            datasets=[
                ChartDataset(
                    label="Billing status",
                    data=[invoiced, open_count],
                    kind="doughnut",
                    colors=("#10b981", "#ef4444"),
                )
            ],
        )

    def get_top_performers(self, dashboard_filter: DashboardFilter) -> TopPerformers:
        """Five best vehicles and clients by rental revenue; ties go to the lower id."""
        filtered = self._filter_rentals(self._rentals.list_all(), dashboard_filter)
        vehicles = {vehicle.id: vehicle for vehicle in self._vehicles.list_all()}
        models = {model.id: model for model in self._models.list_all()}
        brands = {brand.id: brand for brand in self._brands.list_all()}
        clients = {client.id: client for client in self._clients.list_all()}

        def vehicle_name(vehicle_id: str) -> str:
            vehicle = vehicles.get(vehicle_id)
            return vehicle_label(vehicle, models, brands) if vehicle else UNKNOWN_LABEL

        return TopPerformers(
            vehicles=_rank(filtered, lambda rental: rental.vehicle_id, vehicle_name),
            clients=_rank(
                filtered,
                lambda rental: rental.client_id,
                lambda client_id: client_display_name(clients.get(client_id)),
            ),
        )
