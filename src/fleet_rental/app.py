"""Application entry point and service wiring."""

from __future__ import annotations

import argparse
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from fleet_rental.config import AppConfig
from fleet_rental.db.connection import get_connection
from fleet_rental.db.document_store import SqliteDocumentStore
from fleet_rental.db.migrations import apply_migrations
from fleet_rental.domain.rental_rules import Clock, system_clock
from fleet_rental.logging_config import configure_logging, get_logger
from fleet_rental.paths import get_db_path, get_pdfs_dir
from fleet_rental.services.client_service import ClientService
from fleet_rental.services.dashboard_service import DashboardFilter, DashboardService
from fleet_rental.services.errors import NotFoundError, ServiceError
from fleet_rental.services.expense_service import ExpenseService
from fleet_rental.services.fleet_service import FleetService
from fleet_rental.services.invoice_service import InvoiceService
from fleet_rental.services.parameter_service import ConfigCache, ParameterService
from fleet_rental.services.payment_service import PaymentService
from fleet_rental.services.rental_service import RentalService
from fleet_rental.services.user_service import UserService
from fleet_rental.utils.formatting import format_currency, format_date
from fleet_rental.utils.pdf_generator import generate_invoice_pdf


@dataclass(frozen=True)
class AppServices:
    """Shared services for dependency injection."""

    connection: sqlite3.Connection
    store: SqliteDocumentStore
    config_cache: ConfigCache
    parameter_service: ParameterService
    fleet_service: FleetService
    client_service: ClientService
    user_service: UserService
    rental_service: RentalService
    invoice_service: InvoiceService
    payment_service: PaymentService
    expense_service: ExpenseService
    dashboard_service: DashboardService


def build_services(
    connection: sqlite3.Connection, clock: Clock = system_clock
) -> AppServices:
    """Wire every service on one connection, sharing one configuration cache."""
    store = SqliteDocumentStore(connection)
    parameter_service = ParameterService(store)
    config_cache = ConfigCache(parameter_service.load_general_config)
    return AppServices(
        connection=connection,
        store=store,
        config_cache=config_cache,
        parameter_service=parameter_service,
        fleet_service=FleetService(store),
        client_service=ClientService(store),
        user_service=UserService(store),
        rental_service=RentalService(store, config_cache.get, clock),
        invoice_service=InvoiceService(store, config_cache.get, clock),
        payment_service=PaymentService(store, clock),
        expense_service=ExpenseService(store, clock),
        dashboard_service=DashboardService(store, clock),
    )


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="FleetRental back-office tools")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database file (defaults to the user data directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="Create the schema and seed default parameters.")
    subparsers.add_parser("dashboard", help="Print the dashboard indicators.")
    due_dates = subparsers.add_parser("due-dates", help="List upcoming and overdue instruments.")
    due_dates.add_argument("--days", type=int, default=30, help="Look-ahead window in days.")
    invoice_pdf = subparsers.add_parser("invoice-pdf", help="Render an invoice to PDF.")
    invoice_pdf.add_argument("invoice_id", help="Invoice document id.")
    invoice_pdf.add_argument("--output", type=Path, default=None, help="Output PDF path.")
    return parser.parse_args(argv)


def _print_dashboard(services: AppServices) -> None:
    config = services.config_cache.get()
    stats = services.dashboard_service.get_stats(DashboardFilter())
    rows = [
        ("Total revenue", format_currency(stats.total_revenue, config)),
        ("Pending revenue", format_currency(stats.pending_revenue, config)),
        ("Unpaid amount", format_currency(stats.unpaid_amount, config)),
        ("Cash in", format_currency(stats.cash_in, config)),
        ("Active rentals", str(stats.active_rentals)),
        ("Occupancy rate", f"{stats.occupancy_rate} %"),
        ("Average daily rate", format_currency(stats.avg_daily_rate, config)),
        ("Average duration", f"{stats.avg_rental_duration} days"),
        (
            "Vehicles",
            f"{stats.total_vehicles} total, {stats.available_vehicles} available, "
            f"{stats.maintenance_vehicles} in maintenance",
        ),
    ]
    for label, value in rows:
        print(f"{label:<20} {value}")


def _print_due_dates(services: AppServices, days: int) -> None:
    config = services.config_cache.get()
    sections = [
        ("Overdue", services.payment_service.list_overdue_due_dates()),
        (f"Due within {days} days", services.payment_service.list_upcoming_due_dates(days)),
    ]
    for title, lines in sections:
        print(f"{title} ({len(lines)})")
        for line in lines:
            print(
                f"  {format_date(line.due_date)}  {line.method.value:<16} "
                f"{format_currency(line.amount, config):>18}  {line.reference}"
            )


def _render_invoice(services: AppServices, invoice_id: str, output: Optional[Path]) -> Path:
    invoice = services.invoice_service.get_invoice(invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice", invoice_id)
    lines = services.invoice_service.get_invoice_lines(invoice_id)
    output_path = output or get_pdfs_dir() / f"facture_{invoice.invoice_number}.pdf"
    return generate_invoice_pdf(
        invoice, lines, output_path, config=services.config_cache.get()
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a FleetRental command."""
    args = _parse_args(argv)
    configure_logging()
    logger = get_logger(__name__)
    logger.info("Starting %s command=%s", AppConfig().app_name, args.command)

    connection = get_connection(args.db or get_db_path())
    try:
        apply_migrations(connection)
        services = build_services(connection)
        if args.command == "init":
            seeded = services.parameter_service.seed_defaults()
            print(f"Database ready, {seeded} parameters seeded.")
        elif args.command == "dashboard":
            _print_dashboard(services)
        elif args.command == "due-dates":
            _print_due_dates(services, args.days)
        elif args.command == "invoice-pdf":
            path = _render_invoice(services, args.invoice_id, args.output)
            print(f"PDF written to {path}")
    except ServiceError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}")
        return 1
    finally:
        connection.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
