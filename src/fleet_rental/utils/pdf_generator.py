"""PDF generation for invoices."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from fleet_rental.config import PDF_ISSUER, GeneralConfig, PdfIssuerInfo
from fleet_rental.domain.models import InvoiceHeader, InvoiceLine, InvoiceStatus
from fleet_rental.utils.formatting import (
    format_currency,
    format_date,
    format_percent,
)


def _status_label(status: InvoiceStatus) -> str:
    return {
        InvoiceStatus.DRAFT: "Brouillon",
        InvoiceStatus.VALIDATED: "Validée",
        InvoiceStatus.PAID: "Payée",
        InvoiceStatus.CANCELLED: "Annulée",
    }.get(status, "Brouillon")


def _build_line_rows(lines: Iterable[InvoiceLine], config: GeneralConfig) -> list[list[str]]:
    rows = [["Désignation", "Période", "Jours", "P.U. HT", "Remise", "Total HT"]]
    for line in lines:
        description = line.vehicle_label or line.description
        if line.vehicle_registration:
            description = f"{description} ({line.vehicle_registration})"
        rows.append(
            [
                description,
                line.period,
                str(line.quantity),
                format_currency(line.unit_price, config),
                format_percent(line.discount_percent),
                format_currency(line.total_ht, config),
            ]
        )
    return rows


def _build_total_rows(invoice: InvoiceHeader, config: GeneralConfig) -> list[list[str]]:
    return [
        ["Sous-total HT", format_currency(invoice.subtotal_ht, config)],
        ["Remise", format_currency(invoice.discount_amount, config)],
        ["Total HT net", format_currency(invoice.taxable_amount, config)],
        [
            f"TVA ({format_percent(invoice.vat_rate)})",
            format_currency(invoice.vat_amount, config),
        ],
        ["Timbre fiscal", format_currency(invoice.stamp_duty, config)],
        ["Total TTC", format_currency(invoice.total_ttc, config)],
        ["Payé", format_currency(invoice.paid_amount, config)],
        ["Reste à payer", format_currency(invoice.remaining_amount, config)],
    ]


def generate_invoice_pdf(
    invoice: InvoiceHeader,
    lines: Iterable[InvoiceLine],
    output_path: Path,
    *,
    config: Optional[GeneralConfig] = None,
    issuer: PdfIssuerInfo = PDF_ISSUER,
) -> Path:
    """Generate the PDF document for an invoice."""
    config = config or GeneralConfig()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    title = f"FACTURE N° {invoice.invoice_number}"
    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        rightMargin=15 * mm,
        leftMargin=15 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
        title=title,
        author=issuer.name,
    )

    styles = getSampleStyleSheet()
    styles.add(
        ParagraphStyle(
            name="SectionTitle",
            parent=styles["Heading3"],
            spaceBefore=12,
            spaceAfter=6,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SmallText",
            parent=styles["Normal"],
            fontSize=9,
            leading=12,
        )
    )

    elements: list[object] = []
    elements.append(Paragraph(f"<b>{title}</b>", styles["Title"]))
    elements.append(
        Paragraph(
            f"Date: {format_date(invoice.invoice_date)} - "
            f"Statut: {_status_label(invoice.status)}",
            styles["Heading2"],
        )
    )
    elements.append(Spacer(1, 8))

    issuer_lines = [
        f"<b>{issuer.name}</b>",
        f"Tél: {issuer.phone}",
        f"MF: {issuer.tax_id}",
        f"Adresse: {issuer.address}",
    ]
    elements.append(Paragraph("<br/>".join(issuer_lines), styles["Normal"]))
    elements.append(Spacer(1, 10))

    client_lines = [
        "<b>Client</b>",
        f"Nom: {invoice.client_name or '-'}",
        f"Identifiant: {invoice.client_tax_id or '-'}",
    ]
    elements.append(Paragraph("<br/>".join(client_lines), styles["Normal"]))
    elements.append(Spacer(1, 10))

    lines_table = Table(
        _build_line_rows(lines, config),
        colWidths=[52 * mm, 40 * mm, 12 * mm, 26 * mm, 16 * mm, 30 * mm],
        repeatRows=1,
    )
    lines_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
            ]
        )
    )
    elements.append(Paragraph("Détail", styles["SectionTitle"]))
    elements.append(lines_table)
    elements.append(Spacer(1, 12))

    totals_table = Table(
        _build_total_rows(invoice, config),
        colWidths=[45 * mm, 40 * mm],
        hAlign="RIGHT",
    )
    totals_table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("BACKGROUND", (0, 5), (-1, 5), colors.whitesmoke),
                ("FONTNAME", (0, 5), (-1, 5), "Helvetica-Bold"),
            ]
        )
    )
    elements.append(totals_table)

    footer = f"{issuer.name} - généré le {datetime.now().strftime('%d/%m/%Y %H:%M')}"
    elements.append(Spacer(1, 18))
    elements.append(Paragraph(footer, styles["SmallText"]))

    doc.build(elements)
    return output_path
