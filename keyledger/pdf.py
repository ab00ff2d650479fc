# keyledger/pdf.py
"""
Render a loaded invoice or quote (see core.read_models.get_document) to PDF.

Private comments are internal and never printed.
"""

from decimal import Decimal
from io import BytesIO
from xml.sax.saxutils import escape
from typing import Any, Dict, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from keyledger.core.kinds import DocumentKind, InvoiceStatus
from keyledger.core.totals import round_cents

BANNER_COLORS = {
    InvoiceStatus.PAID.value: colors.HexColor("#28a745"),
    InvoiceStatus.OVERDUE.value: colors.HexColor("#dc3545"),
}


def _fmt_money(value) -> str:
    return f"${round_cents(value or 0):,.2f}"


def _fmt_date(value) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%b %d, %Y")


def _line_rows(document: Dict[str, Any], tax_rate: Decimal) -> List[List[str]]:
    rate_label = f"{tax_rate * 100:.2f}".rstrip("0").rstrip(".") + "%"
    rows = [["Qty", "Description", "Unit Price", "Tax", "Total"]]
    for line in document["services"]:
        extension = round_cents(line["totalprice"])
        tax = round_cents(extension * tax_rate) if line["istaxed"] else Decimal("0")
        label = line["servicename"]
        if line.get("description"):
            label = f"{label} - {line['description']}"
        rows.append([
            str(line["quantity"]),
            label,
            _fmt_money(line["unitprice"]),
            rate_label if line["istaxed"] else "0%",
            _fmt_money(extension + tax),
        ])
    return rows


def render_document_pdf(
    document: Dict[str, Any],
    kind: DocumentKind,
    tax_rate: Decimal,
    business_name: str = "KeyLedger Locksmith",
) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=LETTER,
        leftMargin=16*mm, rightMargin=16*mm, topMargin=18*mm, bottomMargin=16*mm,
        title=f"{kind.name.capitalize()} {document[kind.id_column]}",
    )
    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"<b>{escape(business_name)}</b>", styles["Title"]),
        Paragraph(
            f"{kind.name.capitalize()} #{document[kind.id_column]}", styles["Heading2"]
        ),
    ]

    status = document["status"]
    if status in BANNER_COLORS:
        banner = Table([[status.upper()]], colWidths=[60*mm])
        banner.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), BANNER_COLORS[status]),
            ("TEXTCOLOR", (0, 0), (-1, -1), colors.white),
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ]))
        elements.append(banner)

    meta = [["Date", _fmt_date(document["date"])]]
    if kind.has_due_date:
        meta.append(["Due", _fmt_date(document.get("duedate"))])
    if document.get("po_number"):
        meta.append(["PO #", document["po_number"]])
    vin = document.get("vin") or ""
    if len(vin) >= 8:
        meta.append(["VIN (last 8)", vin[-8:]])
    meta.append(["Bill to", document["customer_name"]])
    if document.get("customer_address"):
        meta.append(["", document["customer_address"]])
    elements += [Spacer(1, 8), Table(meta, hAlign="LEFT"), Spacer(1, 12)]

    items = Table(
        _line_rows(document, tax_rate),
        repeatRows=1,
        colWidths=[14*mm, 90*mm, 26*mm, 16*mm, 26*mm],
    )
    items.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#0055a4")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.3, colors.HexColor("#dee2e6")),
    ]))
    elements.append(items)

    totals = Table(
        [
            ["Subtotal", _fmt_money(document["subtotal"])],
            ["Tax", _fmt_money(document["tax_total"])],
            ["Total", _fmt_money(document["totalamount"])],
        ],
        hAlign="RIGHT",
    )
    totals.setStyle(TableStyle([
        ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
    ]))
    elements += [Spacer(1, 8), totals]

    if document.get("description"):
        elements += [
            Spacer(1, 12),
            Paragraph("<b>Notes</b>", styles["Heading4"]),
            Paragraph(escape(document["description"]).replace("\n", "<br/>"), styles["Normal"]),
        ]

    doc.build(elements)
    return buffer.getvalue()
