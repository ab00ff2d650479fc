# keyledger/core/documents.py
"""
Create, update, delete and pay invoice/quote aggregates.

An aggregate is the parent row plus its line items; every operation here
touches both inside a single transaction. Totals are always recomputed from
the reconciled lines, never taken from the client.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from keyledger.core.kinds import INVOICE, QUOTE, DocumentKind, InvoiceStatus, QuoteStatus
from keyledger.core.reconcile import MAX_QUANTITY, coerce_or_drop
from keyledger.core.totals import ReconciledLine, Totals, compute_totals
from keyledger.core.transaction import transaction
from keyledger.db.schema import customer, payment
from keyledger.errors import NotFound, ValidationFailure
from keyledger.models.documents import DocumentPayload

logger = logging.getLogger(__name__)


def _prepare(payload: DocumentPayload, tax_rate: Decimal):
    if payload.customer_id is None:
        raise ValidationFailure("Customer is required")

    reconciled = coerce_or_drop(payload.services)
    if reconciled.dropped:
        logger.debug("Dropped %s incomplete line item(s)", reconciled.dropped)
    if not reconciled.lines:
        raise ValidationFailure("At least one service is required")
    for line in reconciled.lines:
        if line.quantity > MAX_QUANTITY:
            raise ValidationFailure(
                f"Quantity for {line.servicename} exceeds {MAX_QUANTITY}",
                str(line.quantity),
            )

    return reconciled.lines, compute_totals(reconciled.lines, tax_rate)


def _require_customer(conn: Connection, customer_id: int) -> None:
    row = conn.execute(
        select(customer.c.customer_id).where(customer.c.customer_id == customer_id)
    ).first()
    if row is None:
        raise ValidationFailure(f"Customer {customer_id} does not exist")


def _require_document(conn: Connection, kind: DocumentKind, document_id: int):
    row = conn.execute(
        select(kind.id_col, kind.table.c.status).where(kind.id_col == document_id)
    ).first()
    if row is None:
        raise NotFound(f"{kind.name.capitalize()} not found")
    return row


def _parent_values(
    kind: DocumentKind, payload: DocumentPayload, totals: Totals, today: date
) -> dict:
    values = {
        "customer_id": payload.customer_id,
        "date": payload.start_date or today,
        "po_number": payload.po_number,
        "description": payload.description,
        "vin": payload.vin,
        "private_comments": payload.comments,
        "subtotal": totals.subtotal,
        "tax_total": totals.tax_total,
        "totalamount": totals.total,
    }
    if kind.has_due_date:
        values["duedate"] = payload.due_date
    return values


def insert_lines(
    conn: Connection, kind: DocumentKind, document_id: int, lines: List[dict]
) -> None:
    """Insert detail rows (service_id, quantity, unitprice, totalprice, istaxed)."""
    if not lines:
        return
    conn.execute(
        kind.detail_table.insert(),
        [{kind.id_column: document_id, **line} for line in lines],
    )


def _line_rows(lines: List[ReconciledLine]) -> List[dict]:
    return [
        {
            "service_id": line.service_id,
            "quantity": line.quantity,
            "unitprice": line.unitprice,
            "totalprice": line.totalprice,
            "istaxed": line.istaxed,
        }
        for line in lines
    ]


def create_document(
    engine: Engine,
    kind: DocumentKind,
    payload: DocumentPayload,
    *,
    today: date,
    tax_rate: Decimal,
) -> int:
    lines, totals = _prepare(payload, tax_rate)

    with transaction(engine, f"create {kind.name}") as conn:
        _require_customer(conn, payload.customer_id)

        values = _parent_values(kind, payload, totals, today)
        values["status"] = "pending"
        result = conn.execute(kind.table.insert().values(**values))
        document_id = result.inserted_primary_key[0]

        insert_lines(conn, kind, document_id, _line_rows(lines))

    logger.info(
        "Created %s %s for customer %s (%s line(s), total %s)",
        kind.name, document_id, payload.customer_id, len(lines), totals.total,
    )
    return document_id


def update_document(
    engine: Engine,
    kind: DocumentKind,
    document_id: int,
    payload: DocumentPayload,
    *,
    today: date,
    tax_rate: Decimal,
) -> int:
    """
    Overwrite the parent row and replace every line item.

    Status is not touched. Lines are deleted and reinserted wholesale rather
    than diffed.
    """
    lines, totals = _prepare(payload, tax_rate)

    with transaction(engine, f"update {kind.name}") as conn:
        _require_document(conn, kind, document_id)
        _require_customer(conn, payload.customer_id)

        conn.execute(
            kind.table.update()
            .where(kind.id_col == document_id)
            .values(**_parent_values(kind, payload, totals, today))
        )
        conn.execute(
            kind.detail_table.delete().where(kind.detail_fk_col == document_id)
        )
        insert_lines(conn, kind, document_id, _line_rows(lines))

    logger.info("Updated %s %s (total %s)", kind.name, document_id, totals.total)
    return document_id


def delete_document(engine: Engine, kind: DocumentKind, document_id: int) -> None:
    with transaction(engine, f"delete {kind.name}") as conn:
        _require_document(conn, kind, document_id)

        conn.execute(
            kind.detail_table.delete().where(kind.detail_fk_col == document_id)
        )
        if kind is INVOICE:
            conn.execute(payment.delete().where(payment.c.invoice_id == document_id))
        conn.execute(kind.table.delete().where(kind.id_col == document_id))

    logger.info("Deleted %s %s", kind.name, document_id)


def mark_paid(
    engine: Engine, invoice_id: int, payment_method: str, *, now: datetime
) -> int:
    """Flip an invoice to paid and record the payment. Returns the payment id."""
    method = (payment_method or "").strip()
    if not method:
        raise ValidationFailure("Payment method is required")

    with transaction(engine, "process payment") as conn:
        _require_document(conn, INVOICE, invoice_id)

        conn.execute(
            INVOICE.table.update()
            .where(INVOICE.id_col == invoice_id)
            .values(status=InvoiceStatus.PAID.value)
        )
        result = conn.execute(
            payment.insert().values(
                invoice_id=invoice_id, paymentdate=now, paymentmethod=method
            )
        )
        payment_id = result.inserted_primary_key[0]

    logger.info("Invoice %s marked paid with %s", invoice_id, method)
    return payment_id


def reject_quote(engine: Engine, quote_id: int) -> None:
    with transaction(engine, "reject quote") as conn:
        row = _require_document(conn, QUOTE, quote_id)
        if row.status != QuoteStatus.PENDING.value:
            raise ValidationFailure(f"Quote is already {row.status}")

        conn.execute(
            QUOTE.table.update()
            .where(QUOTE.id_col == quote_id)
            .values(status=QuoteStatus.REJECTED.value)
        )

    logger.info("Quote %s rejected", quote_id)
