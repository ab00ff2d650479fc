# keyledger/core/summary.py

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from keyledger.core.kinds import InvoiceStatus
from keyledger.core.totals import round_cents
from keyledger.db.schema import invoicedetail, invoices, services


def _money(value) -> Decimal:
    return round_cents(Decimal(str(value or 0)))


def financial_summary(
    engine: Engine,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Invoice totals over an optional inclusive date range.

    Unpaid means pending or overdue. `parts_total` sums invoice line totals
    whose catalog service is flagged as parts.
    """
    conditions = []
    if start_date is not None:
        conditions.append(invoices.c.date >= start_date)
    if end_date is not None:
        conditions.append(invoices.c.date <= end_date)

    unpaid = invoices.c.status.in_(
        [InvoiceStatus.PENDING.value, InvoiceStatus.OVERDUE.value]
    )

    totals_stmt = select(
        func.coalesce(func.sum(invoices.c.tax_total), 0).label("total_tax"),
        func.coalesce(func.sum(invoices.c.totalamount), 0).label("total_amount"),
        func.count().label("invoice_count"),
    ).where(*conditions)

    unpaid_stmt = select(
        func.coalesce(func.sum(invoices.c.totalamount), 0).label("unpaid_total"),
        func.count().label("unpaid_count"),
    ).where(unpaid, *conditions)

    parts_stmt = (
        select(func.coalesce(func.sum(invoicedetail.c.totalprice), 0))
        .select_from(
            invoicedetail.join(
                invoices, invoicedetail.c.invoice_id == invoices.c.invoice_id
            ).join(services, invoicedetail.c.service_id == services.c.service_id)
        )
        .where(services.c.isparts.is_(True), *conditions)
    )

    with engine.connect() as conn:
        totals = conn.execute(totals_stmt).first()
        unpaid_row = conn.execute(unpaid_stmt).first()
        parts_total = conn.execute(parts_stmt).scalar_one()

    return {
        "start_date": start_date,
        "end_date": end_date,
        "total_tax": _money(totals.total_tax),
        "total_amount": _money(totals.total_amount),
        "invoice_count": totals.invoice_count or 0,
        "unpaid_total": _money(unpaid_row.unpaid_total),
        "unpaid_count": unpaid_row.unpaid_count or 0,
        "parts_total": _money(parts_total),
    }
