# keyledger/core/sweeper.py

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List

from sqlalchemy import and_, select

from keyledger.core.kinds import InvoiceStatus
from keyledger.core.transaction import transaction
from keyledger.db.schema import invoices

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    updated_count: int = 0
    invoice_ids: List[int] = field(default_factory=list)


def sweep_overdue(engine, today: date) -> SweepResult:
    """
    Mark pending invoices whose due date is before `today` as overdue.

    Calendar dates only. Running it again on unchanged data updates nothing.
    """
    is_late = and_(
        invoices.c.duedate < today,
        invoices.c.status == InvoiceStatus.PENDING.value,
    )

    with transaction(engine, "update overdue invoices") as conn:
        ids = conn.execute(
            select(invoices.c.invoice_id).where(is_late).order_by(invoices.c.invoice_id)
        ).scalars().all()

        if ids:
            conn.execute(
                invoices.update()
                .where(and_(invoices.c.invoice_id.in_(ids), is_late))
                .values(status=InvoiceStatus.OVERDUE.value)
            )

    logger.info("Updated %s invoices to overdue status", len(ids))
    return SweepResult(updated_count=len(ids), invoice_ids=list(ids))
