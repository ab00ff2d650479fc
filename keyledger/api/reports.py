# keyledger/api/reports.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from keyledger.api.deps import get_today, require_cron_secret
from keyledger.core.summary import financial_summary
from keyledger.core.sweeper import sweep_overdue
from keyledger.db.engine import get_engine
from keyledger.errors import ValidationFailure
from keyledger.models.documents import SweepResponse
from keyledger.models.summary import FinancialSummaryOut

router = APIRouter(tags=["reports"])


@router.get("/financial-summary", response_model=FinancialSummaryOut)
def get_financial_summary(
    start_date: Optional[date] = Query(
        default=None, description="ISO date (YYYY-MM-DD), inclusive"
    ),
    end_date: Optional[date] = Query(
        default=None, description="ISO date (YYYY-MM-DD), inclusive"
    ),
    engine: Engine = Depends(get_engine),
) -> FinancialSummaryOut:
    """
    Tax, revenue, unpaid and parts totals over invoices in the date range.
    """
    if start_date and end_date and start_date > end_date:
        raise ValidationFailure("start_date must be on or before end_date")

    return FinancialSummaryOut(**financial_summary(engine, start_date, end_date))


@router.post(
    "/cron/update-overdue",
    response_model=SweepResponse,
    dependencies=[Depends(require_cron_secret)],
)
def update_overdue(
    engine: Engine = Depends(get_engine),
    today: date = Depends(get_today),
) -> SweepResponse:
    """
    Scheduler hook: pending invoices past their due date become overdue.
    """
    result = sweep_overdue(engine, today)
    return SweepResponse(
        updatedCount=result.updated_count, updatedInvoices=result.invoice_ids
    )
