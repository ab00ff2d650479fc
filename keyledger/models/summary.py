# keyledger/models/summary.py

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class FinancialSummaryOut(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_tax: Decimal
    total_amount: Decimal
    invoice_count: int
    unpaid_total: Decimal
    unpaid_count: int
    parts_total: Decimal
