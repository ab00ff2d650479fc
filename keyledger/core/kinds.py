# keyledger/core/kinds.py

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from sqlalchemy import Table

from keyledger.db.schema import invoicedetail, invoices, quotedetail, quotes


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DocumentKind:
    """
    Everything that differs between an invoice and a quote.

    Both share the same parent/line-item shape; only the tables, the id
    column names, the status vocabulary and the due date differ.
    """

    name: str
    table: Table
    detail_table: Table
    id_column: str
    detail_id_column: str
    statuses: FrozenSet[str]
    has_due_date: bool

    @property
    def id_col(self):
        return self.table.c[self.id_column]

    @property
    def detail_fk_col(self):
        return self.detail_table.c[self.id_column]

    @property
    def detail_id_col(self):
        return self.detail_table.c[self.detail_id_column]


INVOICE = DocumentKind(
    name="invoice",
    table=invoices,
    detail_table=invoicedetail,
    id_column="invoice_id",
    detail_id_column="invoicedetail_id",
    statuses=frozenset(s.value for s in InvoiceStatus),
    has_due_date=True,
)

QUOTE = DocumentKind(
    name="quote",
    table=quotes,
    detail_table=quotedetail,
    id_column="quote_id",
    detail_id_column="quotedetail_id",
    statuses=frozenset(s.value for s in QuoteStatus),
    has_due_date=False,
)
