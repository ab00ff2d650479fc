# keyledger/core/totals.py

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


def round_cents(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ReconciledLine:
    service_id: int
    servicename: str
    quantity: int
    unitprice: Decimal
    istaxed: bool

    @property
    def totalprice(self) -> Decimal:
        return round_cents(self.unitprice * self.quantity)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal


def line_tax(line: ReconciledLine, tax_rate: Decimal) -> Decimal:
    if not line.istaxed:
        return Decimal("0.00")
    return round_cents(line.totalprice * tax_rate)


def compute_totals(lines: Iterable[ReconciledLine], tax_rate: Decimal) -> Totals:
    """
    Sum line extensions and line taxes, each rounded to cents before summing.

    (2 x 10.00, untaxed) + (1 x 19.99, taxed at 8.75%) gives
    subtotal 39.99, tax 1.75, total 41.74.
    """
    subtotal = Decimal("0.00")
    tax_total = Decimal("0.00")
    for line in lines:
        subtotal += line.totalprice
        tax_total += line_tax(line, tax_rate)

    subtotal = round_cents(subtotal)
    tax_total = round_cents(tax_total)
    return Totals(
        subtotal=subtotal,
        tax_total=tax_total,
        total=round_cents(subtotal + tax_total),
    )
