# keyledger/core/reconcile.py

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from keyledger.core.totals import ReconciledLine, round_cents
from keyledger.models.documents import LineItemIn


@dataclass
class ReconcileResult:
    lines: List[ReconciledLine] = field(default_factory=list)
    dropped: int = 0


MAX_QUANTITY = 99_999


def coerce_quantity(raw) -> int:
    """Anything unparseable counts as 1; zero and negatives are floored to 1."""
    try:
        # int() truncates toward zero: "2.7" is 2, not 3
        quantity = int(Decimal(str(raw)))
    except (InvalidOperation, ValueError, TypeError, OverflowError):
        return 1
    return max(1, quantity)


def coerce_unitprice(raw) -> Decimal:
    try:
        price = Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0.00")
    if not price.is_finite():
        return Decimal("0.00")
    return round_cents(price)


def coerce_or_drop(entries: Iterable[LineItemIn]) -> ReconcileResult:
    """
    Turn submitted line entries into lines that can be persisted.

    Entries without a service name or service reference are dropped without
    an error; callers wanting per-line feedback must validate beforehand.
    Quantity and unit price are coerced rather than rejected.
    """
    result = ReconcileResult()
    for entry in entries:
        name = (entry.servicename or "").strip()
        if not name or not entry.service_id:
            result.dropped += 1
            continue

        result.lines.append(
            ReconciledLine(
                service_id=entry.service_id,
                servicename=name,
                quantity=coerce_quantity(entry.quantity),
                unitprice=coerce_unitprice(entry.unitprice),
                istaxed=bool(entry.istaxed),
            )
        )
    return result
