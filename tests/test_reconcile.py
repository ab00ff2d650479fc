# tests/test_reconcile.py

from decimal import Decimal

import pytest

from keyledger.core.reconcile import (
    MAX_QUANTITY,
    coerce_or_drop,
    coerce_quantity,
    coerce_unitprice,
)
from keyledger.models.documents import LineItemIn


def _entry(**fields):
    base = {"service_id": 5, "servicename": "Lock change", "unitprice": "50", "quantity": 1}
    base.update(fields)
    return LineItemIn.model_validate(base)


def test_valid_entries_are_kept_in_order():
    result = coerce_or_drop([_entry(service_id=5), _entry(service_id=6, servicename="Service call")])

    assert [line.service_id for line in result.lines] == [5, 6]
    assert result.dropped == 0


@pytest.mark.parametrize(
    "fields",
    [
        {"servicename": ""},
        {"servicename": "   "},
        {"servicename": None},
        {"service_id": None},
        {"service_id": 0},
    ],
)
def test_incomplete_entries_are_dropped_silently(fields):
    result = coerce_or_drop([_entry(**fields), _entry(service_id=7)])

    assert [line.service_id for line in result.lines] == [7]
    assert result.dropped == 1


@pytest.mark.parametrize("raw", [0, -3, "0", None, "", "abc", "nan"])
def test_quantity_floor_is_one(raw):
    assert coerce_quantity(raw) == 1


@pytest.mark.parametrize("raw, expected", [(2, 2), ("4", 4), ("2.7", 2), (10, 10)])
def test_quantity_is_kept_when_positive(raw, expected):
    assert coerce_quantity(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "free", "Infinity", [1]])
def test_unitprice_defaults_to_zero(raw):
    assert coerce_unitprice(raw) == Decimal("0.00")


def test_unitprice_is_quantized_to_cents():
    assert coerce_unitprice("19.999") == Decimal("20.00")
    assert coerce_unitprice(12) == Decimal("12.00")


def test_tax_flag_accepts_camel_case_alias():
    entry = LineItemIn.model_validate(
        {"service_id": 5, "servicename": "Lock change", "isTaxed": True}
    )

    result = coerce_or_drop([entry])

    assert result.lines[0].istaxed is True
    assert result.lines[0].quantity == 1
    assert result.lines[0].unitprice == Decimal("0.00")


def test_fractional_quantity_is_truncated_not_rounded():
    assert coerce_quantity("2.5") == 2
    assert coerce_quantity("0.9") == 1


def test_large_quantity_is_not_capped_by_coercion():
    assert coerce_quantity(10**20) == 10**20
    assert coerce_quantity(MAX_QUANTITY) == MAX_QUANTITY
