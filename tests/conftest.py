"""Shared fixtures for stock count tests."""

from __future__ import annotations

import pytest

from stock_count.reconciliation import reconcile
from stock_count.variance import CountEntry


def make_item(
    *,
    item_id: str = "item-1",
    name: str = "Cream Crackers",
    code: str = "CC-01",
    primary_uom: str = "CTN",
    base_uom: str | None = "PC",
    factor: object = 12,
    brand: dict | None = None,
) -> dict:
    """Build a raw item block as the inventory feed sends it."""
    return {
        "_id": item_id,
        "name": name,
        "itemCode": code,
        "brand": brand or {"_id": "brand-1", "name": "Maliban", "brandCode": "MB"},
        "primaryUom": primary_uom,
        "baseUom": base_uom,
        "factorToBase": factor,
    }


def make_row(
    *,
    row_id: str = "row-1",
    primary: object = 0,
    base: object = 0,
    rep_id: str = "rep-1",
    rep_name: str = "Nimal",
    rep_code: str = "SR01",
    **extra: object,
) -> dict:
    """Build a raw sales-rep stock row."""
    row = {
        "_id": row_id,
        "salesRep": {"_id": rep_id, "name": rep_name, "repCode": rep_code},
        "qtyOnHand": {"qtyOnHandPrimary": primary, "qtyOnHandBase": base},
    }
    row.update(extra)
    return row


def count(primary: str = "", base: str = "") -> CountEntry:
    """Build a count the way keystrokes would (auto-fill applied)."""
    entry = CountEntry()
    if primary:
        entry = entry.with_input("counted_primary", primary)
    if base:
        entry = entry.with_input("counted_base", base)
    return entry


@pytest.fixture
def carton_item() -> dict:
    """Dual-unit item: 1 CTN = 12 PC."""
    return make_item()


@pytest.fixture
def kg_item() -> dict:
    """Single-unit item measured in KG."""
    return make_item(item_id="item-kg", name="Sugar", code="SG-01", primary_uom="KG", base_uom=None, factor=1)


@pytest.fixture
def reconcile_with():
    """Reconcile a raw item/row pair with a typed count."""

    def _reconcile(item: dict, row: dict, primary: str = "", base: str = ""):
        return reconcile(item, row, count(primary, base))

    return _reconcile
