"""Tests for reconciling feed rows into display-ready report rows."""

from __future__ import annotations

from conftest import count, make_item, make_row

from stock_count.reconciliation import NOT_ENTERED_TEXT, reconcile, reconcile_feed
from stock_count.schemas import StockDetailBlock
from stock_count.variance import StatusKind


def test_single_unit_exact_count(kg_item, reconcile_with) -> None:
    """10 KG on hand, 10 KG unloaded."""
    row = reconcile_with(kg_item, make_row(primary=10), "10")
    assert row.status.kind is StatusKind.ALL_THERE
    assert row.system_qty_text == "10KG"
    assert row.counted_qty_text == "10KG"
    assert row.status_text == "All There"


def test_dual_unit_short_count(carton_item, reconcile_with) -> None:
    row = reconcile_with(carton_item, make_row(primary=2, base=0), "1", "6")
    assert row.status.kind is StatusKind.MISSING
    assert row.status.variance == 6
    assert row.status_text == "Missing (6PC)"
    assert row.system_qty_text == "2CTN + 0PC"
    assert row.counted_qty_text == "1CTN + 6PC"


def test_dual_unit_over_count(carton_item, reconcile_with) -> None:
    row = reconcile_with(carton_item, make_row(primary=2, base=0), "2", "6")
    assert row.status_text == "Extra (6PC)"
    assert row.status.signed_variance == 6


def test_base_only_count_is_auto_filled_and_resplit(carton_item, reconcile_with) -> None:
    """24 pieces typed against 2 cartons: primary auto-fills to 0 and the text re-splits."""
    row = reconcile_with(carton_item, make_row(primary=2, base=0), "", "24")
    assert row.count.counted_primary == "0"
    assert row.status.kind is StatusKind.ALL_THERE
    assert row.counted_qty_text == "2CTN"


def test_factor_one_item_is_single_unit(reconcile_with) -> None:
    item = make_item(primary_uom="PC", base_uom="BOX", factor=1)
    row = reconcile_with(item, make_row(primary=5, base=9), "5")
    assert not row.unit.has_dual_units
    assert row.system_qty_text == "5PC"
    assert row.status.kind is StatusKind.ALL_THERE


def test_not_entered_count(carton_item) -> None:
    row = reconcile(carton_item, make_row(primary=1))
    assert row.status.kind is StatusKind.NOT_COUNTED
    assert row.counted_qty_text == NOT_ENTERED_TEXT
    assert row.status_text == "Not Counted"
    assert not row.is_counted


def test_status_meta(carton_item, reconcile_with) -> None:
    row = reconcile_with(carton_item, make_row(primary=2), "1")
    assert row.status_key == "missing"
    assert row.status_icon == "bi-exclamation-triangle-fill"
    assert row.status_class == "pill-warning"


def test_row_uom_overrides_item(carton_item, reconcile_with) -> None:
    raw_row = make_row(primary=1, base=0, uom={"primaryUom": "BOX", "baseUom": "EA"}, factorToBase=6)
    row = reconcile_with(carton_item, raw_row, "0", "4")
    assert row.unit.primary_unit_label == "BOX"
    assert row.unit.base_unit_label == "EA"
    assert row.unit.conversion_factor == 6
    assert row.status_text == "Missing (2EA)"


def test_unparsable_row_factor_does_not_fall_back_to_item(carton_item) -> None:
    """A present-but-bad row factor coerces to 0 and clamps to 1."""
    row = reconcile(carton_item, make_row(primary=3, factorToBase="abc"))
    assert row.unit.conversion_factor == 1
    assert not row.unit.has_dual_units
    assert row.system_qty_text == "3CTN"


def test_missing_factor_falls_back_to_one(reconcile_with) -> None:
    item = make_item(factor=None)
    row = reconcile_with(item, make_row(primary=2), "2")
    assert row.unit.conversion_factor == 1
    assert row.status.kind is StatusKind.ALL_THERE


def test_malformed_quantities_coerce_to_zero(carton_item) -> None:
    row = reconcile(carton_item, make_row(primary="n/a", base=None))
    assert row.system.primary_qty == 0
    assert row.system.base_qty == 0
    assert row.system_qty_text == "0CTN + 0PC"


def test_display_fallbacks_for_missing_names() -> None:
    row = reconcile({"_id": "i9"}, {"_id": "r9"})
    assert row.item_name == "-"
    assert row.item_code == "-"
    assert row.brand_name == "-"
    assert row.sales_rep_name == "-"
    assert row.brand_code == ""
    assert row.system_qty_text == "0"


def test_row_id_placeholders() -> None:
    assert reconcile({"_id": "i1"}, {"_id": "r1"}).id == "i1-r1"
    assert reconcile({}, {}).id == "item-row"


def test_none_inputs_are_tolerated() -> None:
    row = reconcile(None, None)
    assert row.status.kind is StatusKind.NOT_COUNTED


def test_reconcile_feed_flattens_blocks_and_applies_counts(carton_item, kg_item) -> None:
    blocks = [
        {"item": carton_item, "rows": [make_row(row_id="r1", primary=2), make_row(row_id="r2", primary=1)]},
        StockDetailBlock.model_validate({"item": kg_item, "rows": [make_row(row_id="r3", primary=10)]}),
    ]
    counts = {"item-1-r1": count("2"), "item-kg-r3": count("9")}

    rows = reconcile_feed(blocks, counts)

    assert [row.id for row in rows] == ["item-1-r1", "item-1-r2", "item-kg-r3"]
    assert [row.status_text for row in rows] == ["All There", "Not Counted", "Missing (1KG)"]


def test_reconcile_feed_handles_empty_input() -> None:
    assert reconcile_feed([]) == []
    assert reconcile_feed([{"item": {"_id": "x"}, "rows": "oops"}]) == []


def test_huge_factor_is_treated_as_one() -> None:
    row = reconcile({"factorToBase": 10**400, "baseUom": "PC"}, {})
    assert row.unit.conversion_factor == 1
    assert not row.unit.has_dual_units
