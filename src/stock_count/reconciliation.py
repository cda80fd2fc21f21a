"""
Row reconciliation for the tour unload report.

Maps one stock-detail record (item + sales-rep row) and its physical count
into a ReconciledRow: the status plus the three strings every renderer
shows (system qty, counted qty, status). The interactive table and the
printable report both read these strings, so on-screen and printed text
cannot drift apart.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .schemas import ItemInfo, StockDetailBlock, StockRow
from .units import QuantityPair, UnitSpec, compact_unit_text, from_base_units, to_base_units
from .variance import CountEntry, ReconciliationStatus, StatusKind, classify

NOT_ENTERED_TEXT = "-"

# Icon / pill tokens consumed by the table renderer
STATUS_META = {
    StatusKind.NOT_COUNTED: {"icon": "bi-dash-circle", "class_name": "pill-muted"},
    StatusKind.ALL_THERE: {"icon": "bi-check-circle-fill", "class_name": "pill-success"},
    StatusKind.MISSING: {"icon": "bi-exclamation-triangle-fill", "class_name": "pill-warning"},
    StatusKind.EXTRA: {"icon": "bi-plus-circle-fill", "class_name": "pill-info"},
}


@dataclass(frozen=True)
class ReconciledRow:
    """Display-ready result of reconciling one (item, sales rep) row."""

    id: str
    item_id: str
    item_code: str
    item_name: str
    brand_id: str
    brand_code: str
    brand_name: str
    sales_rep_id: str
    sales_rep_code: str
    sales_rep_name: str
    unit: UnitSpec
    system: QuantityPair
    count: CountEntry
    status: ReconciliationStatus
    system_qty_text: str
    counted_qty_text: str
    status_text: str
    updated_at: str | None = None

    @property
    def status_key(self) -> str:
        return self.status.key

    @property
    def status_icon(self) -> str:
        return STATUS_META[self.status.kind]["icon"]

    @property
    def status_class(self) -> str:
        return STATUS_META[self.status.kind]["class_name"]

    @property
    def system_base_units(self) -> int | float:
        """System quantity normalized to base units (used for qty sorting)."""
        return to_base_units(self.system, self.unit.conversion_factor, self.unit.has_dual_units)

    @property
    def is_counted(self) -> bool:
        return self.status.kind is not StatusKind.NOT_COUNTED


def resolve_unit(item: ItemInfo, row: StockRow) -> UnitSpec:
    """
    Resolve the unit spec for a row.

    Row-level UOM labels and factor override the item defaults when present.
    """
    primary = row.uom.primary_uom or item.primary_uom or ""
    base = row.uom.base_uom or item.base_uom or None
    factor = row.factor_to_base if row.factor_to_base is not None else item.factor_to_base
    return UnitSpec(primary_unit_label=primary, base_unit_label=base, conversion_factor=1 if factor is None else factor)


def system_qty_text(system: QuantityPair, unit: UnitSpec) -> str:
    text = compact_unit_text(system.primary_qty, unit.primary_unit_label)
    if unit.has_dual_units:
        text += f" + {compact_unit_text(system.base_qty, unit.base_unit_label)}"
    return text


def counted_qty_text(count: CountEntry, unit: UnitSpec) -> str:
    """
    Counted quantity as shown back to the operator.

    Dual-unit counts are normalized and re-split, so 24 pieces typed
    against a 12-piece carton reads "2CTN" rather than echoing the input.
    """
    dual = unit.has_dual_units
    if not count.is_entered(dual):
        return NOT_ENTERED_TEXT
    if not dual:
        return compact_unit_text(count.counted_primary, unit.primary_unit_label)

    total = to_base_units(count.as_pair(), unit.conversion_factor, True)
    return from_base_units(
        total, unit.conversion_factor, unit.primary_unit_label, unit.base_unit_label, True
    )


def _as_item(item: ItemInfo | Mapping[str, Any] | None) -> ItemInfo:
    if isinstance(item, ItemInfo):
        return item
    return ItemInfo.model_validate(item or {})


def _as_row(row: StockRow | Mapping[str, Any] | None) -> StockRow:
    if isinstance(row, StockRow):
        return row
    return StockRow.model_validate(row or {})


def make_row_id(item: ItemInfo, row: StockRow) -> str:
    return f"{item.id or 'item'}-{row.id or 'row'}"


def reconcile(
    item: ItemInfo | Mapping[str, Any] | None,
    row: StockRow | Mapping[str, Any] | None,
    count: CountEntry | None = None,
) -> ReconciledRow:
    """Reconcile one raw stock record against its count (None = not entered)."""
    item = _as_item(item)
    row = _as_row(row)
    count = count or CountEntry()

    unit = resolve_unit(item, row)
    system = QuantityPair.coerce(row.qty_on_hand.primary, row.qty_on_hand.base)
    status = classify(system, count, unit)

    return ReconciledRow(
        id=make_row_id(item, row),
        item_id=item.id,
        item_code=item.code or "-",
        item_name=item.name or "-",
        brand_id=item.brand.id,
        brand_code=item.brand.code,
        brand_name=item.brand.name or "-",
        sales_rep_id=row.sales_rep.id,
        sales_rep_code=row.sales_rep.code,
        sales_rep_name=row.sales_rep.name or "-",
        unit=unit,
        system=system,
        count=count,
        status=status,
        system_qty_text=system_qty_text(system, unit),
        counted_qty_text=counted_qty_text(count, unit),
        status_text=status.label,
        updated_at=row.updated_at,
    )


def reconcile_feed(
    blocks: Iterable[StockDetailBlock | Mapping[str, Any]],
    counts: Mapping[str, CountEntry] | None = None,
) -> list[ReconciledRow]:
    """Flatten the stock-detail feed into one reconciled row per sales-rep row."""
    counts = counts or {}
    result = []
    for block in blocks or []:
        if not isinstance(block, StockDetailBlock):
            block = StockDetailBlock.model_validate(block)
        for row in block.rows:
            row_id = make_row_id(block.item, row)
            result.append(reconcile(block.item, row, counts.get(row_id)))
    return result
