"""
Report-level aggregation over reconciled rows.

Provides:
- Summary counts by status (the badge strip)
- Filtering and sorting for the report table
- Filter dropdown options (brands, sales reps)
- A pandas view of the rows for table rendering
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import asdict, dataclass
from typing import Literal

import numpy as np
import pandas as pd

from .reconciliation import ReconciledRow
from .schemas import SalesRepRef
from .variance import StatusKind

SortKey = Literal["item", "brand", "sales_rep", "qty", "status"]
SortDirection = Literal["asc", "desc"]
RowPredicate = Callable[[ReconciledRow], bool]

ALL = "All"
OPTION_SEPARATOR = " — "


@dataclass(frozen=True)
class ReportSummary:
    """Row counts by reconciliation status."""

    all_there: int = 0
    missing: int = 0
    extra: int = 0
    not_counted: int = 0
    total: int = 0

    def summary(self) -> dict:
        return asdict(self)


def summarize(rows: Iterable[ReconciledRow]) -> ReportSummary:
    """
    Count rows by status in one pass.

    total is the number of rows passed in, so any upstream filtering
    (e.g. counted rows only) must happen before calling this.
    """
    counts = {kind: 0 for kind in StatusKind}
    total = 0
    for row in rows:
        counts[row.status.kind] += 1
        total += 1

    return ReportSummary(
        all_there=counts[StatusKind.ALL_THERE],
        missing=counts[StatusKind.MISSING],
        extra=counts[StatusKind.EXTRA],
        not_counted=counts[StatusKind.NOT_COUNTED],
        total=total,
    )


def status_breakdown(summary: ReportSummary) -> list[tuple[str, int]]:
    """Badge strip entries in display order."""
    return [
        ("Total", summary.total),
        ("Not Counted", summary.not_counted),
        ("All There", summary.all_there),
        ("Missing", summary.missing),
        ("Extra", summary.extra),
    ]


def _sort_value(row: ReconciledRow, sort_key: str):
    if sort_key == "brand":
        return f"{row.brand_name} {row.brand_code}".lower()
    if sort_key == "sales_rep":
        return f"{row.sales_rep_name} {row.sales_rep_code}".lower()
    if sort_key == "qty":
        return row.system_base_units
    if sort_key == "status":
        return row.status.rank
    return f"{row.item_name} {row.item_code}".lower()


def filter_and_sort(
    rows: Iterable[ReconciledRow],
    predicate: RowPredicate | None = None,
    sort_key: SortKey | str = "item",
    direction: SortDirection | str = "asc",
) -> list[ReconciledRow]:
    """
    Filter then sort rows without touching the input.

    Unknown sort keys sort by item. Ties keep their input order in both
    directions.
    """
    data = [row for row in rows if predicate is None or predicate(row)]
    return sorted(data, key=lambda row: _sort_value(row, sort_key), reverse=direction != "asc")


def counted_only(row: ReconciledRow) -> bool:
    """Predicate for the printable view: drop rows nobody counted."""
    return row.is_counted


def make_row_filter(
    search: str = "",
    sales_rep_id: str | None = ALL,
    brand_id: str | None = ALL,
) -> RowPredicate:
    """Build the report filter-bar predicate (search box + dropdowns)."""
    needle = (search or "").strip().lower()

    def predicate(row: ReconciledRow) -> bool:
        if needle:
            haystack = (
                row.item_name,
                row.item_code,
                row.brand_name,
                row.sales_rep_name,
                row.sales_rep_code,
            )
            if not any(needle in (value or "").lower() for value in haystack):
                return False
        if sales_rep_id and sales_rep_id != ALL and row.sales_rep_id != sales_rep_id:
            return False
        if brand_id and brand_id != ALL and row.brand_id != brand_id:
            return False
        return True

    return predicate


def _option_label(code: str, name: str) -> str:
    separator = OPTION_SEPARATOR if code and name else ""
    return f"{code or ''}{separator}{name or ''}"


def sales_rep_options(
    rows: Sequence[ReconciledRow],
    sales_reps: Iterable[SalesRepRef] = (),
) -> list[tuple[str, str]]:
    """
    Sales-rep dropdown options as (value, label).

    Prefers the master list (limited to reps present in the rows); falls
    back to the reps seen on the rows themselves.
    """
    rep_ids_in_rows = {row.sales_rep_id for row in rows if row.sales_rep_id}

    from_master = [
        (rep.id, _option_label(rep.code, rep.name))
        for rep in sales_reps
        if rep.id in rep_ids_in_rows
    ]
    if from_master:
        return from_master

    options: dict[str, str] = {}
    for row in rows:
        if not row.sales_rep_id or row.sales_rep_id in options:
            continue
        # "-" is the display placeholder, not a real name
        name = "" if row.sales_rep_name == "-" else row.sales_rep_name
        options[row.sales_rep_id] = _option_label(row.sales_rep_code, name)
    return list(options.items())


def brand_options(rows: Sequence[ReconciledRow]) -> list[tuple[str, str]]:
    """Brand dropdown options as (value, label), sorted by label."""
    options: dict[str, str] = {}
    for row in rows:
        if not row.brand_id or row.brand_id in options:
            continue
        name = "" if row.brand_name == "-" else row.brand_name
        options[row.brand_id] = _option_label(row.brand_code, name)
    return sorted(options.items(), key=lambda option: option[1].lower())


def option_display_name(options: Sequence[tuple[str, str]], value: str | None) -> str:
    """Name shown on the printout for a selected filter ("" for All)."""
    if not value or value == ALL:
        return ""
    for option_value, label in options:
        if option_value == value:
            parts = label.split(OPTION_SEPARATOR)
            return parts[1] if len(parts) > 1 and parts[1] else label
    return ""


ROW_COLUMNS = [
    "id",
    "item_code",
    "item_name",
    "brand_name",
    "sales_rep_code",
    "sales_rep_name",
    "system_qty_text",
    "counted_primary",
    "counted_base",
    "counted_qty_text",
    "status_key",
    "status_text",
    "system_base_units",
    "signed_variance",
    "has_dual_units",
]


def rows_to_frame(rows: Sequence[ReconciledRow]) -> pd.DataFrame:
    """
    Tabular view of reconciled rows for the dashboard table.

    signed_variance is counted minus system in base units, NaN for rows
    that have not been counted.
    """
    if len(rows) == 0:
        return pd.DataFrame(columns=ROW_COLUMNS)

    df = pd.DataFrame(
        [
            {
                "id": row.id,
                "item_code": row.item_code,
                "item_name": row.item_name,
                "brand_name": row.brand_name,
                "sales_rep_code": row.sales_rep_code,
                "sales_rep_name": row.sales_rep_name,
                "system_qty_text": row.system_qty_text,
                "counted_primary": row.count.counted_primary,
                "counted_base": row.count.counted_base,
                "counted_qty_text": row.counted_qty_text,
                "status_key": row.status_key,
                "status_text": row.status_text,
                "system_base_units": row.system_base_units,
                "variance": row.status.signed_variance,
                "has_dual_units": row.unit.has_dual_units,
            }
            for row in rows
        ]
    )

    df["signed_variance"] = np.where(
        df["status_key"] == StatusKind.NOT_COUNTED.value,
        np.nan,
        df["variance"],
    )
    return df[ROW_COLUMNS]
