# Stock count reconciliation engine for the tour unload report
# Pure functions shared by the interactive table and the printable export

from .units import (
    QuantityPair,
    UnitSpec,
    compact_unit_text,
    from_base_units,
    pluralized_unit_text,
    to_base_units,
    to_number,
)
from .variance import CountEntry, ReconciliationStatus, StatusKind, classify
from .reconciliation import ReconciledRow, reconcile, reconcile_feed
from .analysis import (
    ReportSummary,
    brand_options,
    counted_only,
    filter_and_sort,
    make_row_filter,
    rows_to_frame,
    sales_rep_options,
    summarize,
)
from .printing import PrintReport, build_print_report
from .session import CountSession

__all__ = [
    "QuantityPair",
    "UnitSpec",
    "compact_unit_text",
    "from_base_units",
    "pluralized_unit_text",
    "to_base_units",
    "to_number",
    "CountEntry",
    "ReconciliationStatus",
    "StatusKind",
    "classify",
    "ReconciledRow",
    "reconcile",
    "reconcile_feed",
    "ReportSummary",
    "brand_options",
    "counted_only",
    "filter_and_sort",
    "make_row_filter",
    "rows_to_frame",
    "sales_rep_options",
    "summarize",
    "PrintReport",
    "build_print_report",
    "CountSession",
]
