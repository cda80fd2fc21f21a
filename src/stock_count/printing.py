"""
Printable / downloadable version of the tour unload report.

Reads the same ReconciledRow strings as the interactive table; nothing is
re-derived here, so a row prints exactly as it shows on screen.
"""

import html
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from .analysis import ALL, ReportSummary, counted_only, summarize
from .reconciliation import ReconciledRow

logger = logging.getLogger(__name__)

REPORT_TITLE = "Tour Unload Report"
PRINT_COLUMNS = ["Item", "Item Code", "System Qty", "Unload Count", "Status"]

DEFAULT_COMPANY = {"name": "Company", "address": "", "phone": ""}


def format_date(value: datetime) -> str:
    """en-GB date, e.g. 19/10/2026."""
    return value.strftime("%d/%m/%Y")


def format_date_time(value: datetime) -> str:
    """en-GB date and time, e.g. 19/10/2026, 14:05:09."""
    return value.strftime("%d/%m/%Y, %H:%M:%S")


@dataclass
class PrintReport:
    """Everything the printout shows, ready to render."""

    rows: list[ReconciledRow]
    summary: ReportSummary
    generated_at: datetime
    generated_by: str = "System User"
    brand_filter_label: str = ""
    sales_rep_filter_label: str = ""
    company: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMPANY))
    include_only_counted: bool = True

    @property
    def document_title(self) -> str:
        return f"Tour_Unload_Report_{self.generated_at.strftime('%Y-%m-%d')}"

    @property
    def filters(self) -> list[tuple[str, str]]:
        """Applied filters as (label, value); empty when none apply."""
        applied = []
        if self.brand_filter_label and self.brand_filter_label != ALL:
            applied.append(("Brand", self.brand_filter_label))
        if self.sales_rep_filter_label and self.sales_rep_filter_label != ALL:
            applied.append(("Sales Rep", self.sales_rep_filter_label))
        return applied

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "Item": row.item_name or "-",
                    "Item Code": row.item_code or "-",
                    "System Qty": row.system_qty_text,
                    "Unload Count": row.counted_qty_text,
                    "Status": row.status_text,
                }
                for row in self.rows
            ],
            columns=PRINT_COLUMNS,
        )

    def to_csv(self) -> str:
        return self.to_frame().to_csv(index=False)

    def render_html(self, printed_at: datetime | None = None) -> str:
        """Render a self-contained A4 HTML document."""
        printed_at = printed_at or datetime.now()
        esc = html.escape

        if self.include_only_counted:
            table_heading = "Counted Items (Filtered Results Only)"
            scope_note = "Only counted rows from current filtered view are included"
            empty_text = "No counted rows"
        else:
            table_heading = "Items (Filtered Results Only)"
            scope_note = "All rows from current filtered view are included"
            empty_text = "No rows"

        company_lines = [f"<h1>{esc(self.company.get('name') or 'Company')}</h1>"]
        for key in ("address", "phone"):
            if self.company.get(key):
                company_lines.append(f"<p>{esc(self.company[key])}</p>")

        if self.filters:
            filter_html = "".join(
                f'<div class="field"><div class="field-label">{esc(label)}</div>'
                f'<div class="field-value">{esc(value)}</div></div>'
                for label, value in self.filters
            )
        else:
            filter_html = (
                '<div class="field"><div class="field-label">Filters</div>'
                '<div class="field-value">None</div></div>'
            )

        summary_html = "".join(
            f'<div class="summary-row"><span>{label}</span><span>{count}</span></div>'
            for label, count in (
                ("All There", self.summary.all_there),
                ("Missing", self.summary.missing),
                ("Extra", self.summary.extra),
                ("Not Counted", self.summary.not_counted),
            )
        )

        if self.rows:
            table_html = self.to_frame().to_html(index=False, escape=True, border=0)
        else:
            table_html = (
                "<table><thead><tr>"
                + "".join(f"<th>{column}</th>" for column in PRINT_COLUMNS)
                + f'</tr></thead><tbody><tr><td colspan="{len(PRINT_COLUMNS)}">{empty_text}</td></tr>'
                + "</tbody></table>"
            )

        return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{esc(self.document_title)}</title>
<style>
@page {{ size: A4; margin: 10mm; }}
body {{ font-family: Arial, Helvetica, sans-serif; font-size: 12px; color: #111827; }}
table {{ width: 100%; border-collapse: collapse; }}
th, td {{ border: 1px solid #e5e7eb; padding: 4px 6px; text-align: left; }}
.summary-row {{ display: flex; justify-content: space-between; }}
</style>
</head>
<body>
<div class="header">
<div class="company">{"".join(company_lines)}</div>
<div class="doc-box">
<div class="doc-title">{REPORT_TITLE}</div>
<div><strong>Date:</strong> {format_date(self.generated_at)}</div>
<div><strong>Generated At:</strong> {format_date_time(self.generated_at)}</div>
<div><strong>Generated By:</strong> {esc(self.generated_by or "-")}</div>
</div>
</div>
<h2>Report Filters</h2>
{filter_html}
<h2>Unload Summary</h2>
<div class="summary-box">{summary_html}</div>
<h2>{table_heading}</h2>
{table_html}
<div class="footer">
<span>Generated from {REPORT_TITLE}</span>
<span>{scope_note}</span>
<span>Printed on {format_date_time(printed_at)}</span>
</div>
</body>
</html>
"""


def build_print_report(
    rows: Iterable[ReconciledRow],
    *,
    brand_filter_label: str = "",
    sales_rep_filter_label: str = "",
    generated_by: str = "System User",
    generated_at: datetime | None = None,
    company: Mapping[str, str] | None = None,
    include_only_counted: bool = True,
) -> PrintReport:
    """
    Prepare the printout from the current (already filtered) rows.

    With include_only_counted, NOT_COUNTED rows are dropped before the
    summary is taken, so the printed totals describe the printed rows.
    """
    printable = [row for row in rows if not include_only_counted or counted_only(row)]
    logger.info("Prepared tour unload printout with %d rows", len(printable))

    return PrintReport(
        rows=printable,
        summary=summarize(printable),
        generated_at=generated_at or datetime.now(),
        generated_by=generated_by,
        brand_filter_label=brand_filter_label,
        sales_rep_filter_label=sales_rep_filter_label,
        company={**DEFAULT_COMPANY, **(company or {})},
        include_only_counted=include_only_counted,
    )
