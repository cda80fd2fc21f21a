"""
Tour Unload Report

A Streamlit page for comparing system stock held by each sales rep with
the quantities physically unloaded at the end of a tour.
Run with: streamlit run app.py
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
import plotly.graph_objects as go

from feeds.stock_feed import StockFeedLoader
from stock_count.analysis import (
    ALL,
    brand_options,
    filter_and_sort,
    make_row_filter,
    option_display_name,
    rows_to_frame,
    sales_rep_options,
    status_breakdown,
    summarize,
)
from stock_count.logging_setup import setup_logging
from stock_count.printing import build_print_report
from stock_count.reconciliation import reconcile_feed
from stock_count.session import CountSession
from stock_count.settings import get_settings

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger("tour_unload_app")

# Page config
st.set_page_config(
    page_title="Tour Unload Report",
    page_icon="🚚",
    layout="wide",
)

st.title("🚚 Tour Unload Report")
st.caption("Compare system stock with physically unloaded quantities by item and sales rep.")

SORT_LABELS = {
    "item": "Item",
    "brand": "Brand",
    "sales_rep": "Sales Rep",
    "qty": "Qty On Hand",
    "status": "Status",
}

STATUS_COLORS = {
    "Not Counted": "#98a2b3",
    "All There": "#2ecc71",
    "Missing": "#f39c12",
    "Extra": "#3498db",
}


@st.cache_data
def load_feed():
    """Load the stock feed (cached; counts are re-applied on every rerun)."""
    return StockFeedLoader.from_settings(settings).load_all()


def reset_filters():
    st.session_state["search"] = ""
    st.session_state["brand_filter"] = ALL
    st.session_state["sales_rep_filter"] = ALL
    st.session_state["sort_key"] = "item"
    st.session_state["sort_direction"] = "asc"


def clear_counts():
    st.session_state["count_session"].clear()
    st.session_state["editor_version"] += 1
    st.toast("All entered unload counts cleared")


# Session state
if "count_session" not in st.session_state:
    st.session_state["count_session"] = CountSession()
    st.session_state["editor_version"] = 0
    reset_filters()

session: CountSession = st.session_state["count_session"]

with st.spinner("Loading tour unload report data..."):
    try:
        feed = load_feed()
    except (OSError, ValueError):
        logger.exception("Failed to load tour unload report data")
        st.error("Failed to load tour unload report data")
        st.stop()

all_rows = reconcile_feed(feed.stock_details, session.counts)
brands = brand_options(all_rows)
reps = sales_rep_options(all_rows, feed.sales_reps)

# --- Filter Bar ---
filter_cols = st.columns([3, 2, 2, 2, 1, 1])
with filter_cols[0]:
    st.text_input("Search", placeholder="Search item / brand / sales rep...", key="search")
with filter_cols[1]:
    st.selectbox(
        "Brand",
        [ALL] + [value for value, _ in brands],
        format_func=lambda v: "All Brands" if v == ALL else dict(brands).get(v, v),
        key="brand_filter",
    )
with filter_cols[2]:
    st.selectbox(
        "Sales Rep",
        [ALL] + [value for value, _ in reps],
        format_func=lambda v: "All Sales Reps" if v == ALL else dict(reps).get(v, v),
        key="sales_rep_filter",
    )
with filter_cols[3]:
    st.selectbox("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get, key="sort_key")
    st.radio("Direction", ["asc", "desc"], horizontal=True, key="sort_direction", label_visibility="collapsed")
with filter_cols[4]:
    st.button("Reset", on_click=reset_filters, use_container_width=True)
with filter_cols[5]:
    st.button("Clear Unload Counts", on_click=clear_counts, use_container_width=True)

predicate = make_row_filter(
    st.session_state["search"],
    sales_rep_id=st.session_state["sales_rep_filter"],
    brand_id=st.session_state["brand_filter"],
)
filtered_rows = filter_and_sort(
    all_rows,
    predicate,
    sort_key=st.session_state["sort_key"],
    direction=st.session_state["sort_direction"],
)
summary = summarize(filtered_rows)

# --- Summary Row ---
breakdown = status_breakdown(summary)
metric_cols = st.columns(len(breakdown))
for col, (label, count) in zip(metric_cols, breakdown):
    with col:
        st.metric(label, f"{count:,}")

left_col, right_col = st.columns([3, 1])

with right_col:
    st.subheader("📊 Counts by Status")
    status_counts = [(label, count) for label, count in breakdown if label != "Total"]
    fig_status = go.Figure(
        data=[
            go.Bar(
                x=[label for label, _ in status_counts],
                y=[count for _, count in status_counts],
                marker_color=[STATUS_COLORS[label] for label, _ in status_counts],
                text=[count for _, count in status_counts],
                textposition="outside",
            )
        ]
    )
    fig_status.update_layout(
        height=300,
        margin=dict(t=20, b=20, l=20, r=20),
        yaxis_title="Rows",
    )
    st.plotly_chart(fig_status, use_container_width=True)

    # Printout
    st.subheader("🖨️ Print Report")
    report = build_print_report(
        filtered_rows,
        brand_filter_label=option_display_name(brands, st.session_state["brand_filter"]),
        sales_rep_filter_label=option_display_name(reps, st.session_state["sales_rep_filter"]),
        generated_by=settings.generated_by,
        company=settings.company,
        include_only_counted=settings.include_only_counted,
    )
    st.download_button(
        "Download printable report",
        data=report.render_html(),
        file_name=f"{report.document_title}.html",
        mime="text/html",
        use_container_width=True,
    )
    st.download_button(
        "Download CSV",
        data=report.to_csv(),
        file_name=f"{report.document_title}.csv",
        mime="text/csv",
        use_container_width=True,
    )
    scope = "counted rows" if report.include_only_counted else "rows"
    st.caption(f"{len(report.rows)} {scope} from the current view")

with left_col:
    st.subheader("📦 Unload Counts")

    if filtered_rows:
        frame = rows_to_frame(filtered_rows)
        display_df = frame[
            [
                "id",
                "item_name",
                "item_code",
                "brand_name",
                "sales_rep_name",
                "system_qty_text",
                "counted_primary",
                "counted_base",
                "counted_qty_text",
                "status_text",
            ]
        ].set_index("id")

        edited = st.data_editor(
            display_df,
            key=f"count_editor_{st.session_state['editor_version']}",
            use_container_width=True,
            hide_index=True,
            disabled=[
                "item_name",
                "item_code",
                "brand_name",
                "sales_rep_name",
                "system_qty_text",
                "counted_qty_text",
                "status_text",
            ],
            column_config={
                "item_name": st.column_config.TextColumn("Item"),
                "item_code": st.column_config.TextColumn("Code"),
                "brand_name": st.column_config.TextColumn("Brand"),
                "sales_rep_name": st.column_config.TextColumn("Sales Rep"),
                "system_qty_text": st.column_config.TextColumn("Qty On Hand"),
                "counted_primary": st.column_config.TextColumn("Count (primary)"),
                "counted_base": st.column_config.TextColumn("Count (base)"),
                "counted_qty_text": st.column_config.TextColumn("Unload Count"),
                "status_text": st.column_config.TextColumn("Status"),
            },
        )

        # Route edits through the count session (digits only, auto-fill,
        # no base count on single-unit rows)
        dual_by_id = dict(zip(frame["id"], frame["has_dual_units"]))
        changed = False
        rejected = False
        for row_id, values in edited.iterrows():
            current = session.get(row_id)
            for field in ["counted_primary", "counted_base"]:
                value = values[field]
                value = "" if value is None or value != value else str(value).strip()
                if value == getattr(current, field):
                    continue
                if session.enter(row_id, field, value, has_dual_units=bool(dual_by_id.get(row_id))):
                    changed = True
                else:
                    rejected = True

        if rejected:
            logger.info("Rejected unload count input")
        if changed or rejected:
            # Fresh editor so it shows the session's resolved counts
            st.session_state["editor_version"] += 1
            st.rerun()

        st.caption(f"Showing {len(filtered_rows)} of {len(all_rows)} rows")
    else:
        st.info("No rows found.")

# --- Footer ---
st.divider()
st.caption(
    f"Stock feed: {feed.row_count:,} rows across {len(feed.stock_details)} items | "
    f"Counts entered: {len(session)}"
)
