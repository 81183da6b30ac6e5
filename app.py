"""
Abastecimentos — Interactive Dashboard

Run with:  streamlit run app.py
"""

import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from abastecimentos_dashboard.config import (
    BR_TIMEZONE,
    DELETE_CONFIRMATION_PHRASE,
    PAGE_SIZE,
    SORT_KEYS,
)
from abastecimentos_dashboard.dashboard import get_group_summary, get_refueling_overview
from abastecimentos_dashboard.kpis import list_card_ids
from abastecimentos_dashboard.simulator import (
    generate_cards,
    generate_employees_csv,
    generate_refuelings_csv,
)
from abastecimentos_dashboard.state import (
    NoValidDataError,
    bulk_delete,
    empty_state,
    import_employees,
    import_refuelings,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Abastecimentos Dashboard",
    page_icon="⛽",
    layout="wide",
    initial_sidebar_state="expanded",
)

SORT_LABELS = {"timestamp": "Date", "nozzle": "Nozzle", "amount": "Value"}


# ---------------------------------------------------------------------------
# Display formatting (pt-BR)
# ---------------------------------------------------------------------------
def format_brl(val: float) -> str:
    if pd.isna(val):
        return "—"
    text = f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {text}"


def format_number(val: float) -> str:
    if pd.isna(val):
        return "—"
    return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_items(items: pd.DataFrame) -> pd.DataFrame:
    local = items["timestamp"].dt.tz_convert(BR_TIMEZONE)
    return pd.DataFrame({
        "Date": local.dt.strftime("%d/%m/%Y %H:%M"),
        "Time (source)": items["raw_time_of_day"].fillna(""),
        "Card": items["card_id"],
        "Nozzle": items["nozzle"],
        "Liters": items["volume"].map(format_number),
        "Value": items["amount"].map(format_brl),
        "Date estimated": items["date_defaulted"].map(lambda x: "yes" if x else ""),
    })


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
FILTER_DEFAULTS = {
    "filter_cards": [],
    "filter_nozzle": "",
    "filter_start": None,
    "filter_end": None,
}

if "snapshot" not in st.session_state:
    st.session_state["snapshot"] = empty_state()
if "page" not in st.session_state:
    st.session_state["page"] = 1
for _key, _value in FILTER_DEFAULTS.items():
    if _key not in st.session_state:
        st.session_state[_key] = _value


def _read_upload(upload) -> str:
    return upload.getvalue().decode("utf-8", errors="replace")


def _clear_filters() -> None:
    for key, value in FILTER_DEFAULTS.items():
        st.session_state[key] = value
    st.session_state["page"] = 1


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("Abastecimentos")
st.sidebar.markdown(f"Logged in as **{st.session_state['snapshot']['user']['name']}**")
st.sidebar.divider()

page = st.sidebar.radio("Navigate", ["Attendants", "Import", "Directory"])

st.sidebar.divider()
st.sidebar.caption(f"Calendar days in {BR_TIMEZONE}")


# ===========================================================================
# PAGE: Attendants
# ===========================================================================
if page == "Attendants":
    st.title("Refuelings by Attendant")

    snapshot = st.session_state["snapshot"]
    refuelings = snapshot["refuelings"]
    directory = snapshot["directory"]

    if refuelings.empty:
        st.info("No refuelings imported yet. Use the Import page to load an export.")
        st.stop()

    all_cards = list_card_ids(refuelings)
    # Cards removed by a reset or re-import cannot stay selected
    st.session_state["filter_cards"] = [
        c for c in st.session_state["filter_cards"] if c in all_cards
    ]

    with st.expander("Filters", expanded=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            selected_cards = st.multiselect("Cards", all_cards, key="filter_cards")
            nozzle = st.text_input("Nozzle contains", key="filter_nozzle")
        with col2:
            start_day = st.date_input("From", key="filter_start", format="DD/MM/YYYY")
            end_day = st.date_input("To", key="filter_end", format="DD/MM/YYYY")
        with col3:
            sort_by = st.selectbox("Sort by", SORT_KEYS, format_func=SORT_LABELS.get)
            order = st.radio("Order", ["desc", "asc"], horizontal=True)

    overview = get_refueling_overview(
        refuelings,
        directory,
        card_ids=selected_cards,
        start_day=start_day,
        end_day=end_day,
        nozzle=nozzle,
        sort_by=sort_by,
        order=order,
        page=st.session_state["page"],
        page_size=PAGE_SIZE,
    )
    if overview["total_pages"] and st.session_state["page"] > overview["total_pages"]:
        st.session_state["page"] = 1
        st.rerun()

    if overview["has_active_filters"]:
        st.button("Clear filters", on_click=_clear_filters)

    stats = overview["global_stats"]
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Refuelings", f"{stats['total_count']:,}".replace(",", "."))
    with col2:
        st.metric("Liters", format_number(stats["total_liters"]))
    with col3:
        st.metric("Value", format_brl(stats["total_value"]))

    if not overview["groups"]:
        st.warning("No refuelings match the current filters.")
    else:
        summary = get_group_summary(overview["groups"])
        fig = go.Figure(go.Bar(
            x=summary["total_value"],
            y=summary["display_name"],
            orientation="h",
            marker_color="#3498db",
            text=summary["total_value"].map(format_brl),
            textposition="outside",
        ))
        fig.update_layout(
            height=max(250, len(summary) * 35),
            xaxis_title="Value (R$)",
            yaxis=dict(autorange="reversed"),
            plot_bgcolor="rgba(0,0,0,0)",
            margin=dict(l=10, r=10, t=10, b=40),
        )
        st.plotly_chart(fig, use_container_width=True)

        for group in overview["groups"]:
            label = (
                f"{group['display_name']}  ·  {group['count']} refuelings  ·  "
                f"{format_number(group['total_liters'])} L  ·  {format_brl(group['total_value'])}"
            )
            with st.expander(label):
                st.caption("Cards: " + ", ".join(group["card_ids"]))
                st.dataframe(format_items(group["items"]), use_container_width=True, hide_index=True)

    if overview["total_pages"] > 1:
        col1, col2, col3 = st.columns([1, 2, 1])
        with col1:
            if st.button("Previous", disabled=st.session_state["page"] <= 1):
                st.session_state["page"] -= 1
                st.rerun()
        with col2:
            st.markdown(
                f"<div style='text-align:center;'>Page {st.session_state['page']} "
                f"of {overview['total_pages']}</div>",
                unsafe_allow_html=True,
            )
        with col3:
            if st.button("Next", disabled=st.session_state["page"] >= overview["total_pages"]):
                st.session_state["page"] += 1
                st.rerun()


# ===========================================================================
# PAGE: Import
# ===========================================================================
elif page == "Import":
    st.title("Import Exports")

    tab1, tab2, tab3 = st.tabs(["Refuelings", "Employee directory", "Reset"])

    with tab1:
        upload = st.file_uploader("Refueling export (CSV)", type=["csv", "txt"], key="refuelings_upload")
        if upload is not None and st.button("Import refuelings"):
            try:
                st.session_state["snapshot"] = import_refuelings(
                    st.session_state["snapshot"], _read_upload(upload)
                )
                st.session_state["page"] = 1
                st.success(f"{len(st.session_state['snapshot']['refuelings'])} refuelings loaded.")
            except NoValidDataError:
                st.error("No valid data found in the CSV file.")

        if st.button("Load simulated data"):
            cards = generate_cards()
            snapshot = import_refuelings(st.session_state["snapshot"], generate_refuelings_csv(cards=cards))
            st.session_state["snapshot"] = import_employees(snapshot, generate_employees_csv(cards=cards))
            st.session_state["page"] = 1
            st.success("Simulated refuelings and directory loaded.")

    with tab2:
        upload = st.file_uploader(
            "Directory export (name; registration; card 1; card 2; card 3)",
            type=["csv", "txt"],
            key="employees_upload",
        )
        if upload is not None and st.button("Import directory"):
            try:
                st.session_state["snapshot"] = import_employees(
                    st.session_state["snapshot"], _read_upload(upload)
                )
                st.success(f"{len(st.session_state['snapshot']['directory'])} cards in the directory.")
            except NoValidDataError:
                st.error("No valid data found in the CSV file.")

    with tab3:
        st.warning("This removes every imported refueling. The employee directory is kept.")
        confirmation = st.text_input(f"Type '{DELETE_CONFIRMATION_PHRASE}' to confirm")
        if st.button("Delete all refuelings", type="primary"):
            before = st.session_state["snapshot"]
            after = bulk_delete(before, confirmation)
            if after is before:
                st.error("Confirmation phrase did not match. Nothing was deleted.")
            else:
                st.session_state["snapshot"] = after
                st.session_state["page"] = 1
                st.success("All refuelings deleted.")


# ===========================================================================
# PAGE: Directory
# ===========================================================================
elif page == "Directory":
    st.title("Employee Directory")

    directory = st.session_state["snapshot"]["directory"]
    if directory.empty:
        st.info("No directory imported. Refuelings are grouped by raw card id.")
    else:
        display_df = directory.rename(columns={"card_id": "Card", "display_name": "Name"})
        st.dataframe(display_df, use_container_width=True, hide_index=True)
