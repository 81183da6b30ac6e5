"""
Dashboard-ready output functions.

These are the entry points for the Streamlit front end. Each function
returns plain dicts or DataFrames suitable for rendering cards, charts and
the grouped attendant table.
"""

import logging
from datetime import date
from typing import Iterable

import pandas as pd

from .config import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, PAGE_SIZE
from .kpis import (
    compute_global_stats,
    count_pages,
    filter_refuelings,
    group_by_identity,
    has_active_filters,
    list_card_ids,
    paginate_groups,
    sort_refuelings,
)

logger = logging.getLogger(__name__)


def get_refueling_overview(
    refuelings: pd.DataFrame,
    directory: pd.DataFrame,
    card_ids: Iterable[str] | None = None,
    start_day: str | date | None = None,
    end_day: str | date | None = None,
    nozzle: str | None = None,
    sort_by: str = DEFAULT_SORT_BY,
    order: str = DEFAULT_SORT_ORDER,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> dict:
    """Single entry point the Streamlit page calls on every filter change.

    The group list is rebuilt from scratch each call: filter, sort, group,
    then paginate over groups (not over individual refuelings).

    Returns
    -------
    Dict with structure:
    {
        "groups": [...],            # current page, see kpis.group_by_identity
        "total_groups": 23,
        "total_pages": 3,
        "page": 1,
        "global_stats": {"total_liters": ..., "total_value": ..., "total_count": ...},
        "card_ids": ["0001", "0002", ...],  # every card in the data, unfiltered
        "has_active_filters": False,
    }
    """
    card_ids = list(card_ids) if card_ids else []

    filtered = filter_refuelings(
        refuelings,
        card_ids=card_ids,
        start_day=start_day,
        end_day=end_day,
        nozzle=nozzle,
    )
    ordered = sort_refuelings(filtered, sort_by=sort_by, order=order)
    groups = group_by_identity(ordered, directory)

    overview = {
        "groups": paginate_groups(groups, page, page_size),
        "total_groups": len(groups),
        "total_pages": count_pages(len(groups), page_size),
        "page": page,
        "global_stats": compute_global_stats(ordered),
        "card_ids": list_card_ids(refuelings),
        "has_active_filters": has_active_filters(card_ids, start_day, end_day, nozzle),
    }

    logger.info(
        "Overview: %d refuelings in %d groups (page %d of %d)",
        overview["global_stats"]["total_count"], len(groups), page, overview["total_pages"],
    )
    return overview


def get_group_summary(groups: list[dict]) -> pd.DataFrame:
    """One row per group, for bar charts and the summary table.

    Returns
    -------
    DataFrame with columns:
        display_name, card_ids, count, total_liters, total_value
    """
    columns = ["display_name", "card_ids", "count", "total_liters", "total_value"]
    if not groups:
        return pd.DataFrame(columns=columns)

    return pd.DataFrame([
        {
            "display_name": g["display_name"],
            "card_ids": ", ".join(g["card_ids"]),
            "count": g["count"],
            "total_liters": g["total_liters"],
            "total_value": g["total_value"],
        }
        for g in groups
    ], columns=columns)
