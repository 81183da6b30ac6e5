"""
Refueling aggregation — pure functions with no side effects.

Provides filtering, stable sorting, grouping by resolved attendant identity,
global totals and pagination of the group list.
"""

import logging
import math
from datetime import date
from typing import Iterable

import pandas as pd

from .config import PAGE_SIZE, SORT_KEYS
from .loaders.utils import civil_day_keys
from .transforms import build_identity_map, resolve_identities

logger = logging.getLogger(__name__)


def _as_day_key(value: str | date | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    value = str(value).strip()
    return value or None


def filter_refuelings(
    df: pd.DataFrame,
    card_ids: Iterable[str] | None = None,
    start_day: str | date | None = None,
    end_day: str | date | None = None,
    nozzle: str | None = None,
) -> pd.DataFrame:
    """Apply the dashboard filters, all optional and AND-combined.

    Parameters
    ----------
    df : Refuelings frame.
    card_ids : Cards to keep. None or empty keeps every card.
    start_day, end_day : Inclusive YYYY-MM-DD bounds on the regional
        calendar day. Either bound may be given alone.
    nozzle : Case-insensitive substring of the nozzle label.
    """
    card_ids = list(card_ids) if card_ids else []
    start_key = _as_day_key(start_day)
    end_key = _as_day_key(end_day)

    mask = pd.Series(True, index=df.index)

    if card_ids:
        mask &= df["card_id"].isin(card_ids)

    if start_key or end_key:
        day_keys = civil_day_keys(df["timestamp"])
        if start_key:
            mask &= day_keys >= start_key
        if end_key:
            mask &= day_keys <= end_key

    if nozzle:
        mask &= (
            df["nozzle"].astype(str).str.lower()
            .str.contains(nozzle.lower(), regex=False)
        )

    result = df[mask].copy()
    logger.debug("Filtered %d -> %d refuelings", len(df), len(result))
    return result


def sort_refuelings(
    df: pd.DataFrame,
    sort_by: str = "timestamp",
    order: str = "desc",
) -> pd.DataFrame:
    """Stable sort by timestamp, nozzle or amount.

    Equal keys keep their encounter order in both directions. Missing
    amounts sort last.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
    if order not in ("asc", "desc"):
        raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")

    return df.sort_values(
        sort_by,
        ascending=(order == "asc"),
        kind="stable",
        na_position="last",
    )


def group_by_identity(df: pd.DataFrame, directory: pd.DataFrame) -> list[dict]:
    """Group refuelings by resolved attendant identity.

    Groups appear in first-encounter order of the incoming frame, and items
    keep their order inside each group. Cards missing from the directory
    group under their raw id.

    Returns
    -------
    List of dicts:
    {
        "display_name": "João",
        "card_ids": ["CARD7", "CARD9"],
        "items": DataFrame,
        "total_liters": 125.4,
        "total_value": 742.1,
        "count": 6,
    }
    """
    if df.empty:
        return []

    identity_map = build_identity_map(directory)
    names = resolve_identities(df["card_id"], identity_map).to_numpy()

    groups = []
    for display_name, items in df.groupby(names, sort=False, dropna=False):
        groups.append({
            "display_name": display_name,
            "card_ids": items["card_id"].drop_duplicates().tolist(),
            "items": items.reset_index(drop=True),
            "total_liters": float(items["volume"].sum()),
            "total_value": float(items["amount"].sum()),
            "count": int(len(items)),
        })

    logger.debug("Built %d groups from %d refuelings", len(groups), len(df))
    return groups


def compute_global_stats(df: pd.DataFrame) -> dict:
    """Totals over the filtered refuelings (missing values count as 0)."""
    return {
        "total_liters": float(df["volume"].sum()) if not df.empty else 0.0,
        "total_value": float(df["amount"].sum()) if not df.empty else 0.0,
        "total_count": int(len(df)),
    }


def count_pages(n_groups: int, page_size: int = PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be positive")
    return math.ceil(n_groups / page_size)


def paginate_groups(groups: list[dict], page: int, page_size: int = PAGE_SIZE) -> list[dict]:
    """Slice one 1-based page out of the group list; out of range gives []."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    if page < 1:
        return []
    start = (page - 1) * page_size
    return groups[start:start + page_size]


def list_card_ids(df: pd.DataFrame) -> list[str]:
    """Sorted distinct card ids, for the card filter selector."""
    if df.empty:
        return []
    return sorted(df["card_id"].dropna().astype(str).unique().tolist())


def has_active_filters(
    card_ids: Iterable[str] | None = None,
    start_day: str | date | None = None,
    end_day: str | date | None = None,
    nozzle: str | None = None,
) -> bool:
    return bool(
        (card_ids and list(card_ids))
        or _as_day_key(start_day)
        or _as_day_key(end_day)
        or nozzle
    )
