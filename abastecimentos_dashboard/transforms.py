"""
Data transforms: directory upsert, identity resolution, appending imports.

All functions return new frames; inputs are never modified.
"""

import logging

import pandas as pd

from .config import DIRECTORY_COLUMNS
from .loaders.refuelings import empty_refuelings

logger = logging.getLogger(__name__)


def empty_directory() -> pd.DataFrame:
    """Directory frame with no entries."""
    return pd.DataFrame(columns=DIRECTORY_COLUMNS)


def merge_directory(directory: pd.DataFrame, incoming: pd.DataFrame) -> pd.DataFrame:
    """Upsert incoming entries into the directory, keyed by card_id.

    An incoming card_id replaces the existing name in place; unknown ids
    are appended. The last occurrence of an id wins, both within the batch
    and across imports, so re-importing a corrected roster supersedes stale
    names.

    Parameters
    ----------
    directory : Current directory (card_id, display_name).
    incoming : Entries from parse_employees().

    Returns
    -------
    Updated directory DataFrame with unique card_id values.
    """
    merged: dict[str, str] = {}
    for frame in (directory, incoming):
        if frame is None or frame.empty:
            continue
        for card_id, name in zip(frame["card_id"], frame["display_name"]):
            merged[str(card_id)] = name

    result = pd.DataFrame(
        {"card_id": list(merged.keys()), "display_name": list(merged.values())},
        columns=DIRECTORY_COLUMNS,
    )

    existing = 0 if directory is None else len(directory)
    logger.info(
        "Merged %d incoming entries into directory (%d -> %d cards)",
        0 if incoming is None else len(incoming), existing, len(result),
    )
    return result


def build_identity_map(directory: pd.DataFrame) -> dict[str, str]:
    """Return a card_id -> display_name lookup from the directory."""
    if directory is None or directory.empty:
        return {}
    return {
        str(card_id): str(name)
        for card_id, name in zip(directory["card_id"], directory["display_name"])
        if pd.notna(name) and str(name).strip()
    }


def resolve_identity(card_id: str, identity_map: dict[str, str]) -> str:
    """Display name for a card; unknown cards resolve to their own id."""
    return identity_map.get(card_id, card_id)


def resolve_identities(card_ids: pd.Series, identity_map: dict[str, str]) -> pd.Series:
    """Vectorised resolve_identity."""
    return card_ids.map(lambda card_id: resolve_identity(card_id, identity_map))


def append_refuelings(existing: pd.DataFrame, new_rows: pd.DataFrame) -> pd.DataFrame:
    """Append a freshly parsed batch to the existing refuelings."""
    frames = [df for df in (existing, new_rows) if df is not None and not df.empty]
    if not frames:
        return empty_refuelings()
    if len(frames) == 1:
        return frames[0].reset_index(drop=True)

    result = pd.concat(frames, ignore_index=True)
    logger.info("Appended %d refuelings (%d total)", len(new_rows), len(result))
    return result
