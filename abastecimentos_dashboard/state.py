"""
Application state snapshots.

A snapshot is a plain dict:
    {"refuelings": DataFrame, "directory": DataFrame, "user": dict}

Every operation takes a snapshot and returns a new one; the caller owns
the authoritative snapshot and is responsible for persisting it.
state_to_dict/state_from_dict convert to and from JSON-safe structures for
whatever storage the host uses.
"""

import logging

import pandas as pd

from .config import DEFAULT_USER, DELETE_CONFIRMATION_PHRASE, DIRECTORY_COLUMNS
from .config import REFUELING_COLUMNS
from .loaders import empty_refuelings, parse_employees, parse_refuelings
from .transforms import append_refuelings, empty_directory, merge_directory

logger = logging.getLogger(__name__)


class NoValidDataError(ValueError):
    """Raised when an imported file yields no usable rows."""


def empty_state(user: dict | None = None) -> dict:
    return {
        "refuelings": empty_refuelings(),
        "directory": empty_directory(),
        "user": dict(user if user is not None else DEFAULT_USER),
    }


def import_refuelings(state: dict, text: str, now: pd.Timestamp | None = None) -> dict:
    """Parse a refueling export and append it to the snapshot.

    Raises
    ------
    NoValidDataError
        When the file has no valid rows. The snapshot is left as it was.
    """
    owner_id = state["user"]["id"]
    new_rows = parse_refuelings(text, owner_id=owner_id, now=now)
    if new_rows.empty:
        raise NoValidDataError("No valid refueling data found in the file")

    return {
        **state,
        "refuelings": append_refuelings(state["refuelings"], new_rows),
    }


def import_employees(state: dict, text: str) -> dict:
    """Parse a directory export and upsert it into the snapshot's directory.

    Raises
    ------
    NoValidDataError
        When the file has no valid entries.
    """
    incoming = parse_employees(text)
    if incoming.empty:
        raise NoValidDataError("No valid employee data found in the file")

    return {
        **state,
        "directory": merge_directory(state["directory"], incoming),
    }


def bulk_delete(state: dict, confirmation: str) -> dict:
    """Drop every refueling when the confirmation phrase matches.

    The phrase is compared case-insensitively; any other input returns the
    snapshot unchanged. The directory is kept.
    """
    if (confirmation or "").strip().lower() != DELETE_CONFIRMATION_PHRASE:
        logger.warning("Bulk delete not confirmed; refuelings left untouched")
        return state

    logger.info("Bulk delete confirmed: removing %d refuelings", len(state["refuelings"]))
    return {**state, "refuelings": empty_refuelings()}


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def state_to_dict(state: dict) -> dict:
    """JSON-safe representation of a snapshot (ISO-8601 UTC timestamps)."""
    refuelings = state["refuelings"].copy()
    if not refuelings.empty:
        refuelings["timestamp"] = refuelings["timestamp"].map(lambda ts: ts.isoformat())
    refuelings = refuelings.astype(object).where(refuelings.notna(), None)

    return {
        "refuelings": refuelings[REFUELING_COLUMNS].to_dict(orient="records"),
        "directory": state["directory"][DIRECTORY_COLUMNS].to_dict(orient="records"),
        "user": dict(state["user"]),
    }


def state_from_dict(payload: dict) -> dict:
    """Rebuild a snapshot from state_to_dict() output."""
    state = empty_state(payload.get("user"))

    records = payload.get("refuelings") or []
    if records:
        df = pd.DataFrame(records, columns=REFUELING_COLUMNS)
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce").astype(float)
        df["volume"] = pd.to_numeric(df["volume"], errors="coerce").astype(float)
        df["date_defaulted"] = df["date_defaulted"].fillna(False).astype(bool)
        state["refuelings"] = df

    entries = payload.get("directory") or []
    if entries:
        state["directory"] = pd.DataFrame(entries, columns=DIRECTORY_COLUMNS)

    logger.info(
        "Restored snapshot with %d refuelings and %d directory entries",
        len(state["refuelings"]), len(state["directory"]),
    )
    return state
