"""
Loader for fuel-station refueling exports.

Exports arrive as loosely structured CSV text, comma or semicolon delimited.
The common layout has 13 columns with the time of day in column J (index 9)
and the attendant card in column M (index 12); other layouts are matched by
header name. See config.REFUELING_FIELD_RULES for the full rule table.
"""

import logging
import uuid
from pathlib import Path

import numpy as np
import pandas as pd

from ..config import (
    DEFAULT_OWNER_ID,
    REFUELING_COLUMNS,
    REFUELING_FIELD_DEFAULTS,
    REFUELING_FIELD_RULES,
)
from .utils import decode_table, normalise_date, parse_number

logger = logging.getLogger(__name__)


def empty_refuelings() -> pd.DataFrame:
    """Refuelings frame with the canonical schema and no rows."""
    df = pd.DataFrame(columns=REFUELING_COLUMNS)
    return _coerce_dtypes(df)


def _coerce_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").astype(float)
    df["volume"] = pd.to_numeric(df["volume"], errors="coerce").astype(float)
    df["date_defaulted"] = df["date_defaulted"].astype(bool)
    return df


def _resolve_field(field: str, values: list[str], row: dict[str, str]) -> str | None:
    """Apply the rule list for one field, first non-empty value wins.

    When no rule yields a value the configured default is used. Fields
    without a default return "" if one of their columns exists but is
    blank, and None if none of their columns exist at all.
    """
    present = False
    for rule in REFUELING_FIELD_RULES[field]:
        if rule["source"] == "position":
            index = rule["index"]
            raw = values[index] if len(values) > index else None
        elif rule["source"] == "header":
            raw = row.get(rule["name"])
        else:
            raise ValueError(f"Unknown rule source {rule['source']!r} for field {field!r}")

        if raw is None:
            continue
        present = True
        if raw != "":
            return raw

    default = REFUELING_FIELD_DEFAULTS.get(field)
    if default is not None:
        return default
    return "" if present else None


def resolve_refueling(
    values: list[str],
    row: dict[str, str],
    owner_id: str = DEFAULT_OWNER_ID,
    now: pd.Timestamp | None = None,
) -> dict | None:
    """Map one decoded row to a refueling record.

    Parameters
    ----------
    values : Positional cell values of the row.
    row : The same values keyed by lower-cased header.
    owner_id : Importing user, kept for provenance.
    now : Instant used when the date cannot be parsed.

    Returns
    -------
    Record dict with the REFUELING_COLUMNS keys, or None when neither the
    amount nor the volume is a finite number.
    """
    amount = parse_number(_resolve_field("amount", values, row))
    volume = parse_number(_resolve_field("volume", values, row))
    if not (np.isfinite(amount) or np.isfinite(volume)):
        return None

    timestamp, defaulted = normalise_date(_resolve_field("date", values, row), now=now)
    raw_time = _resolve_field("raw_time_of_day", values, row)

    return {
        "id": uuid.uuid4().hex,
        "card_id": str(_resolve_field("card_id", values, row)),
        "timestamp": timestamp,
        "raw_time_of_day": raw_time or None,
        "nozzle": str(_resolve_field("nozzle", values, row)),
        "amount": amount,
        "volume": volume,
        "owner_id": owner_id,
        "date_defaulted": defaulted,
    }


def parse_refuelings(
    text: str,
    owner_id: str = DEFAULT_OWNER_ID,
    now: pd.Timestamp | None = None,
) -> pd.DataFrame:
    """Parse a refueling export into the canonical refuelings frame.

    Rows that fail to resolve are skipped with a warning; the rest of the
    file is still imported. Returns an empty frame when nothing is usable.
    """
    headers, rows = decode_table(text)
    if not headers:
        return empty_refuelings()

    records = []
    dropped = 0
    for row_number, values in enumerate(rows, start=1):
        try:
            # Duplicate header names: the right-most column wins
            row = dict(zip(headers, values))
            record = resolve_refueling(values, row, owner_id=owner_id, now=now)
        except Exception:
            logger.warning("Skipping refueling data row %d", row_number, exc_info=True)
            continue

        if record is None:
            dropped += 1
            logger.debug("Data row %d has neither a valid amount nor volume", row_number)
            continue
        records.append(record)

    if dropped:
        logger.info("Dropped %d row(s) without a valid amount or volume", dropped)

    if not records:
        logger.warning("No valid refueling rows found in %d data row(s)", len(rows))
        return empty_refuelings()

    df = _coerce_dtypes(pd.DataFrame(records, columns=REFUELING_COLUMNS))

    defaulted = int(df["date_defaulted"].sum())
    if defaulted:
        logger.info("%d refueling(s) had an unparseable date and were stamped with the current time", defaulted)

    logger.info("Parsed %d refueling rows", len(df))
    return df


def load_refuelings(path: str, owner_id: str = DEFAULT_OWNER_ID) -> pd.DataFrame:
    """Read a refueling export from disk and parse it."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        logger.exception("Failed to read refueling export: %s", path)
        raise

    df = parse_refuelings(text, owner_id=owner_id)
    logger.info("Loaded %d refuelings from %s", len(df), path)
    return df
