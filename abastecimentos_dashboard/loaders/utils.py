"""
Shared utilities for data ingestion: delimiter sniffing, table decoding,
day-first date normalisation, locale-aware number coercion.
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

import numpy as np
import pandas as pd

from ..config import BR_TIMEZONE

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")
_QUOTE_CHARS = "\"'"

# Day-first is tried before year-first so that 05/12/2024 is never read as
# May 12th. Order is never inferred from magnitude.
_DMY_RE = re.compile(
    r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})"
    r"(?:[T\s]+(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?)?"
)
_YMD_RE = re.compile(
    r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})"
    r"(?:[T\s]+(\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.\d+)?)?"
    r"\s*(?P<offset>Z|[+-]\d{2}:?\d{2})?)?",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Tabular decoding
# ---------------------------------------------------------------------------

def detect_delimiter(first_line: str) -> str:
    """Return ';' when it outnumbers ',' in the line, else ','.

    Quoting is not taken into account: a quoted comma inside a
    semicolon-delimited header still counts as a comma.
    """
    if first_line.count(";") > first_line.count(","):
        return ";"
    return ","


def _clean_cell(value: str) -> str:
    return value.strip().strip(_QUOTE_CHARS).strip()


def decode_table(text: str) -> tuple[list[str], list[list[str]]]:
    """Split raw delimited text into (headers, rows).

    Headers are lower-cased; every cell is trimmed and unquoted. Returns
    ([], []) unless there is a header plus at least one data row.
    """
    if not text:
        return [], []
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    lines = [line for line in _LINE_SPLIT_RE.split(text) if line.strip()]
    if len(lines) < 2:
        logger.warning("Expected a header and at least one data row, found %d line(s)", len(lines))
        return [], []

    delimiter = detect_delimiter(lines[0])
    headers = [_clean_cell(h).lower() for h in lines[0].split(delimiter)]
    rows = [[_clean_cell(v) for v in line.strip().split(delimiter)] for line in lines[1:]]

    logger.debug("Decoded %d row(s) with delimiter %r", len(rows), delimiter)
    return headers, rows


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def _localise(ts: pd.Timestamp) -> pd.Timestamp:
    """Read a naive wall-clock timestamp as regional time and return UTC."""
    if ts.tzinfo is None:
        ts = ts.tz_localize(BR_TIMEZONE, ambiguous=True, nonexistent="shift_forward")
    return ts.tz_convert("UTC")


def _parse_offset(text: str) -> timezone:
    if text.upper() == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def _from_match(year: int, month: int, day: int, match: re.Match) -> pd.Timestamp:
    hour = int(match.group(4)) if match.group(4) else 0
    minute = int(match.group(5)) if match.group(5) else 0
    second = int(match.group(6)) if match.group(6) else 0
    ts = pd.Timestamp(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second
    )
    offset = match.groupdict().get("offset")
    if offset:
        # An explicit offset is kept as given
        return ts.tz_localize(_parse_offset(offset)).tz_convert("UTC")
    return _localise(ts)


def normalise_date(val: Any, now: pd.Timestamp | None = None) -> tuple[pd.Timestamp, bool]:
    """Parse free-form date/time text into a UTC timestamp.

    Tries, in order: DD/MM/YYYY [HH:MM[:SS]], YYYY-MM-DD [HH:MM[:SS]], then
    pandas' free-form parser. Wall-clock values are read in the regional
    timezone; year-first values ending in Z or +HH:MM keep that offset.
    Never raises: anything unparseable yields the current instant (or
    ``now`` when given).

    Impossible calendar dates such as 31/02/2024 are not rolled over into
    the next month. They are treated as unparseable and defaulted.

    Returns
    -------
    (timestamp, defaulted) where defaulted is True when the fallback was used.
    """
    fallback = now if now is not None else pd.Timestamp.now(tz="UTC")

    if isinstance(val, (pd.Timestamp, datetime, date)) and not pd.isna(val):
        return _localise(pd.Timestamp(val)), False
    if val is None or not isinstance(val, str):
        if val is not None and not pd.isna(val):
            logger.warning("Unsupported date value %r, using current time", val)
        return fallback, True

    s = val.strip()
    if not s:
        return fallback, True

    match = _DMY_RE.match(s)
    if match:
        year = int(match.group(3))
        if year < 100:
            year += 2000
        try:
            return _from_match(year, int(match.group(2)), int(match.group(1)), match), False
        except ValueError:
            logger.debug("Day-first match for %r is not a valid date", s)

    match = _YMD_RE.match(s)
    if match:
        try:
            return _from_match(int(match.group(1)), int(match.group(2)), int(match.group(3)), match), False
        except ValueError:
            logger.debug("Year-first match for %r is not a valid date", s)

    # Free-form text still leans day-first (e.g. 05.12.2024)
    try:
        ts = pd.to_datetime(s, dayfirst=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        ts = pd.NaT
    if not pd.isna(ts):
        return _localise(ts), False

    logger.warning("Could not parse date value %r, using current time", s)
    return fallback, True


def civil_day_key(ts: pd.Timestamp) -> str:
    """YYYY-MM-DD of an instant on the regional calendar."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(BR_TIMEZONE).strftime("%Y-%m-%d")


def civil_day_keys(timestamps: pd.Series) -> pd.Series:
    """Vectorised civil_day_key over a tz-aware timestamp column."""
    if timestamps.empty:
        return pd.Series([], index=timestamps.index, dtype=object)
    ts = pd.to_datetime(timestamps, utc=True)
    return ts.dt.tz_convert(BR_TIMEZONE).dt.strftime("%Y-%m-%d")


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def parse_number(val: Any) -> float:
    """Coerce a monetary/volume cell to float.

    - None (column absent) -> NaN
    - empty string -> 0.0
    - "1.234,56" / "1,234.56" -> 1234.56; "10,5" -> 10.5
    - currency symbol R$ and spaces are ignored
    - infinities and anything else unparseable -> NaN
    """
    if val is None:
        return np.nan
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        number = float(val)
    else:
        s = str(val).strip()
        if not s:
            return 0.0
        s = s.replace("R$", "").replace("\u00a0", "").replace(" ", "")

        if "," in s and "." in s:
            # Whichever separator comes last is the decimal one
            if s.rfind(",") > s.rfind("."):
                s = s.replace(".", "").replace(",", ".")
            else:
                s = s.replace(",", "")
        elif s.count(",") == 1:
            s = s.replace(",", ".")
        elif s.count(",") > 1 or s.count(".") > 1:
            s = s.replace(",", "").replace(".", "")

        try:
            number = float(s)
        except ValueError:
            return np.nan

    # float() also accepts "inf" and "nan"
    return number if np.isfinite(number) else np.nan
