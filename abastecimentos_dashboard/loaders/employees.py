"""
Loader for the employee / fuel-card directory export.

Layout is positional, one employee per row after the header:
    column A = employee name
    columns C-E = up to three card ids assigned to that employee
Column B (usually a registration number) is not used.
"""

import logging
from pathlib import Path

import pandas as pd

from ..config import DIRECTORY_COLUMNS, EMPLOYEE_CARD_COLUMNS, EMPLOYEE_NAME_COLUMN
from .utils import decode_table

logger = logging.getLogger(__name__)


def parse_employees(text: str) -> pd.DataFrame:
    """Parse a directory export into (card_id, display_name) entries.

    Each non-empty card id on a row becomes its own entry carrying the
    row's name. Rows without a name or without any card id are dropped.
    Duplicate card ids are kept in file order; merge_directory settles them.

    Returns
    -------
    DataFrame with columns: card_id, display_name
    """
    _, rows = decode_table(text)

    entries = []
    for row_number, values in enumerate(rows, start=1):
        name = values[EMPLOYEE_NAME_COLUMN] if len(values) > EMPLOYEE_NAME_COLUMN else ""
        card_ids = [
            values[col] for col in EMPLOYEE_CARD_COLUMNS
            if len(values) > col and values[col]
        ]
        if not name or not card_ids:
            logger.debug("Skipping directory row %d: missing name or card id", row_number)
            continue

        for card_id in card_ids:
            entries.append({"card_id": card_id, "display_name": name})

    if not entries:
        logger.warning("No valid directory entries found in %d data row(s)", len(rows))

    df = pd.DataFrame(entries, columns=DIRECTORY_COLUMNS)
    logger.info("Parsed %d directory entries", len(df))
    return df


def load_employees(path: str) -> pd.DataFrame:
    """Read a directory export from disk and parse it."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        logger.exception("Failed to read directory export: %s", path)
        raise

    df = parse_employees(text)
    logger.info("Loaded %d directory entries from %s", len(df), path)
    return df
