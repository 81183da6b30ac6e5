"""
Configuration: column resolution rules, timezone, paging, constants.

REFUELING_FIELD_RULES maps each refueling field to the ordered list of
places a value may come from. Rules are tried top to bottom and the first
one that yields a non-empty value wins; REFUELING_FIELD_DEFAULTS supplies
the value when none does.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: sample exports used by main.py and the Streamlit demo
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

REFUELINGS_FILE = DATA_DIR / "abastecimentos.csv"
EMPLOYEES_FILE = DATA_DIR / "frentistas.csv"

# ---------------------------------------------------------------------------
# Regional calendar
# ---------------------------------------------------------------------------
# Every calendar-day comparison interprets instants in this timezone.
BR_TIMEZONE = "America/Sao_Paulo"

# ---------------------------------------------------------------------------
# Session / provenance
# ---------------------------------------------------------------------------
DEFAULT_USER: dict[str, str] = {
    "id": "1",
    "name": "Administrador",
    "role": "admin",
}
DEFAULT_OWNER_ID = DEFAULT_USER["id"]

# Typed by the operator to confirm a full reset (compared case-insensitively)
DELETE_CONFIRMATION_PHRASE = "excluir"

# ---------------------------------------------------------------------------
# Grouped view
# ---------------------------------------------------------------------------
PAGE_SIZE = 10

SORT_KEYS = ("timestamp", "nozzle", "amount")
DEFAULT_SORT_BY = "timestamp"
DEFAULT_SORT_ORDER = "desc"

# ---------------------------------------------------------------------------
# Refueling column resolution
# ---------------------------------------------------------------------------
# source: "position" (0-based column index, used only when the row is long
#         enough) or "header" (lower-cased header name)
REFUELING_FIELD_RULES: dict[str, list[dict]] = {
    "card_id": [
        {"source": "position", "index": 12},
        {"source": "header", "name": "id_frentista"},
        {"source": "header", "name": "frentista"},
    ],
    "date": [
        {"source": "header", "name": "data"},
        {"source": "header", "name": "data_hora"},
        {"source": "header", "name": "date"},
        {"source": "header", "name": "timestamp"},
    ],
    "raw_time_of_day": [
        {"source": "position", "index": 9},
    ],
    "nozzle": [
        {"source": "header", "name": "bico"},
        {"source": "header", "name": "id_bico"},
    ],
    "amount": [
        {"source": "header", "name": "valor"},
        {"source": "header", "name": "total"},
        {"source": "header", "name": "price"},
    ],
    "volume": [
        {"source": "header", "name": "litros"},
        {"source": "header", "name": "volume"},
        {"source": "header", "name": "quantidade"},
        {"source": "header", "name": "liters"},
    ],
}

REFUELING_FIELD_DEFAULTS: dict[str, str | None] = {
    "card_id": "N/A",
    "date": None,
    "raw_time_of_day": None,
    "nozzle": "B?",
    "amount": None,
    "volume": None,
}

REFUELING_COLUMNS = [
    "id",
    "card_id",
    "timestamp",
    "raw_time_of_day",
    "nozzle",
    "amount",
    "volume",
    "owner_id",
    "date_defaulted",
]

# ---------------------------------------------------------------------------
# Employee directory layout (positional)
# ---------------------------------------------------------------------------
EMPLOYEE_NAME_COLUMN = 0
EMPLOYEE_CARD_COLUMNS = (2, 3, 4)

DIRECTORY_COLUMNS = ["card_id", "display_name"]
