"""Data ingestion loaders for refueling and employee directory exports."""

from .employees import load_employees, parse_employees
from .refuelings import empty_refuelings, load_refuelings, parse_refuelings
from .refuelings import resolve_refueling
from .utils import civil_day_key, civil_day_keys, decode_table, detect_delimiter
from .utils import normalise_date, parse_number

__all__ = [
    "load_employees",
    "parse_employees",
    "empty_refuelings",
    "load_refuelings",
    "parse_refuelings",
    "resolve_refueling",
    "civil_day_key",
    "civil_day_keys",
    "decode_table",
    "detect_delimiter",
    "normalise_date",
    "parse_number",
]
