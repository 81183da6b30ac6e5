"""Pytest fixtures and configuration. Run from project root with: pytest tests/ -v"""

import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure the project root is on path so `abastecimentos_dashboard` imports work
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from abastecimentos_dashboard.loaders import parse_employees, parse_refuelings  # noqa: E402

POSITIONAL_HEADER = (
    "id_transacao,data,bico,combustivel,litros,preco_litro,valor,"
    "bomba,encerrante,hora,tanque,turno,id_frentista"
)

# Header-based layout; 03/12 23:30 in São Paulo is already 04/12 in UTC
SAMPLE_REFUELINGS_CSV = """data;id_frentista;bico;valor;litros
01/12/2024 08:00;C1;B01;100,00;20,00
01/12/2024 09:00;C2;B02;50,00;10,00
02/12/2024 10:00;C1;B03;30,00;6,00
03/12/2024 23:30;C3;B01;80,00;16,00
04/12/2024 07:00;C2;b01;50,00;10,00
"""

SAMPLE_EMPLOYEES_CSV = """nome;matricula;cartao_1;cartao_2;cartao_3
Ana;100;C1;C2;
"""


@pytest.fixture
def fixed_now():
    return pd.Timestamp("2025-01-15 12:00:00", tz="UTC")


@pytest.fixture
def positional_csv():
    """Two rows in the 13-column export layout."""
    return "\n".join([
        POSITIONAL_HEADER,
        "1,05/12/2024,B01,Gasolina,5,5.89,10,1,1000,08:15:00,T1,manha,CARD7",
        "2,06/12/2024,B02,Etanol,12.5,3.99,49.88,2,1012,17:40:00,T2,tarde,CARD8",
    ]) + "\n"


@pytest.fixture
def sample_refuelings(fixed_now):
    return parse_refuelings(SAMPLE_REFUELINGS_CSV, now=fixed_now)


@pytest.fixture
def sample_directory():
    return parse_employees(SAMPLE_EMPLOYEES_CSV)


@pytest.fixture
def sample_refuelings_csv():
    return SAMPLE_REFUELINGS_CSV


@pytest.fixture
def sample_employees_csv():
    return SAMPLE_EMPLOYEES_CSV
