"""
Simulated export generator for the refueling dashboard.

Produces CSV text shaped like the station's real exports: a 13-column
semicolon-delimited refueling file (pt-BR decimals, date and time in separate
columns) and a positional employee directory. All values are synthetic.
"""

import numpy as np
import pandas as pd

# ---------------------------------------------------------------------------
# Typical station parameters
# ---------------------------------------------------------------------------
_FUELS = [
    ("Gasolina Comum", 5.89),
    ("Gasolina Aditivada", 6.09),
    ("Etanol", 3.99),
    ("Diesel S10", 6.19),
]

_NOZZLES = [f"B{i:02d}" for i in range(1, 9)]

_NAMES = [
    "Ana Souza", "Bruno Lima", "Carla Mendes", "Diego Rocha", "Eduarda Alves",
    "Fábio Nunes", "Gabriela Castro", "Henrique Dias", "Isabela Moura", "João Pereira",
]

_SHIFTS = ["manhã", "tarde", "noite"]

REFUELING_HEADER = [
    "id_transacao", "data", "bico", "combustivel", "litros", "preco_litro",
    "valor", "bomba", "encerrante", "hora", "tanque", "turno", "id_frentista",
]

EMPLOYEE_HEADER = ["nome", "matricula", "cartao_1", "cartao_2", "cartao_3"]


def _br_decimal(value: float) -> str:
    return f"{value:.2f}".replace(".", ",")


def generate_cards(n_cards: int = 12) -> list[str]:
    """Card ids as printed on the station's attendant cards."""
    return [f"{1001 + i}" for i in range(n_cards)]


def generate_refuelings_csv(
    n_rows: int = 200,
    cards: list[str] | None = None,
    start: str = "2024-11-01",
    n_days: int = 30,
    seed: int = 42,
) -> str:
    """Return a refueling export as CSV text.

    Parameters
    ----------
    n_rows : Number of refueling events.
    cards : Card ids to draw from. Defaults to generate_cards().
    start : First calendar day of the export.
    n_days : Number of days spanned.
    seed : RNG seed, so the same arguments give the same text.
    """
    rng = np.random.default_rng(seed)
    cards = cards or generate_cards()
    first_day = pd.Timestamp(start)

    lines = [";".join(REFUELING_HEADER)]
    encerrante = 150_000.0
    for i in range(n_rows):
        day = first_day + pd.Timedelta(days=int(rng.integers(0, n_days)))
        seconds = int(rng.integers(6 * 3600, 23 * 3600))
        fuel, price = _FUELS[int(rng.integers(0, len(_FUELS)))]
        liters = round(float(rng.gamma(shape=4.0, scale=9.0)) + 2.0, 2)
        value = round(liters * price, 2)
        encerrante += liters
        nozzle = _NOZZLES[int(rng.integers(0, len(_NOZZLES)))]

        lines.append(";".join([
            f"{900000 + i}",
            day.strftime("%d/%m/%Y"),
            nozzle,
            fuel,
            _br_decimal(liters),
            _br_decimal(price),
            _br_decimal(value),
            nozzle[1:],
            _br_decimal(encerrante),
            f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}",
            f"T{int(rng.integers(1, 5))}",
            _SHIFTS[0 if seconds < 12 * 3600 else 1 if seconds < 18 * 3600 else 2],
            cards[int(rng.integers(0, len(cards)))],
        ]))

    return "\n".join(lines) + "\n"


def generate_employees_csv(
    cards: list[str] | None = None,
    unassigned: int = 2,
    seed: int = 42,
) -> str:
    """Return an employee directory export as CSV text.

    Some employees hold two cards. The last `unassigned` cards are left out
    of the directory so the dashboard shows them under their raw id.
    """
    rng = np.random.default_rng(seed)
    cards = list(cards or generate_cards())
    assignable = cards[:max(len(cards) - unassigned, 0)]

    lines = [";".join(EMPLOYEE_HEADER)]
    position = 0
    employee = 0
    while position < len(assignable):
        n_cards = 2 if rng.random() < 0.3 else 1
        held = assignable[position:position + n_cards]
        position += len(held)
        name = _NAMES[employee % len(_NAMES)]
        held = held + [""] * (3 - len(held))
        lines.append(";".join([name, f"{5000 + employee}", *held]))
        employee += 1

    return "\n".join(lines) + "\n"
