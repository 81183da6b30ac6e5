"""
Abastecimentos — End-to-end analytics pipeline.

Runs the full pipeline from export text to dashboard-ready outputs and
prints smoke-test summaries. Uses the files under data/ when present,
otherwise simulated exports.

Usage:
    python main.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from abastecimentos_dashboard.config import EMPLOYEES_FILE, REFUELINGS_FILE
from abastecimentos_dashboard.dashboard import get_group_summary, get_refueling_overview
from abastecimentos_dashboard.loaders import (
    civil_day_key,
    load_employees,
    load_refuelings,
    normalise_date,
    parse_employees,
    parse_refuelings,
)
from abastecimentos_dashboard.simulator import (
    generate_cards,
    generate_employees_csv,
    generate_refuelings_csv,
)
from abastecimentos_dashboard.state import bulk_delete, empty_state
from abastecimentos_dashboard.transforms import append_refuelings, merge_directory

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full analytics pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  ABASTECIMENTOS — Refueling Dashboard")
    print("  Analytics Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Import source exports
    # ------------------------------------------------------------------
    print("[ 1 ] IMPORTING EXPORTS")
    print("-" * 40)

    state = empty_state()
    owner_id = state["user"]["id"]
    cards = generate_cards()

    if REFUELINGS_FILE.exists():
        new_refuelings = load_refuelings(REFUELINGS_FILE, owner_id=owner_id)
    else:
        logger.info("%s not found, using simulated export", REFUELINGS_FILE.name)
        new_refuelings = parse_refuelings(generate_refuelings_csv(cards=cards), owner_id=owner_id)

    if EMPLOYEES_FILE.exists():
        new_directory = load_employees(EMPLOYEES_FILE)
    else:
        logger.info("%s not found, using simulated export", EMPLOYEES_FILE.name)
        new_directory = parse_employees(generate_employees_csv(cards=cards))

    state = {
        **state,
        "refuelings": append_refuelings(state["refuelings"], new_refuelings),
        "directory": merge_directory(state["directory"], new_directory),
    }

    refuelings = state["refuelings"]
    directory = state["directory"]
    print(f"\nRefuelings: {len(refuelings)} rows imported")
    print(refuelings[["card_id", "timestamp", "raw_time_of_day", "nozzle", "amount", "volume"]]
          .head().to_string(index=False))
    print(f"\nDirectory: {len(directory)} cards")
    print(directory.to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    overview = get_refueling_overview(refuelings, directory)
    stats = overview["global_stats"]
    print(f"\nTotals: {stats['total_count']} refuelings, "
          f"{stats['total_liters']:.2f} L, R$ {stats['total_value']:.2f}")
    print(f"Groups: {overview['total_groups']} across {overview['total_pages']} page(s)")

    summary = get_group_summary(overview["groups"])
    if not summary.empty:
        print(summary.to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Acceptance criteria verification
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    full = get_refueling_overview(refuelings, directory, page_size=max(len(refuelings), 1))
    group_value = sum(g["total_value"] for g in full["groups"])
    group_count = sum(g["count"] for g in full["groups"])
    check1 = abs(group_value - stats["total_value"]) < 1e-6 and group_count == stats["total_count"]
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Group totals match global totals "
          f"({group_count} refuelings, R$ {group_value:.2f})")

    ts, _ = normalise_date("05/12/2024")
    check2 = civil_day_key(ts) == "2024-12-05"
    print(f"  [{'PASS' if check2 else 'FAIL'}] 05/12/2024 parsed as 5 December")

    untouched = bulk_delete(state, "apagar")
    check3 = len(untouched["refuelings"]) == len(refuelings)
    print(f"  [{'PASS' if check3 else 'FAIL'}] Bulk delete ignored without confirmation phrase")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
