#!/usr/bin/env python3
"""
Example: Trial Balance Mapping Demo.

Validates a sample trial balance, auto-maps its accounts, walks through a
few manual edits and bulk actions, and prints the auditable output.

Run from the project root:
    python -m ledger_mapper.examples.run_example
or:
    python ledger_mapper/examples/run_example.py
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path when run as a script
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from ledger_mapper.config import ClassifierConfig, EngineConfig
from ledger_mapper.pipeline import TrialBalancePipeline
from ledger_mapper.review import aggregate_balances, review_queue
from ledger_mapper.schema import LedgerRecord, MappingField


# Sends "Cost of Sales" / "Cost of Goods Sold" to Cost of Sales instead of
# Revenues / G&A
REFINED_RULES = Path(__file__).resolve().parent / "refined_rules.json"

SAMPLE_TRIAL_BALANCE = [
    {"date": "2024-12-31", "accountNumber": "1001", "accountDescription": "Cash and Cash Equivalents", "debit": 500000, "credit": 0, "balance": 500000},
    {"date": "2024-12-31", "accountNumber": "1200", "accountDescription": "Trade Receivables", "debit": 300000, "credit": 0, "balance": 300000},
    {"date": "2024-12-31", "accountNumber": "1500", "accountDescription": "Inventory", "debit": 200000, "credit": 0, "balance": 200000},
    {"date": "2024-12-31", "accountNumber": "2001", "accountDescription": "Property, Plant & Equipment", "debit": 1000000, "credit": 0, "balance": 1000000},
    {"date": "2024-12-31", "accountNumber": "3001", "accountDescription": "Trade Payables", "debit": 0, "credit": 150000, "balance": -150000},
    {"date": "2024-12-31", "accountNumber": "4001", "accountDescription": "Long-term Debt", "debit": 0, "credit": 650000, "balance": -650000},
    {"date": "2024-12-31", "accountNumber": "5001", "accountDescription": "Share Capital", "debit": 0, "credit": 1000000, "balance": -1000000},
    {"date": "2024-12-31", "accountNumber": "5002", "accountDescription": "Retained Earnings", "debit": 0, "credit": 200000, "balance": -200000},
    {"date": "2024-12-31", "accountNumber": "6001", "accountDescription": "Revenue", "debit": 0, "credit": 1000000, "balance": -1000000},
    {"date": "2024-12-31", "accountNumber": "7001", "accountDescription": "Cost of Goods Sold", "debit": 600000, "credit": 0, "balance": 600000},
    {"date": "2024-12-31", "accountNumber": "8001", "accountDescription": "Operating Expenses", "debit": 250000, "credit": 0, "balance": 250000},
    {"date": "2024-12-31", "accountNumber": "9001", "accountDescription": "Suspense Clearing", "debit": 150000, "credit": 0, "balance": 150000},
]


# ======================================================================
# Helper
# ======================================================================

def print_section(title: str) -> None:
    width = 72
    print("\n" + "=" * width)
    print(f"  {title}")
    print("=" * width)


# ======================================================================
# Demo 1 — Validate and auto-map
# ======================================================================

def demo_pipeline(pipeline: TrialBalancePipeline):  # noqa: ANN201
    print_section("DEMO 1 — Validate + Auto-map")

    output = pipeline.run_dicts(SAMPLE_TRIAL_BALANCE)
    print(json.dumps(output.to_dict(), indent=2, ensure_ascii=False))
    print(f"\n  Valid trial balance : {output.validation.is_valid}")
    print(f"  Needs review        : {output.stats.review_needed}")
    return output


# ======================================================================
# Demo 2 — Manual edits and bulk actions
# ======================================================================

def demo_store(pipeline: TrialBalancePipeline, output) -> None:  # noqa: ANN001
    print_section("DEMO 2 — Manual Edits & Bulk Actions")

    store = pipeline.new_store(output.mappings)

    # Drag "Suspense Clearing" onto Other Receivables
    store.reassign_detailed("9001", "Other Receivables")
    # Pick a sub-category by hand for the debt account
    store.set_field("4001", MappingField.HIGH_LEVEL_CATEGORY, "Liabilities")
    store.set_field("4001", MappingField.SUB_CATEGORY, "Non-current Liabilities")
    store.set_field("4001", MappingField.DETAILED_CATEGORY,
                    "Borrowings and Other Financial Liabilities (non-current)")
    snapshot = store.bulk_approve_high_confidence()

    for m in snapshot:
        tier = pipeline.scorer.score(m).value
        print(f"  {m.account_number}  {m.account_description:30s} "
              f"{m.high_level_category or '-':12s} {m.detailed_category:45s} [{tier}]")

    print("\n  Still in review queue:")
    for m in review_queue(snapshot, pipeline.scorer):
        print(f"    {m.account_number}  {m.account_description}")


# ======================================================================
# Demo 3 — Roll-up by high level
# ======================================================================

def demo_rollup(output) -> None:  # noqa: ANN001
    print_section("DEMO 3 — Balances by High-level Category")

    records = [LedgerRecord.from_dict(r) for r in SAMPLE_TRIAL_BALANCE]
    totals = aggregate_balances(records, output.mappings, MappingField.HIGH_LEVEL_CATEGORY)
    for category, amount in totals.items():
        print(f"    {category or '(unmapped)':20s} = {amount:>15,.2f}")


# ======================================================================
# Main
# ======================================================================

def main() -> None:
    config = EngineConfig(
        classifier=ClassifierConfig(
            enable_fuzzy_fallback=True,
            custom_rules_path=REFINED_RULES,
        ),
        log_level=logging.WARNING,  # Quieter for demo output
    )

    pipeline = TrialBalancePipeline(config)

    output = demo_pipeline(pipeline)
    demo_store(pipeline, output)
    demo_rollup(output)

    print("\n" + "=" * 72)
    print("  All demos complete.")
    print("=" * 72)


if __name__ == "__main__":
    main()
