"""
Integration tests for the TrialBalancePipeline.
"""

from __future__ import annotations

import pytest

from ledger_mapper.pipeline import TrialBalancePipeline
from ledger_mapper.schema import AccountMapping, ConfidenceTier
from ledger_mapper.validator import SUM_TO_ZERO_ERROR

ROWS = [
    {"date": "2024-12-31", "accountNumber": "1001", "accountDescription": "Cash and Cash Equivalents",
     "debit": 500000, "credit": 0, "balance": 500000},
    {"date": "2024-12-31", "accountNumber": "1200", "accountDescription": "Trade Receivables",
     "debit": 300000, "credit": 0, "balance": 300000},
    {"date": "2024-12-31", "accountNumber": "3001", "accountDescription": "Trade Payables",
     "debit": 0, "credit": 150000, "balance": -150000},
    {"date": "2024-12-31", "accountNumber": "4001", "accountDescription": "Long-term Debt",
     "debit": 0, "credit": 650000, "balance": -650000},
]


@pytest.fixture
def pipeline() -> TrialBalancePipeline:
    return TrialBalancePipeline()


class TestRun:
    def test_balanced_ledger(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run_dicts(ROWS)
        assert out.success
        assert out.validation.summary.total_debits == 800000
        assert [m.detailed_category for m in out.mappings] == [
            "Cash and Cash Equivalents",
            "Trade Receivables (net)",
            "Trade Payables",
            "Borrowings and Other Financial Liabilities (non-current)",
        ]

    def test_confidence_and_stats(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run_dicts(ROWS)
        assert out.confidence["1001"] is ConfidenceTier.HIGH
        assert out.confidence["3001"] is ConfidenceTier.HIGH
        assert out.confidence["1200"] is ConfidenceTier.MEDIUM
        assert out.stats.total == 4
        assert out.stats.high == 2
        assert out.stats.review_needed == 0

    def test_unbalanced_ledger(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run_dicts(ROWS[:-1])
        assert not out.success
        assert out.validation.errors == [SUM_TO_ZERO_ERROR]
        assert len(out.mappings) == 3

    def test_existing_mappings_kept(self, pipeline: TrialBalancePipeline) -> None:
        existing = [AccountMapping("1001", "Cash and Cash Equivalents",
                                   detailed_category="Other Receivables")]
        out = pipeline.run_dicts(ROWS, mappings=existing)
        assert out.mappings[0].detailed_category == "Other Receivables"
        assert [m.account_number for m in out.mappings] == ["1001", "1200", "3001", "4001"]
        assert out.mappings[2].detailed_category == "Trade Payables"

    def test_without_classification(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run(
            [], mappings=[AccountMapping("1001", "Cash")], auto_classify=False
        )
        assert out.mappings[0].detailed_category == ""
        assert out.confidence["1001"] is ConfidenceTier.LOW

    def test_to_dict(self, pipeline: TrialBalancePipeline) -> None:
        d = pipeline.run_dicts(ROWS).to_dict()
        assert d["success"] is True
        assert d["validation"]["isValid"] is True
        assert d["mappings"][0]["confidence"] == "high"
        assert d["mappings"][0]["accountNumber"] == "1001"
        assert d["stats"]["total"] == 4


class TestStore:
    def test_store_shares_collaborators(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run_dicts(ROWS)
        store = pipeline.new_store(out.mappings)
        store.bulk_approve_high_confidence()
        assert store.get("1001").high_level_category == "Assets"
        assert store.get("1200").high_level_category == ""
        store.bulk_reset()
        store.bulk_auto_map()
        assert list(store.snapshot) == pipeline.run_dicts(ROWS).mappings

    def test_validate_only(self, pipeline: TrialBalancePipeline) -> None:
        out = pipeline.run_dicts(ROWS)
        assert out.validation.is_valid
        assert not pipeline.validate([]).errors
