"""
Unit tests for the bulk operations.
"""

from __future__ import annotations

import pytest

from ledger_mapper.bulk import approve_high_confidence, auto_map, reset_all
from ledger_mapper.classifier import RuleClassifier
from ledger_mapper.mapping_store import derive_mappings
from ledger_mapper.schema import AccountMapping, LedgerRecord


@pytest.fixture
def classifier() -> RuleClassifier:
    return RuleClassifier()


@pytest.fixture
def fresh() -> list:
    return derive_mappings([
        LedgerRecord("2024", "1001", "Cash at bank"),
        LedgerRecord("2024", "1500", "Inventory"),
        LedgerRecord("2024", "3001", "Trade Payables"),
        LedgerRecord("2024", "6001", "Revenue"),
        LedgerRecord("2024", "9001", "Suspense Clearing"),
    ])


# ======================================================================
# Auto-map
# ======================================================================

class TestAutoMap:
    def test_fills_detailed_only(self, fresh: list, classifier: RuleClassifier) -> None:
        out = auto_map(fresh, classifier)
        assert [m.detailed_category for m in out] == [
            "Cash and Cash Equivalents",
            "Inventories",
            "Trade Payables",
            "Revenues",
            "Cash and Cash Equivalents",
        ]
        assert all(m.high_level_category == "" and m.sub_category == "" for m in out)

    def test_keeps_manual_placements(self, classifier: RuleClassifier) -> None:
        manual = AccountMapping("1001", "Cash at bank", "", "", "Goodwill")
        assert auto_map([manual], classifier) == [manual]

    def test_idempotent(self, fresh: list, classifier: RuleClassifier) -> None:
        once = auto_map(fresh, classifier)
        assert auto_map(once, classifier) == once

    def test_reset_then_auto_map_matches_fresh(
        self, fresh: list, classifier: RuleClassifier
    ) -> None:
        edited = auto_map(fresh, classifier)
        edited[0] = AccountMapping("1001", "Cash at bank", "Assets", "Current Assets", "Prepayments")
        assert auto_map(reset_all(edited), classifier) == auto_map(fresh, classifier)

    def test_input_not_mutated(self, fresh: list, classifier: RuleClassifier) -> None:
        auto_map(fresh, classifier)
        assert not any(m.is_mapped for m in fresh)

    def test_default_classifier(self, fresh: list) -> None:
        assert auto_map(fresh)[2].detailed_category == "Trade Payables"


# ======================================================================
# Approve high confidence
# ======================================================================

class TestApproveHighConfidence:
    def test_only_high_without_high_level(self) -> None:
        mappings = [
            AccountMapping("1001", "Cash at bank", detailed_category="Cash and Cash Equivalents"),
            AccountMapping("1500", "Inventory", detailed_category="Inventories"),
            AccountMapping("6001", "Revenue", detailed_category="Cost of Sales"),
            AccountMapping("3001", "Trade Payables", "Liabilities", "", "Trade Payables"),
        ]
        out = approve_high_confidence(mappings)
        assert out[0].high_level_category == "Assets"
        assert out[1] == mappings[1]
        assert out[2] == mappings[2]
        assert out[3] == mappings[3]

    def test_unclassified_untouched(self, fresh: list) -> None:
        assert approve_high_confidence(fresh) == fresh


# ======================================================================
# Reset
# ======================================================================

class TestReset:
    def test_clears_every_level(self) -> None:
        mappings = [
            AccountMapping("1001", "Cash", "Assets", "Current Assets", "Cash and Cash Equivalents"),
        ]
        out = reset_all(mappings)
        assert out == [AccountMapping("1001", "Cash")]
        assert mappings[0].detailed_category == "Cash and Cash Equivalents"

    def test_empty(self) -> None:
        assert reset_all([]) == []
