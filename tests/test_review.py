"""
Unit tests for the review helpers.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_mapper.review import aggregate_balances, filter_mappings, mapping_stats, review_queue
from ledger_mapper.schema import AccountMapping, ConfidenceTier, LedgerRecord, MappingField

CASH = AccountMapping("1001", "Cash at bank", "Assets", "", "Cash and Cash Equivalents")
STOCK = AccountMapping("1500", "Inventory", "", "", "Inventories")
MISMATCH = AccountMapping("6001", "Revenue", "", "", "Cost of Sales")
SUSPENSE = AccountMapping("9001", "Suspense Clearing")


@pytest.fixture
def mappings() -> list:
    return [CASH, STOCK, MISMATCH, SUSPENSE]


class TestReviewQueue:
    def test_low_and_unclassified(self, mappings: list) -> None:
        assert review_queue(mappings) == [MISMATCH, SUSPENSE]

    def test_show_all(self, mappings: list) -> None:
        assert review_queue(mappings, show_all=True) == mappings


class TestMappingStats:
    def test_counts(self, mappings: list) -> None:
        stats = mapping_stats(mappings)
        assert stats.total == 4
        assert stats.mapped == 3
        assert stats.unmapped == 1
        assert (stats.high, stats.medium, stats.low) == (1, 1, 2)
        assert stats.review_needed == 2
        assert stats.completed == 2
        assert stats.progress_percent == 25

    def test_empty(self) -> None:
        stats = mapping_stats([])
        assert stats.total == 0
        assert stats.progress_percent == 0

    def test_to_dict(self, mappings: list) -> None:
        assert mapping_stats(mappings).to_dict()["review_needed"] == 2


class TestFilterMappings:
    def test_no_criteria(self, mappings: list) -> None:
        assert filter_mappings(mappings) == mappings

    def test_search_description(self, mappings: list) -> None:
        assert filter_mappings(mappings, search="CASH") == [CASH]

    def test_search_number(self, mappings: list) -> None:
        assert filter_mappings(mappings, search="1500") == [STOCK]

    def test_search_detailed_category(self, mappings: list) -> None:
        assert filter_mappings(mappings, search="cost of") == [MISMATCH]

    def test_confidence(self, mappings: list) -> None:
        assert filter_mappings(mappings, confidence_levels=[ConfidenceTier.LOW]) == [
            MISMATCH, SUSPENSE,
        ]
        assert filter_mappings(mappings, confidence_levels=["high"]) == [CASH]

    def test_status(self, mappings: list) -> None:
        assert filter_mappings(mappings, status=["unmapped"]) == [SUSPENSE]
        assert len(filter_mappings(mappings, status=["mapped", "unmapped"])) == 4

    def test_categories(self, mappings: list) -> None:
        assert filter_mappings(mappings, categories=["Inventories"]) == [STOCK]

    def test_criteria_combine(self, mappings: list) -> None:
        assert filter_mappings(
            mappings, search="e", confidence_levels=["low"], status=["mapped"]
        ) == [MISMATCH]


class TestAggregateBalances:
    @pytest.fixture
    def records(self) -> list:
        return [
            LedgerRecord("2024", "1001", "Cash at bank", balance=Decimal("500")),
            LedgerRecord("2024", "1500", "Inventory", balance=Decimal("200")),
            LedgerRecord("2024", "6001", "Revenue", balance=Decimal("-700")),
            LedgerRecord("2023", "1001", "Cash at bank", balance=Decimal("50")),
            LedgerRecord("2023", "9001", "Suspense Clearing", balance=Decimal("-50")),
        ]

    def test_high_level(self, records: list, mappings: list) -> None:
        totals = aggregate_balances(records, mappings)
        assert totals == {
            "Assets": Decimal("750"),
            "Expenses": Decimal("-700"),
            "": Decimal("-50"),
        }

    def test_sub_category(self, records: list, mappings: list) -> None:
        totals = aggregate_balances(records, mappings, MappingField.SUB_CATEGORY, period="2024")
        assert totals == {
            "Current Assets": Decimal("700"),
            "Costs & Expenses": Decimal("-700"),
        }

    def test_detailed(self, records: list, mappings: list) -> None:
        totals = aggregate_balances(records, mappings, MappingField.DETAILED_CATEGORY, period="2023")
        assert totals == {
            "Cash and Cash Equivalents": Decimal("50"),
            "": Decimal("-50"),
        }
