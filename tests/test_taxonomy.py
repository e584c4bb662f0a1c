"""
Unit tests for the Taxonomy.
"""

from __future__ import annotations

import pytest

from ledger_mapper.taxonomy import (
    DetailedCategory,
    HighLevelCategory,
    Statement,
    SubCategory,
    Taxonomy,
    get_taxonomy,
)


@pytest.fixture
def taxonomy() -> Taxonomy:
    return get_taxonomy()


# ======================================================================
# Tree access
# ======================================================================

class TestTree:
    def test_three_statements(self, taxonomy: Taxonomy) -> None:
        assert set(taxonomy.tree()) == {
            "Balance Sheet", "Income Statement", "Cash Flow Statement",
        }

    def test_categories_of_keeps_order(self, taxonomy: Taxonomy) -> None:
        cats = taxonomy.categories_of("Revenue & Income")
        assert cats == ["Revenues", "Other Operating Income", "Interest Income"]

    def test_categories_of_unknown_group(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.categories_of("Not A Group") == []

    def test_categories_of_returns_copy(self, taxonomy: Taxonomy) -> None:
        cats = taxonomy.categories_of("Current Assets")
        cats.append("Injected")
        assert "Injected" not in taxonomy.categories_of("Current Assets")

    def test_groups_in_statement(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.groups_in("Income Statement") == [
            "Revenue & Income", "Costs & Expenses",
        ]

    def test_every_enum_member_is_placed(self, taxonomy: Taxonomy) -> None:
        placed = set(taxonomy.detailed_categories())
        assert placed == {d.value for d in DetailedCategory}


# ======================================================================
# Reverse lookups
# ======================================================================

class TestLookups:
    def test_high_level_of_cash(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.high_level_of("Cash and Cash Equivalents") == "Assets"

    def test_high_level_of_payables(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.high_level_of("Trade Payables") == "Liabilities"

    def test_high_level_of_unknown_is_empty(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.high_level_of("Not A Category") == ""
        assert taxonomy.high_level_of("") == ""

    def test_cash_flow_lines_have_no_high_level(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.high_level_of("Net Income") == ""
        assert taxonomy.high_level_of_group("Operating Activities") == ""

    def test_shared_category_lists_both_groups(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.groups_of("Contract Liabilities") == [
            "Non-current Liabilities", "Current Liabilities",
        ]
        assert taxonomy.high_level_of("Contract Liabilities") == "Liabilities"

    def test_group_of_restricted_by_high_level(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.group_of("Goodwill") == "Non-current Assets"
        assert taxonomy.group_of("Goodwill", "Assets") == "Non-current Assets"
        assert taxonomy.group_of("Goodwill", "Liabilities") == ""

    def test_sub_categories_of(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.sub_categories_of("Assets") == [
            "Non-current Assets", "Current Assets",
        ]
        assert taxonomy.sub_categories_of("Unknown") == []

    def test_is_member(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.is_member("Inventories", "Current Assets")
        assert not taxonomy.is_member("Inventories", "Non-current Assets")

    def test_level_predicates(self, taxonomy: Taxonomy) -> None:
        assert taxonomy.is_high_level("Equity")
        assert taxonomy.is_sub_category("Equity")
        assert not taxonomy.is_detailed("Equity")
        assert taxonomy.is_detailed("Share Capital")


# ======================================================================
# Construction-time checks
# ======================================================================

class TestConstruction:
    def test_singleton(self) -> None:
        assert get_taxonomy() is get_taxonomy()

    def test_conflicting_owner_raises(self) -> None:
        structure = {
            Statement.BALANCE_SHEET: {
                SubCategory.CURRENT_ASSETS: (DetailedCategory.CASH_AND_EQUIVALENTS,),
            },
            Statement.INCOME_STATEMENT: {
                SubCategory.REVENUE_AND_INCOME: (DetailedCategory.CASH_AND_EQUIVALENTS,),
            },
        }
        owners = {
            SubCategory.CURRENT_ASSETS: HighLevelCategory.ASSETS,
            SubCategory.REVENUE_AND_INCOME: HighLevelCategory.REVENUES,
        }
        with pytest.raises(ValueError, match="belongs to both"):
            Taxonomy(structure, owners)

    def test_missing_owner_raises(self) -> None:
        structure = {
            Statement.BALANCE_SHEET: {
                SubCategory.CURRENT_ASSETS: (DetailedCategory.INVENTORIES,),
            },
        }
        with pytest.raises(ValueError, match="no owner"):
            Taxonomy(structure, {})

    def test_duplicate_in_group_raises(self) -> None:
        structure = {
            Statement.BALANCE_SHEET: {
                SubCategory.CURRENT_ASSETS: (
                    DetailedCategory.INVENTORIES,
                    DetailedCategory.INVENTORIES,
                ),
            },
        }
        owners = {SubCategory.CURRENT_ASSETS: HighLevelCategory.ASSETS}
        with pytest.raises(ValueError, match="twice"):
            Taxonomy(structure, owners)
