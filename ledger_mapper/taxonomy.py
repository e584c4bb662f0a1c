"""
Financial Reporting Taxonomy.

The fixed three-level hierarchy that accounts are classified into:

    High-level category  →  Sub-category (statement group)  →  Detailed category

The tree follows the IFRS statement layout (Balance Sheet, Income Statement,
Cash Flow Statement).  Each level is a closed enumeration; the membership
tables are checked once when the ``Taxonomy`` is constructed so that a
broken table fails at import time rather than at lookup time.

Lookups never raise.  Category strings passed through a review UI may be in
a transient unclassified state, so unknown names resolve to ``""`` / ``[]``.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from ledger_mapper.logging_setup import get_logger

logger = get_logger("taxonomy")


# ---------------------------------------------------------------------------
# Closed enumerations, one per level
# ---------------------------------------------------------------------------

class Statement(str, Enum):
    """Financial statements the taxonomy is laid out in."""

    BALANCE_SHEET = "Balance Sheet"
    INCOME_STATEMENT = "Income Statement"
    CASH_FLOW_STATEMENT = "Cash Flow Statement"


class HighLevelCategory(str, Enum):
    """Top level of the hierarchy."""

    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    REVENUES = "Revenues"
    EXPENSES = "Expenses"


class SubCategory(str, Enum):
    """Statement groups.  These double as the sub-category level."""

    NON_CURRENT_ASSETS = "Non-current Assets"
    CURRENT_ASSETS = "Current Assets"
    EQUITY = "Equity"
    NON_CURRENT_LIABILITIES = "Non-current Liabilities"
    CURRENT_LIABILITIES = "Current Liabilities"
    REVENUE_AND_INCOME = "Revenue & Income"
    COSTS_AND_EXPENSES = "Costs & Expenses"
    OPERATING_ACTIVITIES = "Operating Activities"
    INVESTING_ACTIVITIES = "Investing Activities"
    FINANCING_ACTIVITIES = "Financing Activities"


class DetailedCategory(str, Enum):
    """Leaf level.  The ``.value`` is the name shown on the statement."""

    # Non-current assets
    PROPERTY_PLANT_EQUIPMENT = "Property, Plant and Equipment"
    RIGHT_OF_USE_ASSETS = "Right-of-Use Assets"
    INVESTMENT_PROPERTY = "Investment Property"
    INTANGIBLE_ASSETS = "Intangible Assets"
    GOODWILL = "Goodwill"
    INVESTMENTS_IN_ASSOCIATES = "Investments in Associates and Joint Ventures"
    FINANCIAL_ASSETS_NON_CURRENT = "Financial Assets (non-current)"
    CONTRACT_ASSETS = "Contract Assets"
    DEFERRED_TAX_ASSETS = "Deferred Tax Assets"
    OTHER_NON_CURRENT_ASSETS = "Other Non-current Assets"

    # Current assets
    TRADE_RECEIVABLES = "Trade Receivables (net)"
    OTHER_RECEIVABLES = "Other Receivables"
    ACCRUED_INCOME = "Accrued Income"
    INVENTORIES = "Inventories"
    PREPAYMENTS = "Prepayments"
    FINANCIAL_ASSETS_CURRENT = "Financial Assets (current)"
    CURRENT_TAX_ASSETS = "Current Tax Assets"
    CASH_AND_EQUIVALENTS = "Cash and Cash Equivalents"
    ASSETS_HELD_FOR_SALE = "Assets Held for Sale"

    # Equity
    SHARE_CAPITAL = "Share Capital"
    SHARE_PREMIUM = "Share Premium"
    OTHER_RESERVES = "Other Reserves"
    RETAINED_EARNINGS = "Retained Earnings"
    NON_CONTROLLING_INTERESTS = "Non-controlling Interests"
    REVALUATION_RESERVES = "Revaluation Reserves"
    TRANSLATION_RESERVES = "Translation Reserves"
    HEDGING_RESERVES = "Hedging Reserves"
    FVOCI_RESERVES = "Fair Value through OCI Reserves"

    # Non-current liabilities
    LEASE_LIABILITIES_NON_CURRENT = "Lease Liabilities (non-current)"
    PROVISIONS_NON_CURRENT = "Provisions (non-current)"
    CONTRACT_LIABILITIES = "Contract Liabilities"
    BORROWINGS_NON_CURRENT = "Borrowings and Other Financial Liabilities (non-current)"
    DEFERRED_TAX_LIABILITIES = "Deferred Tax Liabilities"
    OTHER_NON_CURRENT_LIABILITIES = "Other Non-current Liabilities"

    # Current liabilities
    BORROWINGS_CURRENT = "Borrowings and Other Financial Liabilities (current)"
    LEASE_LIABILITIES_CURRENT = "Lease Liabilities (current)"
    PROVISIONS_CURRENT = "Provisions (current)"
    TRADE_PAYABLES = "Trade Payables"
    OTHER_PAYABLES = "Other Payables"
    ACCRUED_EXPENSES = "Accrued Expenses"
    CURRENT_TAX_LIABILITIES = "Current Tax Liabilities"
    LIABILITIES_HELD_FOR_SALE = "Liabilities Related to Assets Held for Sale"

    # Revenue & income
    REVENUES = "Revenues"
    OTHER_OPERATING_INCOME = "Other Operating Income"
    INTEREST_INCOME = "Interest Income"

    # Costs & expenses
    COST_OF_SALES = "Cost of Sales"
    SELLING_EXPENSES = "Selling Expenses"
    RESEARCH_AND_DEVELOPMENT = "Research & Development Expenses"
    GENERAL_AND_ADMINISTRATIVE = "General and Administrative Expenses"
    OTHER_OPERATING_EXPENSES = "Other Operating Expenses"
    DEPRECIATION_AND_AMORTIZATION = "Depreciation & Amortization"
    INTEREST_EXPENSE = "Interest Expense"
    INCOME_TAX_EXPENSE = "Income Tax Expense"

    # Operating activities
    NET_INCOME = "Net Income"
    CF_DEPRECIATION = "Depreciation and Amortization"
    WORKING_CAPITAL_CHANGES = "Changes in Working Capital"
    PROVISION_CHANGES = "Provision Changes"
    OTHER_OPERATING_CASH_FLOWS = "Other Operating Cash Flows"

    # Investing activities
    CAPITAL_EXPENDITURES = "Capital Expenditures"
    ACQUISITIONS_AND_DISPOSALS = "Acquisitions and Disposals"
    INVESTMENT_IN_SECURITIES = "Investment in Securities"
    OTHER_INVESTING_CASH_FLOWS = "Other Investing Cash Flows"

    # Financing activities
    PROCEEDS_FROM_BORROWINGS = "Proceeds from Borrowings"
    REPAYMENT_OF_BORROWINGS = "Repayment of Borrowings"
    DIVIDEND_PAYMENTS = "Dividend Payments"
    SHARE_ISSUANCE_REPURCHASE = "Share Issuance/Repurchase"
    OTHER_FINANCING_CASH_FLOWS = "Other Financing Cash Flows"


_D = DetailedCategory
_S = SubCategory
_H = HighLevelCategory


# ---------------------------------------------------------------------------
# Membership tables
# ---------------------------------------------------------------------------
# Order inside each group is the display order on the statement.

_STRUCTURE: Dict[Statement, Dict[SubCategory, Tuple[DetailedCategory, ...]]] = {
    Statement.BALANCE_SHEET: {
        _S.NON_CURRENT_ASSETS: (
            _D.PROPERTY_PLANT_EQUIPMENT,
            _D.RIGHT_OF_USE_ASSETS,
            _D.INVESTMENT_PROPERTY,
            _D.INTANGIBLE_ASSETS,
            _D.GOODWILL,
            _D.INVESTMENTS_IN_ASSOCIATES,
            _D.FINANCIAL_ASSETS_NON_CURRENT,
            _D.CONTRACT_ASSETS,
            _D.DEFERRED_TAX_ASSETS,
            _D.OTHER_NON_CURRENT_ASSETS,
        ),
        _S.CURRENT_ASSETS: (
            _D.TRADE_RECEIVABLES,
            _D.OTHER_RECEIVABLES,
            _D.ACCRUED_INCOME,
            _D.INVENTORIES,
            _D.PREPAYMENTS,
            _D.FINANCIAL_ASSETS_CURRENT,
            _D.CURRENT_TAX_ASSETS,
            _D.CASH_AND_EQUIVALENTS,
            _D.ASSETS_HELD_FOR_SALE,
        ),
        _S.EQUITY: (
            _D.SHARE_CAPITAL,
            _D.SHARE_PREMIUM,
            _D.OTHER_RESERVES,
            _D.RETAINED_EARNINGS,
            _D.NON_CONTROLLING_INTERESTS,
            _D.REVALUATION_RESERVES,
            _D.TRANSLATION_RESERVES,
            _D.HEDGING_RESERVES,
            _D.FVOCI_RESERVES,
        ),
        _S.NON_CURRENT_LIABILITIES: (
            _D.LEASE_LIABILITIES_NON_CURRENT,
            _D.PROVISIONS_NON_CURRENT,
            _D.CONTRACT_LIABILITIES,
            _D.BORROWINGS_NON_CURRENT,
            _D.DEFERRED_TAX_LIABILITIES,
            _D.OTHER_NON_CURRENT_LIABILITIES,
        ),
        _S.CURRENT_LIABILITIES: (
            _D.BORROWINGS_CURRENT,
            _D.LEASE_LIABILITIES_CURRENT,
            _D.PROVISIONS_CURRENT,
            _D.CONTRACT_LIABILITIES,
            _D.TRADE_PAYABLES,
            _D.OTHER_PAYABLES,
            _D.ACCRUED_EXPENSES,
            _D.CURRENT_TAX_LIABILITIES,
            _D.LIABILITIES_HELD_FOR_SALE,
        ),
    },
    Statement.INCOME_STATEMENT: {
        _S.REVENUE_AND_INCOME: (
            _D.REVENUES,
            _D.OTHER_OPERATING_INCOME,
            _D.INTEREST_INCOME,
        ),
        _S.COSTS_AND_EXPENSES: (
            _D.COST_OF_SALES,
            _D.SELLING_EXPENSES,
            _D.RESEARCH_AND_DEVELOPMENT,
            _D.GENERAL_AND_ADMINISTRATIVE,
            _D.OTHER_OPERATING_EXPENSES,
            _D.DEPRECIATION_AND_AMORTIZATION,
            _D.INTEREST_EXPENSE,
            _D.INCOME_TAX_EXPENSE,
        ),
    },
    Statement.CASH_FLOW_STATEMENT: {
        _S.OPERATING_ACTIVITIES: (
            _D.NET_INCOME,
            _D.CF_DEPRECIATION,
            _D.WORKING_CAPITAL_CHANGES,
            _D.PROVISION_CHANGES,
            _D.OTHER_OPERATING_CASH_FLOWS,
        ),
        _S.INVESTING_ACTIVITIES: (
            _D.CAPITAL_EXPENDITURES,
            _D.ACQUISITIONS_AND_DISPOSALS,
            _D.INVESTMENT_IN_SECURITIES,
            _D.OTHER_INVESTING_CASH_FLOWS,
        ),
        _S.FINANCING_ACTIVITIES: (
            _D.PROCEEDS_FROM_BORROWINGS,
            _D.REPAYMENT_OF_BORROWINGS,
            _D.DIVIDEND_PAYMENTS,
            _D.SHARE_ISSUANCE_REPURCHASE,
            _D.OTHER_FINANCING_CASH_FLOWS,
        ),
    },
}

# Cash-flow groups are reporting views over the other accounts and have no
# owning high-level category.
_GROUP_OWNERS: Dict[SubCategory, Optional[HighLevelCategory]] = {
    _S.NON_CURRENT_ASSETS: _H.ASSETS,
    _S.CURRENT_ASSETS: _H.ASSETS,
    _S.EQUITY: _H.EQUITY,
    _S.NON_CURRENT_LIABILITIES: _H.LIABILITIES,
    _S.CURRENT_LIABILITIES: _H.LIABILITIES,
    _S.REVENUE_AND_INCOME: _H.REVENUES,
    _S.COSTS_AND_EXPENSES: _H.EXPENSES,
    _S.OPERATING_ACTIVITIES: None,
    _S.INVESTING_ACTIVITIES: None,
    _S.FINANCING_ACTIVITIES: None,
}


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class Taxonomy:
    """Read-only view over the membership tables with reverse lookups.

    Parameters
    ----------
    structure:
        ``{statement: {group: (detailed, ...)}}``.
    group_owners:
        ``{group: high_level | None}``.

    Raises
    ------
    ValueError
        If the tables are inconsistent: a group without an owner entry, a
        group listed under two statements, a duplicate inside one group, or
        a detailed category reachable from two different high levels.
    """

    def __init__(
        self,
        structure: Dict[Statement, Dict[SubCategory, Tuple[DetailedCategory, ...]]],
        group_owners: Dict[SubCategory, Optional[HighLevelCategory]],
    ) -> None:
        self._structure = structure
        self._group_owners = group_owners

        self._group_members: Dict[str, Tuple[str, ...]] = {}
        self._group_statement: Dict[str, str] = {}
        self._group_high_level: Dict[str, str] = {}
        self._detailed_groups: Dict[str, List[str]] = {}
        self._detailed_owner: Dict[str, str] = {}
        self._high_level_groups: Dict[str, List[str]] = {
            h.value: [] for h in HighLevelCategory
        }

        for statement, groups in structure.items():
            for group, members in groups.items():
                self._add_group(statement, group, members)

        logger.debug(
            "Taxonomy built — groups=%d, detailed=%d",
            len(self._group_members),
            len(self._detailed_groups),
        )

    def _add_group(
        self,
        statement: Statement,
        group: SubCategory,
        members: Tuple[DetailedCategory, ...],
    ) -> None:
        if group not in self._group_owners:
            raise ValueError(f"Group {group.value!r} has no owner entry")
        if group.value in self._group_members:
            raise ValueError(
                f"Group {group.value!r} listed under more than one statement"
            )
        names = tuple(m.value for m in members)
        if len(set(names)) != len(names):
            raise ValueError(f"Group {group.value!r} lists a category twice")

        owner = self._group_owners[group]
        self._group_members[group.value] = names
        self._group_statement[group.value] = statement.value
        self._group_high_level[group.value] = owner.value if owner else ""
        if owner is not None:
            self._high_level_groups[owner.value].append(group.value)

        for name in names:
            self._detailed_groups.setdefault(name, []).append(group.value)
            if owner is None:
                continue
            previous = self._detailed_owner.get(name)
            if previous is not None and previous != owner.value:
                raise ValueError(
                    f"Detailed category {name!r} belongs to both "
                    f"{previous!r} and {owner.value!r}"
                )
            self._detailed_owner[name] = owner.value

    # ------------------------------------------------------------------ #
    # Tree access
    # ------------------------------------------------------------------ #

    def tree(self) -> Dict[str, Dict[str, List[str]]]:
        """Return ``{statement: {group: [detailed, ...]}}`` as plain strings."""
        return {
            statement.value: {
                group.value: [m.value for m in members]
                for group, members in groups.items()
            }
            for statement, groups in self._structure.items()
        }

    def statements(self) -> List[str]:
        return [s.value for s in self._structure]

    def groups_in(self, statement: str) -> List[str]:
        """Groups of one statement, in display order."""
        return [g for g, s in self._group_statement.items() if s == statement]

    def statement_of_group(self, group: str) -> str:
        return self._group_statement.get(group, "")

    def high_levels(self) -> List[str]:
        return [h.value for h in HighLevelCategory]

    def detailed_categories(self) -> List[str]:
        """Every detailed category, each listed once."""
        return list(self._detailed_groups)

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def categories_of(self, group: str) -> List[str]:
        """Ordered detailed categories of *group*; ``[]`` if unknown."""
        return list(self._group_members.get(group, ()))

    def sub_categories_of(self, high_level: str) -> List[str]:
        """Groups owned by *high_level*; ``[]`` if unknown."""
        return list(self._high_level_groups.get(high_level, []))

    def high_level_of(self, detailed: str) -> str:
        """Owning high-level category of *detailed*, or ``""``."""
        return self._detailed_owner.get(detailed, "")

    def high_level_of_group(self, group: str) -> str:
        return self._group_high_level.get(group, "")

    def groups_of(self, detailed: str) -> List[str]:
        """All groups listing *detailed* (``Contract Liabilities`` has two)."""
        return list(self._detailed_groups.get(detailed, []))

    def group_of(self, detailed: str, high_level: str = "") -> str:
        """First group listing *detailed*, optionally restricted to the
        groups of *high_level*.  ``""`` if none qualifies."""
        for group in self._detailed_groups.get(detailed, []):
            if not high_level or self.high_level_of_group(group) == high_level:
                return group
        return ""

    def is_member(self, detailed: str, group: str) -> bool:
        return detailed in self._group_members.get(group, ())

    def is_high_level(self, value: str) -> bool:
        return value in self._high_level_groups

    def is_sub_category(self, value: str) -> bool:
        return value in self._group_members

    def is_detailed(self, value: str) -> bool:
        return value in self._detailed_groups


@lru_cache(maxsize=1)
def get_taxonomy() -> Taxonomy:
    """Process-wide taxonomy instance, built once."""
    return Taxonomy(_STRUCTURE, _GROUP_OWNERS)
