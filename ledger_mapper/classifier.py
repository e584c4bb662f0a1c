"""
Heuristic Account Classifier.

Proposes a detailed category for an account from its free-text description.

The classifier is an **ordered** list of case-insensitive substring rules.
The first rule whose keyword appears in the description wins; order encodes
priority because keywords overlap ("cash"/"bank" before the generic
"expense"/"cost", "accrued income" before the generic "income").

Matching layers, in order:

1. Custom rules registered at runtime (``add_rule`` / ``load_custom_rules``)
2. Built-in rules
3. (optional) Fuzzy match against category names, see ``fuzzy_matcher``
4. Fixed fallback category

The result is always a detailed category with a non-empty high level, so
downstream hierarchy derivation never dead-ends.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ledger_mapper.config import ClassifierConfig
from ledger_mapper.fuzzy_matcher import FuzzyMatcher
from ledger_mapper.logging_setup import get_logger
from ledger_mapper.normalizer import DescriptionNormalizer
from ledger_mapper.schema import ClassificationResult
from ledger_mapper.taxonomy import DetailedCategory as D
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

logger = get_logger("classifier")


@dataclass(frozen=True)
class ClassificationRule:
    """Fires when any keyword is a substring of the description and no
    exclusion is."""

    keywords: Tuple[str, ...]
    category: str
    excludes: Tuple[str, ...] = ()

    def match(self, normalised: str) -> Optional[str]:
        """Return the keyword that fired, or ``None``."""
        if any(ex in normalised for ex in self.excludes):
            return None
        for kw in self.keywords:
            if kw in normalised:
                return kw
        return None


def _rule(keywords: Sequence[str], category: D, excludes: Sequence[str] = ()) -> ClassificationRule:
    return ClassificationRule(tuple(keywords), category.value, tuple(excludes))


# ---------------------------------------------------------------------------
# Built-in rules — ORDER MATTERS
# ---------------------------------------------------------------------------

BUILTIN_RULES: Tuple[ClassificationRule, ...] = (
    # Cash and equivalents
    _rule(("cash", "bank"), D.CASH_AND_EQUIVALENTS),

    # Receivables
    _rule(("receivable", "debtor"), D.TRADE_RECEIVABLES),
    _rule(("accrued income",), D.ACCRUED_INCOME),

    # Inventory
    _rule(("inventory", "stock"), D.INVENTORIES),

    # Property and equipment
    _rule(("property", "plant", "equipment", "machinery"), D.PROPERTY_PLANT_EQUIPMENT),
    _rule(("right-of-use", "lease asset"), D.RIGHT_OF_USE_ASSETS),
    _rule(("intangible", "software", "patent"), D.INTANGIBLE_ASSETS),
    _rule(("goodwill",), D.GOODWILL),

    # Payables
    _rule(("payable", "creditor"), D.TRADE_PAYABLES),
    _rule(("accrued expense", "accrual"), D.ACCRUED_EXPENSES),

    # Borrowings and liabilities
    _rule(("debt", "loan", "borrowing"), D.BORROWINGS_NON_CURRENT),
    _rule(("lease liability",), D.LEASE_LIABILITIES_NON_CURRENT),

    # Equity
    _rule(("share capital", "capital stock"), D.SHARE_CAPITAL),
    _rule(("retained earnings", "accumulated"), D.RETAINED_EARNINGS),
    _rule(("reserve",), D.OTHER_RESERVES),

    # Revenue and income.  "Cost of Sales" lands here; refine with a custom rule.
    _rule(("revenue", "sales"), D.REVENUES),
    _rule(("income",), D.REVENUES, excludes=("expense",)),

    # Expenses
    _rule(("cost of sales", "cogs"), D.COST_OF_SALES),
    _rule(("depreciation", "amortization"), D.DEPRECIATION_AND_AMORTIZATION),
    _rule(("interest expense",), D.INTEREST_EXPENSE),
    _rule(("tax expense", "income tax"), D.INCOME_TAX_EXPENSE),
    _rule(("expense", "cost"), D.GENERAL_AND_ADMINISTRATIVE),
)


class RuleClassifier:
    """Ordered first-match classifier over account descriptions.

    Parameters
    ----------
    config:
        Fallback category, fuzzy layer switch, optional custom rule file.
    taxonomy:
        Used to validate rule targets.  Defaults to the process-wide one.
    normalizer:
        Shared ``DescriptionNormalizer``; a fresh one is built if omitted.

    Raises
    ------
    ValueError
        If the fallback category (or any custom rule target) is not a
        detailed category with a high level.
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        taxonomy: Optional[Taxonomy] = None,
        normalizer: Optional[DescriptionNormalizer] = None,
    ) -> None:
        self._config = config or ClassifierConfig()
        self._taxonomy = taxonomy or get_taxonomy()
        self._normalizer = normalizer or DescriptionNormalizer()
        self._custom_rules: List[ClassificationRule] = []

        self._check_target(self._config.fallback_category)
        self._fallback = self._config.fallback_category

        self._fuzzy: Optional[FuzzyMatcher] = None
        if self._config.enable_fuzzy_fallback:
            self._fuzzy = FuzzyMatcher(
                threshold=self._config.fuzzy_threshold,
                taxonomy=self._taxonomy,
            )

        if self._config.custom_rules_path:
            self.load_custom_rules(self._config.custom_rules_path)

    # ------------------------------------------------------------------ #
    # Classification
    # ------------------------------------------------------------------ #

    def classify(self, description: str) -> str:
        """Return the proposed detailed category for *description*."""
        return self.classify_detailed(description).detailed_category

    def classify_detailed(self, description: str) -> ClassificationResult:
        """Like ``classify`` but keeps which layer and keyword decided."""
        text = self._normalizer.normalize_description(description)

        for method, rules in (("custom", self._custom_rules), ("rule", BUILTIN_RULES)):
            for rule in rules:
                keyword = rule.match(text)
                if keyword is not None:
                    logger.info(
                        "CLASSIFIED: %r → '%s' [%s: %r]",
                        description,
                        rule.category,
                        method,
                        keyword,
                    )
                    return ClassificationResult(
                        description=description,
                        detailed_category=rule.category,
                        method=method,
                        matched_keyword=keyword,
                    )

        if self._fuzzy is not None:
            candidate = self._fuzzy.match(text)
            if candidate is not None:
                return ClassificationResult(
                    description=description,
                    detailed_category=candidate.detailed_category,
                    method="fuzzy",
                    score=candidate.score,
                )

        logger.warning(
            "UNCLASSIFIED: %r — using fallback '%s'", description, self._fallback
        )
        return ClassificationResult(
            description=description,
            detailed_category=self._fallback,
            method="fallback",
            score=0.0,
        )

    def classify_batch(self, descriptions: Iterable[str]) -> dict[str, str]:
        """Classify several descriptions.  Returns ``{description: category}``."""
        return {d: self.classify(d) for d in descriptions}

    # ------------------------------------------------------------------ #
    # Extension API
    # ------------------------------------------------------------------ #

    def add_rule(
        self,
        keywords: Sequence[str],
        category: str,
        excludes: Sequence[str] = (),
    ) -> None:
        """Register a rule evaluated before every built-in rule.

        Custom rules keep their registration order among themselves.

        Raises
        ------
        ValueError
            If ``category`` is unknown or has no high level, or if no
            keyword is given.
        """
        self._check_target(category)
        normalised = tuple(
            k for k in (self._normalizer.normalize_description(kw) for kw in keywords) if k
        )
        if not normalised:
            raise ValueError(f"Rule for {category!r} has no usable keywords")
        excl = tuple(
            e for e in (self._normalizer.normalize_description(x) for x in excludes) if e
        )
        self._custom_rules.append(ClassificationRule(normalised, category, excl))
        logger.debug("Added rule: %r → %r (excludes=%r)", normalised, category, excl)

    def load_custom_rules(self, path: Path) -> int:
        """Load rules from a JSON file.

        Expected shape::

            [{"keywords": ["petty cash"], "category": "Cash and Cash Equivalents",
              "exclude": []}, ...]

        Returns the number of rules added.
        """
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f"Rule file {path} must contain a JSON array")
        for item in data:
            self.add_rule(
                item.get("keywords", []),
                item.get("category", ""),
                item.get("exclude", []),
            )
        logger.info("Loaded %d custom rules from %s", len(data), path)
        return len(data)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def rules(self) -> Tuple[ClassificationRule, ...]:
        """Effective rule order: custom rules first, then built-ins."""
        return tuple(self._custom_rules) + BUILTIN_RULES

    @property
    def fallback_category(self) -> str:
        return self._fallback

    def _check_target(self, category: str) -> None:
        if not self._taxonomy.high_level_of(category):
            raise ValueError(
                f"Unknown target category {category!r}. Must be a balance "
                f"sheet or income statement detailed category."
            )
