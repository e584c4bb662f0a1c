"""
Confidence Scorer.

Grades how trustworthy an account's current placement looks, so that human
review can start with the worst ones.  The tier is a derived view: it is
recomputed from the mapping on every call and never stored.

Rules, evaluated in order:

1. No detailed category (or one the taxonomy does not know) → ``low``
2. Description agrees with the category's group → ``high``
3. Description contradicts the category's group → ``low``
4. Otherwise → ``medium``
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from ledger_mapper.logging_setup import get_logger
from ledger_mapper.normalizer import DescriptionNormalizer
from ledger_mapper.schema import AccountMapping, ConfidenceTier
from ledger_mapper.taxonomy import SubCategory as S
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

logger = get_logger("confidence")

_LIABILITY_GROUPS = frozenset({S.CURRENT_LIABILITIES.value, S.NON_CURRENT_LIABILITIES.value})

# (description keyword, groups the category must fall in)
AGREEMENT_SIGNALS: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("cash", frozenset({S.CURRENT_ASSETS.value})),
    ("revenue", frozenset({S.REVENUE_AND_INCOME.value})),
    ("payable", _LIABILITY_GROUPS),
)

CONTRADICTION_SIGNALS: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("equipment", frozenset({S.CURRENT_ASSETS.value, S.CURRENT_LIABILITIES.value})),
    ("revenue", frozenset({S.COSTS_AND_EXPENSES.value})),
)


class ConfidenceScorer:
    """Scores ``AccountMapping`` objects into ``ConfidenceTier`` values."""

    def __init__(
        self,
        taxonomy: Optional[Taxonomy] = None,
        normalizer: Optional[DescriptionNormalizer] = None,
    ) -> None:
        self._taxonomy = taxonomy or get_taxonomy()
        self._normalizer = normalizer or DescriptionNormalizer()

    def score(self, mapping: AccountMapping) -> ConfidenceTier:
        groups = frozenset(self._taxonomy.groups_of(mapping.detailed_category))
        if not groups:
            return ConfidenceTier.LOW

        text = self._normalizer.normalize_description(mapping.account_description)

        if _fires(AGREEMENT_SIGNALS, text, groups):
            return ConfidenceTier.HIGH
        if _fires(CONTRADICTION_SIGNALS, text, groups):
            logger.debug(
                "Contradiction for %s: %r vs %r",
                mapping.account_number,
                mapping.account_description,
                mapping.detailed_category,
            )
            return ConfidenceTier.LOW
        return ConfidenceTier.MEDIUM

    def score_all(self, mappings: Iterable[AccountMapping]) -> Dict[str, ConfidenceTier]:
        """Return ``{account_number: tier}``."""
        return {m.account_number: self.score(m) for m in mappings}


def _fires(
    signals: Tuple[Tuple[str, FrozenSet[str]], ...],
    text: str,
    groups: FrozenSet[str],
) -> bool:
    return any(kw in text and groups & targets for kw, targets in signals)
