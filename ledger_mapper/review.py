"""
Review helpers.

Read-only views over a mapping snapshot that drive human review: which
accounts still need attention, how far the mapping has progressed, the
filter panel semantics, and balance roll-ups per category.  Confidence is
recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from ledger_mapper.confidence import ConfidenceScorer
from ledger_mapper.schema import AccountMapping, ConfidenceTier, LedgerRecord, MappingField
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

MAPPED = "mapped"
UNMAPPED = "unmapped"


@dataclass(frozen=True)
class MappingStats:
    total: int
    mapped: int
    unmapped: int
    high: int
    medium: int
    low: int
    review_needed: int
    completed: int
    progress_percent: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "mapped": self.mapped,
            "unmapped": self.unmapped,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "review_needed": self.review_needed,
            "completed": self.completed,
            "progress_percent": self.progress_percent,
        }


def review_queue(
    mappings: Iterable[AccountMapping],
    scorer: Optional[ConfidenceScorer] = None,
    show_all: bool = False,
) -> List[AccountMapping]:
    """Accounts that need a human: low confidence or no detailed category."""
    scorer = scorer or ConfidenceScorer()
    if show_all:
        return list(mappings)
    return [
        m for m in mappings
        if not m.detailed_category or scorer.score(m) is ConfidenceTier.LOW
    ]


def mapping_stats(
    mappings: Sequence[AccountMapping],
    scorer: Optional[ConfidenceScorer] = None,
) -> MappingStats:
    scorer = scorer or ConfidenceScorer()
    tiers = [scorer.score(m) for m in mappings]
    total = len(mappings)
    mapped = sum(1 for m in mappings if m.detailed_category)
    low = tiers.count(ConfidenceTier.LOW)
    with_high_level = sum(1 for m in mappings if m.high_level_category)
    return MappingStats(
        total=total,
        mapped=mapped,
        unmapped=total - mapped,
        high=tiers.count(ConfidenceTier.HIGH),
        medium=tiers.count(ConfidenceTier.MEDIUM),
        low=low,
        review_needed=low,
        completed=sum(
            1 for m, t in zip(mappings, tiers)
            if m.detailed_category and t is not ConfidenceTier.LOW
        ),
        progress_percent=round(with_high_level * 100 / total) if total else 0,
    )


def filter_mappings(
    mappings: Iterable[AccountMapping],
    search: str = "",
    confidence_levels: Iterable[ConfidenceTier] = (),
    status: Iterable[str] = (),
    categories: Iterable[str] = (),
    scorer: Optional[ConfidenceScorer] = None,
) -> List[AccountMapping]:
    """Apply every non-empty criterion (AND across criteria, OR within one).

    Parameters
    ----------
    search:
        Case-insensitive substring of account number, description or
        detailed category.
    confidence_levels:
        Keep mappings scoring one of these tiers.
    status:
        ``"mapped"`` and/or ``"unmapped"`` (by detailed category).
    categories:
        Keep mappings whose detailed category is listed.
    """
    scorer = scorer or ConfidenceScorer()
    needle = search.strip().lower()
    levels = {ConfidenceTier(t) for t in confidence_levels}
    statuses = set(status)
    wanted = set(categories)

    out: List[AccountMapping] = []
    for m in mappings:
        if needle and not any(
            needle in s.lower()
            for s in (m.account_number, m.account_description, m.detailed_category)
        ):
            continue
        if levels and scorer.score(m) not in levels:
            continue
        if statuses and (MAPPED if m.detailed_category else UNMAPPED) not in statuses:
            continue
        if wanted and m.detailed_category not in wanted:
            continue
        out.append(m)
    return out


def aggregate_balances(
    records: Iterable[LedgerRecord],
    mappings: Iterable[AccountMapping],
    level: MappingField = MappingField.HIGH_LEVEL_CATEGORY,
    period: Optional[str] = None,
    taxonomy: Optional[Taxonomy] = None,
) -> Dict[str, Decimal]:
    """Sum ledger balances per category at *level*.

    Missing ancestors are derived from the detailed category through the
    taxonomy.  Accounts with nothing to roll up to land under ``""``.
    """
    taxonomy = taxonomy or get_taxonomy()
    keys: Dict[str, str] = {}
    for m in mappings:
        detailed = m.detailed_category
        if level is MappingField.DETAILED_CATEGORY:
            key = detailed
        elif level is MappingField.SUB_CATEGORY:
            key = m.sub_category or taxonomy.group_of(detailed, m.high_level_category)
        else:
            key = m.high_level_category or taxonomy.high_level_of(detailed)
        keys[m.account_number] = key

    totals: Dict[str, Decimal] = {}
    for r in records:
        if period is not None and r.period != period:
            continue
        key = keys.get(r.account_number, "")
        totals[key] = totals.get(key, Decimal("0")) + r.balance
    return totals
