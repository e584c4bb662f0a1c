"""
Bulk Operations.

Batch actions over a whole mapping snapshot.  Each function is total, never
mutates its input, and returns the complete updated list, so a caller
either sees the whole batch applied or none of it.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from ledger_mapper.classifier import RuleClassifier
from ledger_mapper.confidence import ConfidenceScorer
from ledger_mapper.logging_setup import audit, get_logger
from ledger_mapper.schema import AccountMapping, ConfidenceTier
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

logger = get_logger("bulk")


def auto_map(
    mappings: Sequence[AccountMapping],
    classifier: Optional[RuleClassifier] = None,
) -> List[AccountMapping]:
    """Classify every account that has no detailed category yet.

    Already-classified accounts are left untouched, which makes the
    operation idempotent.
    """
    classifier = classifier or RuleClassifier()
    out: List[AccountMapping] = []
    changed = 0
    for m in mappings:
        if not m.detailed_category:
            m = replace(m, detailed_category=classifier.classify(m.account_description))
            changed += 1
        out.append(m)
    logger.info("Auto-map: classified %d of %d accounts", changed, len(out))
    if changed:
        audit("auto_map", classified=changed, total=len(out))
    return out


def approve_high_confidence(
    mappings: Sequence[AccountMapping],
    scorer: Optional[ConfidenceScorer] = None,
    taxonomy: Optional[Taxonomy] = None,
) -> List[AccountMapping]:
    """Back-fill the high level of every high-confidence mapping lacking one."""
    taxonomy = taxonomy or get_taxonomy()
    scorer = scorer or ConfidenceScorer(taxonomy=taxonomy)
    out: List[AccountMapping] = []
    approved = 0
    for m in mappings:
        if not m.high_level_category and scorer.score(m) is ConfidenceTier.HIGH:
            m = replace(m, high_level_category=taxonomy.high_level_of(m.detailed_category))
            approved += 1
        out.append(m)
    logger.info("Approved %d high-confidence mappings", approved)
    if approved:
        audit("approve_high_confidence", approved=approved, total=len(out))
    return out


def reset_all(mappings: Sequence[AccountMapping]) -> List[AccountMapping]:
    """Clear all three hierarchy levels on every mapping."""
    logger.info("Resetting %d mappings", len(mappings))
    audit("reset_all", total=len(mappings))
    return [
        replace(m, high_level_category="", sub_category="", detailed_category="")
        for m in mappings
    ]
