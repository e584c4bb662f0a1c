"""
Fuzzy Matching Layer.

Optional second chance for descriptions that no keyword rule matches.  Uses
``rapidfuzz`` to find the closest detailed category name; results are
confidence-gated so a weak match never replaces the fixed fallback.

Only balance sheet and income statement categories are targets: a fuzzy hit
must still resolve to a high-level category.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from rapidfuzz import fuzz, process

from ledger_mapper.logging_setup import get_logger
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

logger = get_logger("fuzzy_matcher")


@dataclass
class FuzzyCandidate:
    """A single candidate returned by the fuzzy matcher."""

    detailed_category: str
    score: float  # 0–100


class FuzzyMatcher:
    """Fuzzy-match a normalised description against detailed categories.

    Parameters
    ----------
    threshold:
        Minimum similarity score (0–100) to accept a match.
    taxonomy:
        Source of target names.  Defaults to the process-wide taxonomy.
    """

    def __init__(
        self,
        threshold: float = 85.0,
        taxonomy: Optional[Taxonomy] = None,
    ) -> None:
        self._threshold = threshold
        taxonomy = taxonomy or get_taxonomy()

        # target_lower → detailed category
        self._targets: dict[str, str] = {
            name.lower(): name
            for name in taxonomy.detailed_categories()
            if taxonomy.high_level_of(name)
        }
        self._target_keys: list[str] = list(self._targets.keys())

    def match(self, normalised_description: str) -> Optional[FuzzyCandidate]:
        """Best detailed category above threshold, or ``None``."""
        if not normalised_description:
            return None

        # token_set_ratio tolerates extra words such as "control" or "a/c"
        result = process.extractOne(
            normalised_description,
            self._target_keys,
            scorer=fuzz.token_set_ratio,
        )
        if result is None:
            return None

        best_key, best_score, _ = result
        if best_score < self._threshold:
            logger.info(
                "Fuzzy best for %r is %r (%.1f) — below threshold %.1f; rejected",
                normalised_description,
                best_key,
                best_score,
                self._threshold,
            )
            return None

        detailed = self._targets[best_key]
        logger.info(
            "Fuzzy match: %r → %r (score=%.1f)",
            normalised_description,
            detailed,
            best_score,
        )
        return FuzzyCandidate(detailed_category=detailed, score=best_score)

    def match_batch(
        self, descriptions: List[str]
    ) -> dict[str, Optional[FuzzyCandidate]]:
        """Match multiple descriptions.  Returns ``{description: candidate}``."""
        return {d: self.match(d) for d in descriptions}
