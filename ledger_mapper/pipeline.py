"""
Pipeline Orchestrator.

Wires the engine layers together in the order a trial balance flows
through them:

    Ledger records  →  Reconciliation Validator  →  Account derivation
                    →  Classifier (auto-map)  →  Confidence Scorer  →  Output

The pipeline keeps no state between runs; the caller owns the ledger and
mapping snapshots and passes them in.

Usage
-----
>>> from ledger_mapper.pipeline import TrialBalancePipeline
>>> pipe = TrialBalancePipeline()
>>> out = pipe.run_dicts([
...     {"period": "2024", "accountNumber": "1001",
...      "accountDescription": "Cash", "debit": 100, "credit": 0},
...     {"period": "2024", "accountNumber": "3001",
...      "accountDescription": "Trade Payables", "debit": 0, "credit": 100},
... ])
>>> out.validation.is_valid
True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ledger_mapper.bulk import auto_map
from ledger_mapper.classifier import RuleClassifier
from ledger_mapper.config import EngineConfig
from ledger_mapper.confidence import ConfidenceScorer
from ledger_mapper.logging_setup import configure_logging, get_logger
from ledger_mapper.mapping_store import MappingStore, derive_mappings
from ledger_mapper.normalizer import DescriptionNormalizer
from ledger_mapper.review import MappingStats, mapping_stats
from ledger_mapper.schema import (
    AccountMapping,
    ConfidenceTier,
    LedgerRecord,
    ValidationResult,
)
from ledger_mapper.taxonomy import get_taxonomy
from ledger_mapper.validator import ReconciliationValidator

logger = get_logger("pipeline")


@dataclass
class PipelineOutput:
    """Aggregate result of one pipeline run."""

    validation: ValidationResult
    mappings: List[AccountMapping] = field(default_factory=list)
    confidence: Dict[str, ConfidenceTier] = field(default_factory=dict)
    stats: Optional[MappingStats] = None

    @property
    def success(self) -> bool:
        return self.validation.is_valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "validation": self.validation.to_dict(),
            "mappings": [
                {**m.to_dict(), "confidence": self.confidence[m.account_number].value}
                for m in self.mappings
            ],
            "stats": self.stats.to_dict() if self.stats else {},
        }


class TrialBalancePipeline:
    """Runs validation and classification over one ledger snapshot.

    Parameters
    ----------
    config:
        All tuneable knobs.  Defaults suit most trial balances.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self._config = config or EngineConfig()

        # Bootstrap logging before anything else
        configure_logging(level=self._config.log_level, log_file=self._config.log_file)

        self._taxonomy = get_taxonomy()
        self._normalizer = DescriptionNormalizer()
        self._classifier = RuleClassifier(
            config=self._config.classifier,
            taxonomy=self._taxonomy,
            normalizer=self._normalizer,
        )
        self._scorer = ConfidenceScorer(
            taxonomy=self._taxonomy, normalizer=self._normalizer
        )
        self._validator = ReconciliationValidator(
            config=self._config.validation, taxonomy=self._taxonomy
        )

        logger.info(
            "Pipeline initialised — rules=%d, fallback=%r, fuzzy=%s, tolerance=%s",
            len(self._classifier.rules),
            self._classifier.fallback_category,
            self._config.classifier.enable_fuzzy_fallback,
            self._config.validation.tolerance,
        )

    # ------------------------------------------------------------------ #
    # Entry points
    # ------------------------------------------------------------------ #

    def run(
        self,
        records: Iterable[LedgerRecord],
        mappings: Optional[Sequence[AccountMapping]] = None,
        auto_classify: bool = True,
    ) -> PipelineOutput:
        """Validate *records* and classify their accounts.

        When *mappings* is given, existing placements are kept and only
        accounts without a detailed category are classified; accounts seen
        in the ledger but missing from *mappings* are appended empty.
        """
        records = list(records)
        current = self._merge(records, mappings)
        if auto_classify:
            current = auto_map(current, self._classifier)

        validation = self._validator.validate(records, current)
        confidence = self._scorer.score_all(current)
        stats = mapping_stats(current, self._scorer)

        logger.info(
            "Pipeline complete — accounts=%d, high=%d, medium=%d, low=%d, valid=%s",
            stats.total,
            stats.high,
            stats.medium,
            stats.low,
            validation.is_valid,
        )
        return PipelineOutput(
            validation=validation,
            mappings=current,
            confidence=confidence,
            stats=stats,
        )

    def run_dicts(
        self,
        rows: Iterable[Mapping[str, Any]],
        mappings: Optional[Sequence[AccountMapping]] = None,
    ) -> PipelineOutput:
        """Same as ``run`` for plain dict rows (snake_case or camelCase)."""
        return self.run([LedgerRecord.from_dict(r) for r in rows], mappings)

    def validate(self, records: Iterable[LedgerRecord]) -> ValidationResult:
        return self._validator.validate(records)

    def new_store(self, mappings: Iterable[AccountMapping] = ()) -> MappingStore:
        """A ``MappingStore`` sharing this pipeline's classifier and scorer."""
        return MappingStore(
            mappings,
            classifier=self._classifier,
            scorer=self._scorer,
            taxonomy=self._taxonomy,
        )

    # ------------------------------------------------------------------ #
    # Utility
    # ------------------------------------------------------------------ #

    @staticmethod
    def _merge(
        records: Sequence[LedgerRecord],
        mappings: Optional[Sequence[AccountMapping]],
    ) -> List[AccountMapping]:
        derived = derive_mappings(records)
        if mappings is None:
            return derived
        merged = list(mappings)
        known = {m.account_number for m in merged}
        added = [m for m in derived if m.account_number not in known]
        if added:
            logger.info("Added %d accounts not present in the mapping set", len(added))
        return merged + added

    @property
    def classifier(self) -> RuleClassifier:
        return self._classifier

    @property
    def scorer(self) -> ConfidenceScorer:
        return self._scorer
