"""
Mapping Store.

Holds the account → category assignments and keeps the three hierarchy
levels consistent on every edit.

The edit semantics live in ``apply_edit``, a pure state transition with one
rule per hierarchy level:

* **high level** — set the value and reset the sub-category and the
  detailed category.
* **sub-category** — set the value and reset the detailed category.  The
  high level is set to the group's owner, so a sub-category never sits
  under a high level that does not own it.
* **detailed category** — set the value; a sub-category that does not list
  it is cleared (detailed-only is a valid transient state).  Clearing the
  detailed category leaves both ancestors in place.

Re-selecting the current non-empty value is a no-op; clearing always
cascades.  Category names the taxonomy does not know resolve to ``""`` and
are logged.

Snapshot-level functions (``set_field``, ``reassign_detailed``) never mutate
their input; they return a complete new list.  ``MappingStore`` wraps them
for callers that want one owned, lock-guarded collection.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ledger_mapper.bulk import approve_high_confidence, auto_map, reset_all
from ledger_mapper.classifier import RuleClassifier
from ledger_mapper.confidence import ConfidenceScorer
from ledger_mapper.logging_setup import audit, get_logger
from ledger_mapper.schema import AccountMapping, LedgerRecord, MappingField
from ledger_mapper.taxonomy import Taxonomy, get_taxonomy

logger = get_logger("mapping_store")

FieldLike = Union[MappingField, str]


# ---------------------------------------------------------------------------
# Single-mapping transitions
# ---------------------------------------------------------------------------

def _resolve(level: MappingField, value: str, taxonomy: Taxonomy) -> str:
    value = (value or "").strip()
    if not value:
        return ""
    known = {
        MappingField.HIGH_LEVEL_CATEGORY: taxonomy.is_high_level,
        MappingField.SUB_CATEGORY: taxonomy.is_sub_category,
        MappingField.DETAILED_CATEGORY: taxonomy.is_detailed,
    }[level](value)
    if not known:
        logger.warning("Unknown %s %r — treated as empty", level.value, value)
        return ""
    return value


def apply_edit(
    mapping: AccountMapping,
    field: FieldLike,
    value: str,
    taxonomy: Optional[Taxonomy] = None,
) -> AccountMapping:
    """Return *mapping* with ``field`` set to ``value`` and its descendant
    levels reset."""
    taxonomy = taxonomy or get_taxonomy()
    level = field if isinstance(field, MappingField) else MappingField.parse(field)
    value = _resolve(level, value, taxonomy)
    if value and value == mapping.get(level):
        return mapping

    if level is MappingField.HIGH_LEVEL_CATEGORY:
        return replace(
            mapping, high_level_category=value, sub_category="", detailed_category=""
        )

    if level is MappingField.SUB_CATEGORY:
        high = mapping.high_level_category
        if value:
            high = taxonomy.high_level_of_group(value)
        return replace(
            mapping, high_level_category=high, sub_category=value, detailed_category=""
        )

    sub = mapping.sub_category
    if value and sub and not taxonomy.is_member(value, sub):
        sub = ""
    return replace(mapping, sub_category=sub, detailed_category=value)


def reassign(
    mapping: AccountMapping,
    detailed: str,
    taxonomy: Optional[Taxonomy] = None,
    back_fill: bool = True,
) -> AccountMapping:
    """Move *mapping* to another detailed category (drag-and-drop).

    A high level the reviewer already chose is never replaced; an empty
    one is back-filled from the taxonomy when ``back_fill`` is set.  A
    sub-category that does not list the new category is cleared, as in
    ``apply_edit``.
    """
    taxonomy = taxonomy or get_taxonomy()
    if detailed == mapping.detailed_category:
        return mapping
    if not taxonomy.is_detailed(detailed):
        logger.warning(
            "Reassign of %s to unknown category %r ignored",
            mapping.account_number,
            detailed,
        )
        return mapping

    high = mapping.high_level_category
    if not high and back_fill:
        high = taxonomy.high_level_of(detailed)

    sub = mapping.sub_category
    if sub and not taxonomy.is_member(detailed, sub):
        sub = ""

    return replace(
        mapping, high_level_category=high, sub_category=sub, detailed_category=detailed
    )


# ---------------------------------------------------------------------------
# Snapshot-level operations
# ---------------------------------------------------------------------------

def derive_mappings(records: Iterable[LedgerRecord]) -> List[AccountMapping]:
    """One empty mapping per unique account number.

    Accounts keep the order of their first appearance and the description
    of their first record.
    """
    seen: Dict[str, AccountMapping] = {}
    for r in records:
        if r.account_number not in seen:
            seen[r.account_number] = AccountMapping(
                account_number=r.account_number,
                account_description=r.account_description,
            )
    return list(seen.values())


def _levels(m: AccountMapping) -> Tuple[str, str, str]:
    return (m.high_level_category, m.sub_category, m.detailed_category)


def _update_one(
    mappings: Sequence[AccountMapping],
    account_number: str,
    fn: Callable[[AccountMapping], AccountMapping],
    operation: str,
) -> List[AccountMapping]:
    found = False
    out: List[AccountMapping] = []
    for m in mappings:
        if m.account_number == account_number:
            found = True
            new = fn(m)
            if new != m:
                audit(
                    operation,
                    account=account_number,
                    before=_levels(m),
                    after=_levels(new),
                )
            m = new
        out.append(m)
    if not found:
        logger.warning("%s on unknown account %r — ignored", operation, account_number)
    return out


def set_field(
    mappings: Sequence[AccountMapping],
    account_number: str,
    field: FieldLike,
    value: str,
    taxonomy: Optional[Taxonomy] = None,
) -> List[AccountMapping]:
    """Apply one edit to one account; unknown accounts are a logged no-op."""
    taxonomy = taxonomy or get_taxonomy()
    return _update_one(
        mappings,
        account_number,
        lambda m: apply_edit(m, field, value, taxonomy),
        "set_field",
    )


def reassign_detailed(
    mappings: Sequence[AccountMapping],
    account_number: str,
    detailed: str,
    taxonomy: Optional[Taxonomy] = None,
    back_fill: bool = True,
) -> List[AccountMapping]:
    """Drag-and-drop reassignment over a snapshot; see ``reassign``."""
    taxonomy = taxonomy or get_taxonomy()
    return _update_one(
        mappings,
        account_number,
        lambda m: reassign(m, detailed, taxonomy, back_fill),
        "reassign_detailed",
    )


# ---------------------------------------------------------------------------
# Owned collection
# ---------------------------------------------------------------------------

class MappingStore:
    """A lock-guarded, whole-collection-replace holder of mappings.

    Every mutation runs read-modify-write under one lock and swaps in a new
    tuple, which is also returned.  Readers holding an earlier snapshot are
    unaffected.

    Parameters
    ----------
    mappings:
        Initial snapshot.
    classifier / scorer / taxonomy:
        Collaborators for the bulk operations; defaults are built at construction.
    """

    def __init__(
        self,
        mappings: Iterable[AccountMapping] = (),
        classifier: Optional[RuleClassifier] = None,
        scorer: Optional[ConfidenceScorer] = None,
        taxonomy: Optional[Taxonomy] = None,
    ) -> None:
        self._taxonomy = taxonomy or get_taxonomy()
        self._classifier = classifier or RuleClassifier(taxonomy=self._taxonomy)
        self._scorer = scorer or ConfidenceScorer(taxonomy=self._taxonomy)
        self._lock = threading.Lock()
        self._mappings: Tuple[AccountMapping, ...] = tuple(mappings)

    @classmethod
    def from_ledger(cls, records: Iterable[LedgerRecord], **kwargs) -> "MappingStore":
        """Create a store with one empty mapping per ledger account."""
        return cls(derive_mappings(records), **kwargs)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    @property
    def snapshot(self) -> Tuple[AccountMapping, ...]:
        return self._mappings

    def get(self, account_number: str) -> Optional[AccountMapping]:
        for m in self._mappings:
            if m.account_number == account_number:
                return m
        return None

    def __len__(self) -> int:
        return len(self._mappings)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def _mutate(
        self, fn: Callable[[Tuple[AccountMapping, ...]], Iterable[AccountMapping]]
    ) -> Tuple[AccountMapping, ...]:
        with self._lock:
            self._mappings = tuple(fn(self._mappings))
            return self._mappings

    def replace_all(self, mappings: Iterable[AccountMapping]) -> Tuple[AccountMapping, ...]:
        """Swap in an externally produced snapshot."""
        new = tuple(mappings)
        return self._mutate(lambda _: new)

    def set_field(
        self, account_number: str, field: FieldLike, value: str
    ) -> Tuple[AccountMapping, ...]:
        return self._mutate(
            lambda ms: set_field(ms, account_number, field, value, self._taxonomy)
        )

    def reassign_detailed(
        self, account_number: str, detailed: str, back_fill: bool = True
    ) -> Tuple[AccountMapping, ...]:
        return self._mutate(
            lambda ms: reassign_detailed(
                ms, account_number, detailed, self._taxonomy, back_fill
            )
        )

    def bulk_auto_map(self) -> Tuple[AccountMapping, ...]:
        return self._mutate(lambda ms: auto_map(ms, self._classifier))

    def bulk_approve_high_confidence(self) -> Tuple[AccountMapping, ...]:
        return self._mutate(
            lambda ms: approve_high_confidence(ms, self._scorer, self._taxonomy)
        )

    def bulk_reset(self) -> Tuple[AccountMapping, ...]:
        return self._mutate(reset_all)
