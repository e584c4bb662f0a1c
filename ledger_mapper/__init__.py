"""
Ledger Mapper — Trial Balance Classification & Reconciliation Engine.

Classifies trial-balance accounts into a three-level financial reporting
taxonomy (high-level → sub-category → detailed category), scores each
placement for human review, keeps the hierarchy consistent under manual
edits, and checks the ledger for double-entry integrity.

Uncertain placements are never hidden — they are scored ``low`` and
surfaced in the review queue.
"""

__version__ = "1.0.0"
__author__ = "Ledger Mapper Team"

from ledger_mapper.pipeline import TrialBalancePipeline  # noqa: F401
