"""
Configuration module for Ledger Mapper.

All tuneable parameters (tolerances, fallbacks, feature flags) live here.
Nothing is read from the environment; the taxonomy itself is fixed at
build time and is not configurable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ClassifierConfig:
    """Controls the heuristic classifier."""

    # Detailed category returned when no rule matches.  Must be a balance
    # sheet or income statement category so the hierarchy can be derived.
    fallback_category: str = "Cash and Cash Equivalents"

    # When True, descriptions that no keyword rule matches are fuzzy-matched
    # against the detailed category names before falling back.
    enable_fuzzy_fallback: bool = False

    # Fuzzy matching: minimum similarity score (0–100) to accept a match
    fuzzy_threshold: float = 85.0

    # Optional JSON file of ``[{"keywords": [...], "category": "..."}]``
    # rules evaluated *before* the built-in rules.
    custom_rules_path: Optional[Path] = None


@dataclass(frozen=True)
class ValidationConfig:
    """Controls the reconciliation validator."""

    # Absolute tolerance for the sum-to-zero check, in reporting currency
    # units.  Absorbs rounding drift only.
    tolerance: Decimal = Decimal("0.01")

    # Structural warnings.  None of these affect ``is_valid``.
    warn_on_duplicate_accounts: bool = True
    warn_on_balance_mismatch: bool = True
    warn_on_negative_amounts: bool = True
    warn_on_unbalanced_periods: bool = True
    warn_on_unexpected_sign: bool = True


@dataclass(frozen=True)
class EngineConfig:
    """Top-level configuration aggregating all sub-configs."""

    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    # Logging level for the classification audit trail
    log_level: int = logging.INFO

    # Optional file receiving the same log lines as stdout
    log_file: Optional[str] = None
