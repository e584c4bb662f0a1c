"""
Reconciliation Validator.

Checks a ledger snapshot for double-entry integrity before its accounts are
classified.  An unbalanced trial balance is a normal, reportable outcome:
the validator never raises and never caches.

Checks performed
----------------
1. **Sum to zero** — ``|Σ balance| < tolerance``; the only check that makes
   the snapshot invalid.
2. **Duplicate accounts** — the same account number twice in one period.
3. **Balance convention** — ``balance`` differs from ``debit - credit``.
4. **Negative amounts** — debit or credit below zero.
5. **Per-period balance** — each period balances on its own when the
   snapshot spans several periods.
6. **Unexpected sign** — a negative balance on an account mapped under
   Assets or Expenses (only when mappings are supplied).

Checks 2–6 produce warnings and can be switched off in ``ValidationConfig``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ledger_mapper.config import ValidationConfig
from ledger_mapper.logging_setup import get_logger
from ledger_mapper.schema import (
    AccountMapping,
    LedgerRecord,
    ValidationResult,
    ValidationSummary,
)
from ledger_mapper.taxonomy import HighLevelCategory, Taxonomy, get_taxonomy

logger = get_logger("validator")

SUM_TO_ZERO_ERROR = "Trial balance does not sum to zero"

# Accounts whose natural balance is a debit (positive under debit - credit)
_DEBIT_NATURED = frozenset({HighLevelCategory.ASSETS.value, HighLevelCategory.EXPENSES.value})


class ValidationReport:
    """Accumulates errors and warnings during a validation pass."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)
        logger.error("Validation ERROR: %s", msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)
        logger.warning("Validation WARNING: %s", msg)


class ReconciliationValidator:
    """Validates a list of ``LedgerRecord`` objects.

    Parameters
    ----------
    config:
        Tolerance and warning switches.
    taxonomy:
        Used to derive the high level of detailed-only mappings for the
        sign check.
    """

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        taxonomy: Optional[Taxonomy] = None,
    ) -> None:
        self._config = config or ValidationConfig()
        self._taxonomy = taxonomy or get_taxonomy()

    def validate(
        self,
        records: Iterable[LedgerRecord],
        mappings: Optional[Sequence[AccountMapping]] = None,
    ) -> ValidationResult:
        """Run all checks and return a ``ValidationResult``."""
        records = list(records)
        report = ValidationReport()

        summary = self.summarise(records)
        if abs(summary.total_balance) >= self._config.tolerance:
            report.add_error(SUM_TO_ZERO_ERROR)

        cfg = self._config
        if cfg.warn_on_duplicate_accounts:
            self._check_duplicates(records, report)
        if cfg.warn_on_balance_mismatch:
            self._check_balance_convention(records, report)
        if cfg.warn_on_negative_amounts:
            self._check_negative_amounts(records, report)
        if cfg.warn_on_unbalanced_periods:
            self._check_periods(records, report)
        if cfg.warn_on_unexpected_sign and mappings:
            self._check_signs(records, mappings, report)

        logger.info(
            "Validation complete — records=%d, debits=%s, credits=%s, "
            "balance=%s, valid=%s",
            summary.record_count,
            summary.total_debits,
            summary.total_credits,
            summary.total_balance,
            report.is_valid,
        )
        return ValidationResult(
            is_valid=report.is_valid,
            errors=report.errors,
            warnings=report.warnings,
            summary=summary,
        )

    @staticmethod
    def summarise(records: Sequence[LedgerRecord]) -> ValidationSummary:
        """Totals over *records*."""
        return ValidationSummary(
            total_debits=sum((r.debit for r in records), Decimal("0")),
            total_credits=sum((r.credit for r in records), Decimal("0")),
            total_balance=sum((r.balance for r in records), Decimal("0")),
            record_count=len(records),
        )

    # ------------------------------------------------------------------ #
    # Individual checks
    # ------------------------------------------------------------------ #

    def _check_duplicates(
        self, records: Sequence[LedgerRecord], report: ValidationReport
    ) -> None:
        """Detect an account number listed twice within one period."""
        seen: Dict[Tuple[str, str], int] = {}
        for r in records:
            key = (r.period, r.account_number)
            seen[key] = seen.get(key, 0) + 1
        for (period, account), count in seen.items():
            if count > 1:
                report.add_warning(
                    f"Account '{account}' appears {count} times in period '{period}'"
                )

    def _check_balance_convention(
        self, records: Sequence[LedgerRecord], report: ValidationReport
    ) -> None:
        for r in records:
            expected = r.debit - r.credit
            if abs(r.balance - expected) >= self._config.tolerance:
                report.add_warning(
                    f"Account '{r.account_number}' ({r.period}): balance {r.balance} "
                    f"does not equal debit - credit ({expected})"
                )

    def _check_negative_amounts(
        self, records: Sequence[LedgerRecord], report: ValidationReport
    ) -> None:
        for r in records:
            if r.debit < 0 or r.credit < 0:
                report.add_warning(
                    f"Account '{r.account_number}' ({r.period}) has a negative "
                    f"debit or credit amount (debit={r.debit}, credit={r.credit})"
                )

    def _check_periods(
        self, records: Sequence[LedgerRecord], report: ValidationReport
    ) -> None:
        """Each period must balance on its own; single-period snapshots are
        already covered by the sum-to-zero check."""
        totals: Dict[str, Decimal] = {}
        for r in records:
            totals[r.period] = totals.get(r.period, Decimal("0")) + r.balance
        if len(totals) < 2:
            return
        for period, total in totals.items():
            if abs(total) >= self._config.tolerance:
                report.add_warning(
                    f"Period '{period}' does not sum to zero (balance={total})"
                )

    def _check_signs(
        self,
        records: Sequence[LedgerRecord],
        mappings: Sequence[AccountMapping],
        report: ValidationReport,
    ) -> None:
        """Flag credit balances on debit-natured accounts.

        The owner of the detailed category wins over a stored high level
        that disagrees with it.
        """
        high_levels: Dict[str, str] = {}
        for m in mappings:
            high = self._taxonomy.high_level_of(m.detailed_category) or m.high_level_category
            if high:
                high_levels[m.account_number] = high

        for r in records:
            high = high_levels.get(r.account_number, "")
            if high in _DEBIT_NATURED and r.balance < 0:
                report.add_warning(
                    f"Account '{r.account_number}' ({r.account_description}) is "
                    f"classified under {high} but has a negative balance "
                    f"{r.balance} in period '{r.period}'"
                )


def validate(
    records: Iterable[LedgerRecord],
    mappings: Optional[Sequence[AccountMapping]] = None,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """Convenience wrapper: validate with a one-off validator."""
    return ReconciliationValidator(config).validate(records, mappings)

