"""
Data models carried through the engine.

Ledger records are immutable once ingested.  Account mappings are frozen
too: every edit produces a new ``AccountMapping`` via ``dataclasses.replace``
so a reader never observes a mapping half-way through a cascade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class MappingField(str, Enum):
    """The three hierarchy levels of an ``AccountMapping``, top first."""

    HIGH_LEVEL_CATEGORY = "high_level_category"
    SUB_CATEGORY = "sub_category"
    DETAILED_CATEGORY = "detailed_category"

    @classmethod
    def parse(cls, name: str) -> "MappingField":
        """Accept the snake_case value or the camelCase key used by UIs."""
        for f in cls:
            if name in (f.value, f.camel_name):
                return f
        raise ValueError(f"Unknown mapping field {name!r}")

    @property
    def camel_name(self) -> str:
        head, *rest = self.value.split("_")
        return head + "".join(p.capitalize() for p in rest)

    @property
    def descendants(self) -> tuple:
        """Lower levels that an edit on this level can invalidate."""
        order = list(MappingField)
        return tuple(order[order.index(self) + 1:])


class ConfidenceTier(str, Enum):
    """Coarse classification-quality signal used to prioritise review."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

def to_decimal(value: Any) -> Decimal:
    """Coerce an int / float / numeric string to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.  NaN and infinities are rejected.
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).replace(",", "").strip())
        except InvalidOperation as exc:
            raise ValueError(f"Cannot parse amount from {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Cannot parse amount from {value!r}")
    return amount


@dataclass(frozen=True)
class LedgerRecord:
    """One trial-balance line for one account in one period."""

    period: str
    account_number: str
    account_description: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        for name in ("debit", "credit", "balance"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))
        object.__setattr__(self, "account_number", str(self.account_number))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LedgerRecord":
        """Build a record from snake_case or camelCase keys.

        ``date`` is accepted as an alias of ``period``.  A missing
        ``balance`` is derived as ``debit - credit``.  A row without an account
        number raises ``ValueError``.
        """
        def pick(*keys: str, default: Any = None) -> Any:
            for k in keys:
                if k in data:
                    return data[k]
            return default

        account_number = pick("account_number", "accountNumber")
        if account_number is None or str(account_number).strip() == "":
            raise ValueError(f"Ledger row has no account number: {dict(data)!r}")

        debit = to_decimal(pick("debit", default=0))
        credit = to_decimal(pick("credit", default=0))
        balance = pick("balance")
        return cls(
            period=str(pick("period", "date", default="")),
            account_number=str(account_number).strip(),
            account_description=str(
                pick("account_description", "accountDescription", default="")
            ),
            debit=debit,
            credit=credit,
            balance=debit - credit if balance is None else to_decimal(balance),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "accountNumber": self.account_number,
            "accountDescription": self.account_description,
            "debit": str(self.debit),
            "credit": str(self.credit),
            "balance": str(self.balance),
        }


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccountMapping:
    """Placement of one account in the taxonomy.  ``""`` means unset."""

    account_number: str
    account_description: str
    high_level_category: str = ""
    sub_category: str = ""
    detailed_category: str = ""

    def get(self, level: MappingField) -> str:
        return getattr(self, level.value)

    @property
    def is_mapped(self) -> bool:
        return bool(self.detailed_category)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AccountMapping":
        def pick(snake: str, camel: str) -> str:
            return str(data.get(snake, data.get(camel, "")) or "")

        return cls(
            account_number=pick("account_number", "accountNumber"),
            account_description=pick("account_description", "accountDescription"),
            high_level_category=pick("high_level_category", "highLevelCategory"),
            sub_category=pick("sub_category", "subCategory"),
            detailed_category=pick("detailed_category", "detailedCategory"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "accountNumber": self.account_number,
            "accountDescription": self.account_description,
            "highLevelCategory": self.high_level_category,
            "subCategory": self.sub_category,
            "detailedCategory": self.detailed_category,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Audit record of a single classifier decision."""

    description: str
    detailed_category: str
    method: str  # "rule" | "custom" | "fuzzy" | "fallback"
    matched_keyword: str = ""
    score: float = 100.0

    @property
    def is_fallback(self) -> bool:
        return self.method == "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "detailed_category": self.detailed_category,
            "method": self.method,
            "matched_keyword": self.matched_keyword,
            "score": round(self.score, 2),
        }


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationSummary:
    total_debits: Decimal = Decimal("0")
    total_credits: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")
    record_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDebits": float(self.total_debits),
            "totalCredits": float(self.total_credits),
            "totalBalance": float(self.total_balance),
            "recordCount": self.record_count,
        }


@dataclass
class ValidationResult:
    """Outcome of reconciling one ledger snapshot."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "summary": self.summary.to_dict(),
        }
