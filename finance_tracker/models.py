"""Record types for the finance tracker.

Each entity is a frozen dataclass so that a month's snapshot can be passed
around without anyone mutating it.  Invariants are only checked when a
record is created (:func:`validate_record`); rows that are already stored
are loaded as-is by :func:`record_from_row` and the calculations tolerate
whatever they contain.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union


class RecordValidationError(ValueError):
    """Raised when a new record violates one or more entity invariants."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ExpenseCategory(str, Enum):
    FIXED = "Fixed"
    VARIABLE = "Variable"


class FundType(str, Enum):
    EQUITY = "Equity"
    DEBT = "Debt"
    HYBRID = "Hybrid"
    INDEX = "Index"


EXPENSE_SUBCATEGORIES: Dict[ExpenseCategory, FrozenSet[str]] = {
    ExpenseCategory.FIXED: frozenset({
        'Rent', 'EMI', 'Electricity', 'Water', 'Internet', 'Mobile', 'Insurance', 'Other',
    }),
    ExpenseCategory.VARIABLE: frozenset({
        'Food', 'Groceries', 'Fuel', 'Travel', 'Shopping', 'Entertainment', 'Healthcare', 'Other',
    }),
}

PAYMENT_METHODS = ('Cash', 'UPI', 'Credit Card', 'Debit Card', 'Net Banking')


@dataclass(frozen=True)
class IncomeEntry:
    date: date
    source: str
    amount: float
    account: str = ""
    notes: str = ""
    user_id: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class ExpenseEntry:
    date: date
    category: str
    sub_category: str
    amount: float
    payment_method: str = ""
    note: str = ""
    user_id: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Loan:
    loan_type: str
    total_amount: float
    interest_rate_pct: float
    emi_amount: float
    start_date: date
    end_date: date
    remaining_months: int
    outstanding_principal: float
    user_id: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Fund:
    fund_name: str
    fund_type: str
    invested_amount: float
    current_value: float
    sip_amount: float = 0.0
    sip_day_of_month: Optional[int] = None
    lumpsum_amount: float = 0.0
    updated_at: Optional[str] = None
    user_id: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Goal:
    goal_name: str
    target_amount: float
    target_date: date
    monthly_contribution: float = 0.0
    current_saved: float = 0.0
    user_id: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None


Record = Union[IncomeEntry, ExpenseEntry, Loan, Fund, Goal]


class EntityKind(str, Enum):
    """The five record kinds, valued by their table name."""

    INCOME = "income"
    EXPENSE = "expenses"
    LOAN = "emi_loans"
    FUND = "mutual_funds"
    GOAL = "goals"

    @property
    def record_type(self) -> type:
        return _RECORD_TYPES[self]

    @property
    def period_scoped(self) -> bool:
        """Income and expenses are filtered by month; the rest are not."""
        return self in (EntityKind.INCOME, EntityKind.EXPENSE)

    @property
    def updatable(self) -> bool:
        """Income and expenses are append/delete-only."""
        return not self.period_scoped

    @classmethod
    def for_record(cls, record: Record) -> 'EntityKind':
        for kind, record_type in _RECORD_TYPES.items():
            if isinstance(record, record_type):
                return kind
        raise TypeError(f"Not a finance record: {type(record).__name__}")


_RECORD_TYPES = {
    EntityKind.INCOME: IncomeEntry,
    EntityKind.EXPENSE: ExpenseEntry,
    EntityKind.LOAN: Loan,
    EntityKind.FUND: Fund,
    EntityKind.GOAL: Goal,
}

_DATE_FIELDS = {'date', 'start_date', 'end_date', 'target_date'}
_FLOAT_FIELDS = {
    'amount', 'total_amount', 'interest_rate_pct', 'emi_amount', 'outstanding_principal',
    'sip_amount', 'lumpsum_amount', 'invested_amount', 'current_value',
    'target_amount', 'monthly_contribution', 'current_saved',
}
_INT_FIELDS = {'remaining_months', 'sip_day_of_month', 'id'}


def parse_date(value: Any) -> date:
    """Coerce an ISO string, ``datetime`` or ``date`` into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Not a date: {value!r}")


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _DATE_FIELDS:
        return parse_date(value)
    if name in _FLOAT_FIELDS:
        return float(value)
    if name in _INT_FIELDS:
        return int(value)
    return value


def record_from_row(kind: EntityKind, row: Mapping[str, Any]) -> Record:
    """Build a record of ``kind`` from a mapping such as a database row.

    Unknown keys are ignored and numeric/date columns are coerced, but no
    invariant is checked.
    """
    record_type = kind.record_type
    values = {}
    for f in fields(record_type):
        if f.name in row:
            values[f.name] = _coerce(f.name, row[f.name])
    if 'user_id' in values and values['user_id'] is None:
        values['user_id'] = ""
    return record_type(**values)


def record_to_row(record: Record) -> Dict[str, Any]:
    """Flatten a record into column values with ISO-formatted dates."""
    row: Dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        row[f.name] = value
    return row


def _check_date(record: Record, name: str, errors: List[str]) -> Optional[date]:
    try:
        return parse_date(getattr(record, name))
    except (TypeError, ValueError):
        errors.append(f"{name} must be a valid date")
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_non_negative(record: Record, names: List[str], errors: List[str]) -> bool:
    """Report every field in ``names`` that is not a number >= 0."""
    valid = True
    for name in names:
        value = getattr(record, name)
        if not _is_number(value) or value < 0:
            errors.append(f"{name} must be >= 0")
            valid = False
    return valid


def validate_record(record: Record) -> None:
    """Check the creation-time invariants of ``record``.

    Raises:
        RecordValidationError: Listing every violated invariant
    """
    errors: List[str] = []

    if isinstance(record, IncomeEntry):
        _check_date(record, 'date', errors)
        _check_non_negative(record, ['amount'], errors)
        if not str(record.source or '').strip():
            errors.append("source is required")

    elif isinstance(record, ExpenseEntry):
        _check_date(record, 'date', errors)
        _check_non_negative(record, ['amount'], errors)
        try:
            category = ExpenseCategory(record.category)
        except ValueError:
            errors.append(f"category must be one of {[c.value for c in ExpenseCategory]}")
        else:
            if record.sub_category not in EXPENSE_SUBCATEGORIES[category]:
                errors.append(
                    f"sub_category {record.sub_category!r} is not allowed for {category.value} expenses"
                )
        if record.payment_method and record.payment_method not in PAYMENT_METHODS:
            errors.append(f"payment_method must be one of {list(PAYMENT_METHODS)}")

    elif isinstance(record, Loan):
        _check_non_negative(record, ['emi_amount', 'interest_rate_pct'], errors)
        if _check_non_negative(record, ['total_amount', 'outstanding_principal'], errors):
            if record.total_amount < record.outstanding_principal:
                errors.append("total_amount must be >= outstanding_principal")
        if not _is_number(record.remaining_months) or record.remaining_months < 0:
            errors.append("remaining_months must be >= 0")
        start = _check_date(record, 'start_date', errors)
        end = _check_date(record, 'end_date', errors)
        if start and end and start > end:
            errors.append("start_date must not be after end_date")

    elif isinstance(record, Fund):
        _check_non_negative(record, ['invested_amount', 'current_value', 'sip_amount', 'lumpsum_amount'], errors)
        try:
            FundType(record.fund_type)
        except ValueError:
            errors.append(f"fund_type must be one of {[t.value for t in FundType]}")
        if record.sip_day_of_month is not None and not (
            _is_number(record.sip_day_of_month) and 1 <= record.sip_day_of_month <= 31
        ):
            errors.append("sip_day_of_month must be between 1 and 31")

    elif isinstance(record, Goal):
        if not _is_number(record.target_amount) or record.target_amount <= 0:
            errors.append("target_amount must be > 0")
        _check_non_negative(record, ['current_saved', 'monthly_contribution'], errors)
        _check_date(record, 'target_date', errors)

    else:
        raise TypeError(f"Not a finance record: {type(record).__name__}")

    if errors:
        raise RecordValidationError(errors)
