"""A user's records for one month, loaded once and then only read."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from .models import EntityKind, ExpenseEntry, Fund, Goal, IncomeEntry, Loan
from .periods import DateRange, MonthKey, filter_by_period, month_range, parse_month_key
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthSnapshot:
    user_id: str
    month: MonthKey
    period: DateRange
    today: date
    incomes: Tuple[IncomeEntry, ...] = field(default_factory=tuple)
    expenses: Tuple[ExpenseEntry, ...] = field(default_factory=tuple)
    loans: Tuple[Loan, ...] = field(default_factory=tuple)
    funds: Tuple[Fund, ...] = field(default_factory=tuple)
    goals: Tuple[Goal, ...] = field(default_factory=tuple)

    @classmethod
    def from_records(
        cls,
        month_key,
        today: date,
        user_id: str = "",
        incomes=(),
        expenses=(),
        loans=(),
        funds=(),
        goals=(),
        range_mode: Optional[str] = None,
    ) -> 'MonthSnapshot':
        """Build a snapshot from in-memory records.

        Income and expenses outside the month are dropped, the same way a
        store query filters them.
        """
        key = parse_month_key(month_key)
        period = month_range(key, range_mode)
        return cls(
            user_id=user_id,
            month=key,
            period=period,
            today=today,
            incomes=tuple(filter_by_period(incomes, period)),
            expenses=tuple(filter_by_period(expenses, period)),
            loans=tuple(loans),
            funds=tuple(funds),
            goals=tuple(goals),
        )


def load_month_snapshot(
    store: RecordStore,
    user_id: str,
    month_key,
    today: date,
    range_mode: Optional[str] = None,
) -> MonthSnapshot:
    """Query every record kind the dashboard needs for ``month_key``.

    Raises:
        RecordStoreError: If any query fails
    """
    key = parse_month_key(month_key)
    period = month_range(key, range_mode)
    snapshot = MonthSnapshot(
        user_id=user_id,
        month=key,
        period=period,
        today=today,
        incomes=tuple(store.query(EntityKind.INCOME, user_id, period)),
        expenses=tuple(store.query(EntityKind.EXPENSE, user_id, period)),
        loans=tuple(store.query(EntityKind.LOAN, user_id)),
        funds=tuple(store.query(EntityKind.FUND, user_id)),
        goals=tuple(store.query(EntityKind.GOAL, user_id)),
    )
    logger.debug(
        "Loaded %s for %s: %d income, %d expenses, %d loans, %d funds, %d goals",
        key, user_id, len(snapshot.incomes), len(snapshot.expenses),
        len(snapshot.loans), len(snapshot.funds), len(snapshot.goals),
    )
    return snapshot
