"""Month keys and the date ranges used to filter income and expenses."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, TypeVar

from . import config
from .models import parse_date

T = TypeVar('T')

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class MonthKey:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= parse_date(value) <= self.end


def parse_month_key(value) -> MonthKey:
    """Parse ``'YYYY-MM'`` (or pass a :class:`MonthKey` through).

    Raises:
        ValueError: If the key is malformed or the month is not 1-12
    """
    if isinstance(value, MonthKey):
        return value
    match = _MONTH_KEY.match(str(value).strip())
    if not match:
        raise ValueError(f"Month key must look like YYYY-MM, got {value!r}")
    return MonthKey(int(match.group(1)), int(match.group(2)))


def current_month_key(today: date) -> MonthKey:
    return MonthKey(today.year, today.month)


def shift_month(month_key, delta: int) -> MonthKey:
    """Move ``delta`` months forwards (or backwards when negative)."""
    key = parse_month_key(month_key)
    index = key.year * 12 + (key.month - 1) + delta
    return MonthKey(index // 12, index % 12 + 1)


def month_range(month_key, mode: Optional[str] = None) -> DateRange:
    """Resolve a month key to the inclusive range used for filtering.

    In ``legacy`` mode the upper bound is "day 31" of the month, rolled
    over like an overflowing calendar date: February 2024 ends on
    2024-03-02 and April ends on May 1st.  Months with 31 days are
    unaffected.  Stored history was filtered this way, so it stays the
    default.  ``calendar`` mode ends on the true last day of the month.
    """
    key = parse_month_key(month_key)
    mode = config.resolve_mode(mode, config.MONTH_RANGE_MODES, config.MONTH_RANGE_MODE)
    start = key.first_day
    if mode == "legacy":
        end = start + timedelta(days=30)
    else:
        end = date(key.year, key.month, calendar.monthrange(key.year, key.month)[1])
    return DateRange(start, end)


def filter_by_period(records: Iterable[T], date_range: DateRange, date_field: str = 'date') -> List[T]:
    """Keep the records whose ``date_field`` falls inside ``date_range``."""
    return [r for r in records if date_range.contains(getattr(r, date_field))]
