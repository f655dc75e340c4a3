"""Reductions shared by every calculation in the tracker.

All functions accept either record dataclasses or plain mappings and
treat missing/None amounts as zero.  Sums use :func:`math.fsum`, which is
exactly rounded, so totals do not depend on record order.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List

import numpy as np


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _amount(record: Any, name: str) -> float:
    value = _field(record, name)
    return float(value) if value is not None else 0.0


def sum_amounts(records: Iterable[Any], amount_field: str = 'amount') -> float:
    """Total of ``amount_field`` over ``records``; 0.0 for no records."""
    return math.fsum(_amount(r, amount_field) for r in records)


def sum_where(
    records: Iterable[Any],
    predicate: Callable[[Any], bool],
    amount_field: str = 'amount',
) -> float:
    """Total of ``amount_field`` over the records matching ``predicate``."""
    return math.fsum(_amount(r, amount_field) for r in records if predicate(r))


def group_sum(records: Iterable[Any], key_field: str, amount_field: str = 'amount') -> Dict[Any, float]:
    """Map each distinct ``key_field`` value to its ``amount_field`` total.

    Example:
        >>> group_sum([{'k': 'a', 'v': 1}, {'k': 'a', 'v': 2}], 'k', 'v')
        {'a': 3.0}
    """
    buckets: Dict[Any, List[float]] = defaultdict(list)
    for record in records:
        buckets[_key(_field(record, key_field))].append(_amount(record, amount_field))
    return {key: math.fsum(values) for key, values in buckets.items()}


def count_by(records: Iterable[Any], key_field: str) -> Dict[Any, int]:
    counts: Dict[Any, int] = defaultdict(int)
    for record in records:
        counts[_key(_field(record, key_field))] += 1
    return dict(counts)


def _key(value: Any) -> Any:
    # Enum members group with their plain string values
    return getattr(value, 'value', value)


def percent_of(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0.0 whenever ``whole`` <= 0."""
    if whole is None or whole <= 0:
        return 0.0
    return float(part) / float(whole) * 100


def clamp_percent(value: float, upper: float = 100.0) -> float:
    """Clamp a percentage into [0, upper] for progress bars."""
    return float(np.clip(value, 0.0, upper))


def savings_left(total_income: float, total_expenses: float, total_monthly_sip: float) -> float:
    """Income left after expenses and SIPs.  Negative when overspent."""
    return total_income - total_expenses - total_monthly_sip
