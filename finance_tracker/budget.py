"""Needs / wants / investments / savings split of a month's income.

The target bands are advisory only.  ``within_target`` is exposed so the
dashboard can colour a bucket, but nothing here warns or rejects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .aggregation import percent_of
from .config import get_config_value

BUCKETS = ('Needs', 'Wants', 'Investments', 'Savings')


@dataclass(frozen=True)
class BudgetBucket:
    name: str
    label: str
    amount: float
    pct: float
    target_low: float
    target_high: float

    @property
    def within_target(self) -> bool:
        return self.target_low <= self.pct <= self.target_high


@dataclass(frozen=True)
class BudgetSplit:
    total_income: float
    buckets: Tuple[BudgetBucket, ...]

    def __getitem__(self, name: str) -> BudgetBucket:
        for bucket in self.buckets:
            if bucket.name == name:
                return bucket
        raise KeyError(name)

    def as_dict(self) -> Dict[str, float]:
        return {b.name: b.pct for b in self.buckets}


def default_bands() -> Dict[str, Dict[str, Any]]:
    """Target bands from ``defaults/budget.json``."""
    return get_config_value('budget', 'bands', default={}) or {}


def classify_budget(
    fixed_expenses: float,
    variable_expenses: float,
    total_emi: float,
    total_monthly_sip: float,
    savings_left: float,
    total_income: float,
    bands: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> BudgetSplit:
    """Express each bucket as a percentage of ``total_income``.

    Needs are fixed expenses plus EMIs, wants are variable expenses,
    investments are SIPs and savings is whatever is left.  With no income
    every percentage is 0.
    """
    bands = bands if bands is not None else default_bands()
    amounts = {
        'Needs': fixed_expenses + total_emi,
        'Wants': variable_expenses,
        'Investments': total_monthly_sip,
        'Savings': savings_left,
    }
    buckets = []
    for name in BUCKETS:
        band = bands.get(name, {})
        buckets.append(BudgetBucket(
            name=name,
            label=band.get('label', name),
            amount=amounts[name],
            pct=percent_of(amounts[name], total_income),
            target_low=float(band.get('target_low', 0)),
            target_high=float(band.get('target_high', 100)),
        ))
    return BudgetSplit(total_income=total_income, buckets=tuple(buckets))
