"""Mutual fund returns and portfolio allocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

import pandas as pd

from .aggregation import count_by, group_sum, percent_of, sum_amounts
from .models import Fund, FundType


@dataclass(frozen=True)
class FundPerformance:
    fund: Fund
    returns: float
    returns_pct: float

    @property
    def is_positive(self) -> bool:
        return self.returns >= 0


@dataclass(frozen=True)
class PortfolioSummary:
    funds: Tuple[FundPerformance, ...]
    total_sip: float
    total_invested: float
    total_current_value: float
    total_returns: float
    returns_pct: float
    allocation: Dict[str, float] = field(default_factory=dict)
    allocation_pct: Dict[str, float] = field(default_factory=dict)
    type_counts: Dict[str, int] = field(default_factory=dict)


def fund_performance(fund: Fund) -> FundPerformance:
    returns = fund.current_value - fund.invested_amount
    return FundPerformance(
        fund=fund,
        returns=returns,
        returns_pct=percent_of(returns, fund.invested_amount),
    )


def total_sip(funds: Sequence[Fund]) -> float:
    return sum_amounts(funds, 'sip_amount')


def summarize_portfolio(funds: Sequence[Fund]) -> PortfolioSummary:
    """Aggregate returns over the whole portfolio.

    The portfolio percentage is computed from the invested and current
    totals, not from the per-fund percentages.
    """
    invested = sum_amounts(funds, 'invested_amount')
    current = sum_amounts(funds, 'current_value')
    returns = current - invested

    allocation = group_sum(funds, 'fund_type', 'current_value')
    counts = count_by(funds, 'fund_type')
    # Every known type is reported, even with no holdings
    for fund_type in FundType:
        allocation.setdefault(fund_type.value, 0.0)
        counts.setdefault(fund_type.value, 0)

    return PortfolioSummary(
        funds=tuple(fund_performance(f) for f in funds),
        total_sip=total_sip(funds),
        total_invested=invested,
        total_current_value=current,
        total_returns=returns,
        returns_pct=percent_of(returns, invested),
        allocation=allocation,
        allocation_pct={k: percent_of(v, current) for k, v in allocation.items()},
        type_counts=counts,
    )


def allocation_frame(summary: PortfolioSummary) -> pd.DataFrame:
    """Allocation table sorted by current value, largest first."""
    df = pd.DataFrame({
        'Fund Type': list(summary.allocation.keys()),
        'Current Value': list(summary.allocation.values()),
        'Allocation %': [summary.allocation_pct[k] for k in summary.allocation],
        'Funds': [summary.type_counts.get(k, 0) for k in summary.allocation],
    })
    return df.sort_values('Current Value', ascending=False).reset_index(drop=True)
