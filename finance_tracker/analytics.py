"""Monthly Finance Analytics.

This module ties the individual calculations together for one month's
snapshot: income and expense totals, the expense breakdown, EMI load,
portfolio performance, goal projections and the budget split.  Every
method recomputes from the snapshot; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from .aggregation import group_sum, percent_of, savings_left, sum_amounts, sum_where
from .budget import BudgetSplit, classify_budget
from .funds import PortfolioSummary, summarize_portfolio
from .goals import GoalsSummary, summarize_goals
from .loans import LoanSummary, summarize_loans
from .models import EntityKind, ExpenseCategory, Record
from .snapshot import MonthSnapshot


def _is_category(category: ExpenseCategory):
    return lambda expense: expense.category == category.value


class MonthlyFinanceAnalytics:
    """Monthly personal finance calculations over a :class:`MonthSnapshot`."""

    def __init__(self, snapshot: MonthSnapshot, goal_month_mode: Optional[str] = None):
        self.snapshot = snapshot
        self.goal_month_mode = goal_month_mode

    @property
    def total_income(self) -> float:
        return sum_amounts(self.snapshot.incomes)

    @property
    def total_expenses(self) -> float:
        return sum_amounts(self.snapshot.expenses)

    @property
    def fixed_expenses(self) -> float:
        return sum_where(self.snapshot.expenses, _is_category(ExpenseCategory.FIXED))

    @property
    def variable_expenses(self) -> float:
        return sum_where(self.snapshot.expenses, _is_category(ExpenseCategory.VARIABLE))

    def monthly_summary(self) -> Dict[str, float]:
        """Calculate the headline numbers for the month."""
        income = self.total_income
        expenses = self.total_expenses
        portfolio = self.portfolio_summary()
        loans = self.loan_summary()
        left = savings_left(income, expenses, portfolio.total_sip)

        return {
            'total_income': income,
            'total_expenses': expenses,
            'fixed_expenses': self.fixed_expenses,
            'variable_expenses': self.variable_expenses,
            'total_emi': loans.total_emi,
            'total_sip': portfolio.total_sip,
            'savings_left': left,
            'savings_rate': percent_of(left, income),
            'debt_to_income': loans.debt_to_income,
            'total_invested': portfolio.total_invested,
            'total_current_value': portfolio.total_current_value,
            'total_returns': portfolio.total_returns,
            'returns_pct': portfolio.returns_pct,
            'total_goals_saved': sum_amounts(self.snapshot.goals, 'current_saved'),
        }

    def expense_breakdown(self) -> pd.Series:
        """Spending per sub-category, largest first."""
        totals = group_sum(self.snapshot.expenses, 'sub_category')
        if not totals:
            return pd.Series(dtype=float, name='Amount')
        series = pd.Series(totals, name='Amount', dtype=float)
        series.index.name = 'Sub Category'
        return series.sort_values(ascending=False)

    def income_by_source(self) -> pd.Series:
        totals = group_sum(self.snapshot.incomes, 'source')
        if not totals:
            return pd.Series(dtype=float, name='Amount')
        series = pd.Series(totals, name='Amount', dtype=float)
        series.index.name = 'Source'
        return series.sort_values(ascending=False)

    def loan_summary(self) -> LoanSummary:
        return summarize_loans(self.snapshot.loans, self.total_income)

    def portfolio_summary(self) -> PortfolioSummary:
        return summarize_portfolio(self.snapshot.funds)

    def goal_summary(self) -> GoalsSummary:
        return summarize_goals(self.snapshot.goals, self.snapshot.today, self.goal_month_mode)

    def budget_split(self) -> BudgetSplit:
        income = self.total_income
        expenses = self.total_expenses
        sip = self.portfolio_summary().total_sip
        return classify_budget(
            fixed_expenses=self.fixed_expenses,
            variable_expenses=self.variable_expenses,
            total_emi=self.loan_summary().total_emi,
            total_monthly_sip=sip,
            savings_left=savings_left(income, expenses, sip),
            total_income=income,
        )

    def records(self, kind: EntityKind) -> Tuple[Record, ...]:
        """The snapshot's records of one kind."""
        kind = EntityKind(kind)
        return {
            EntityKind.INCOME: self.snapshot.incomes,
            EntityKind.EXPENSE: self.snapshot.expenses,
            EntityKind.LOAN: self.snapshot.loans,
            EntityKind.FUND: self.snapshot.funds,
            EntityKind.GOAL: self.snapshot.goals,
        }[kind]

    def records_frame(self, kind: EntityKind) -> pd.DataFrame:
        """One of the snapshot's record collections as a DataFrame."""
        kind = EntityKind(kind)
        columns = [f for f in kind.record_type.__dataclass_fields__]
        return pd.DataFrame([asdict(r) for r in self.records(kind)], columns=columns)

    def dashboard(self) -> Dict[str, Any]:
        """Everything the monthly dashboard shows, in one dictionary."""
        return {
            'month': str(self.snapshot.month),
            'period': {
                'start': self.snapshot.period.start.isoformat(),
                'end': self.snapshot.period.end.isoformat(),
            },
            'summary': self.monthly_summary(),
            'expense_breakdown': self.expense_breakdown().to_dict(),
            'loans': self.loan_summary(),
            'portfolio': self.portfolio_summary(),
            'goals': self.goal_summary(),
            'budget': self.budget_split(),
        }
