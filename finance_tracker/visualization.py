"""Plotly visualisation helpers for the finance tracker.

Each function takes one of the summaries produced by
:class:`finance_tracker.analytics.MonthlyFinanceAnalytics` and returns a
`plotly.graph_objects.Figure` that Streamlit can render via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budget import BudgetSplit
from .funds import PortfolioSummary
from .goals import GoalsSummary


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_expense_breakdown_chart(series: pd.Series, title: str | None = None) -> go.Figure:
    """Generate a pie chart of spending by sub-category.

    Parameters
    ----------
    series : pandas.Series
        Series indexed by sub-category with summed amounts, as returned by
        ``MonthlyFinanceAnalytics.expense_breakdown``.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart.
    """
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Sub Category", "Amount"]
    fig = px.pie(df, names="Sub Category", values="Amount")
    fig.update_layout(title=title or "Expense breakdown")
    return fig


def create_allocation_chart(summary: PortfolioSummary, title: str | None = None) -> go.Figure:
    """Donut chart of current value per fund type.

    Fund types with no holdings are left out of the chart.
    """
    held = {k: v for k, v in summary.allocation.items() if v > 0}
    if not held:
        return _empty_figure()
    fig = go.Figure(
        go.Pie(labels=list(held.keys()), values=list(held.values()), hole=0.45)
    )
    fig.update_layout(title=title or "Portfolio allocation")
    return fig


def create_goal_progress_chart(summary: GoalsSummary, title: str | None = None) -> go.Figure:
    """Horizontal bars of goal progress, capped at 100%.

    The hover text carries the uncapped percentage so over-saved goals
    are still visible.
    """
    if not summary.goals:
        return _empty_figure()
    names = [p.goal.goal_name for p in summary.goals]
    fig = go.Figure(
        go.Bar(
            x=[p.progress_pct_display for p in summary.goals],
            y=names,
            orientation="h",
            text=[p.status.label for p in summary.goals],
            hovertext=[f"{p.progress_pct:.1f}%" for p in summary.goals],
            marker_color=["#10b981" if p.is_achieved else "#3b82f6" for p in summary.goals],
        )
    )
    fig.update_layout(
        title=title or "Goal progress",
        xaxis=dict(title="Progress (%)", range=[0, 100]),
    )
    return fig


def create_budget_split_chart(split: BudgetSplit, title: str | None = None) -> go.Figure:
    """Bar chart of the budget split with the advisory target bands.

    Each bucket is drawn as a bar and its target band as an error bar
    around the band's midpoint.
    """
    if not split.buckets:
        return _empty_figure()
    names = [b.label for b in split.buckets]
    lows = np.array([b.target_low for b in split.buckets])
    highs = np.array([b.target_high for b in split.buckets])
    mids = (lows + highs) / 2

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=names,
        y=[b.pct for b in split.buckets],
        name="Actual",
        marker_color=["#10b981" if b.within_target else "#f59e0b" for b in split.buckets],
    ))
    fig.add_trace(go.Scatter(
        x=names,
        y=mids,
        mode="markers",
        name="Target",
        error_y=dict(type="data", array=highs - mids, arrayminus=mids - lows),
    ))
    fig.update_layout(title=title or "Budget split (% of income)", yaxis_title="% of income")
    return fig
