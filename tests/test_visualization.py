from datetime import date

import pandas as pd

from finance_tracker import visualization as viz
from finance_tracker.budget import classify_budget
from finance_tracker.funds import summarize_portfolio
from finance_tracker.goals import summarize_goals
from finance_tracker.models import Fund, Goal


def test_empty_inputs_give_placeholder_figures() -> None:
    figures = [
        viz.create_expense_breakdown_chart(pd.Series(dtype=float)),
        viz.create_allocation_chart(summarize_portfolio([])),
        viz.create_goal_progress_chart(summarize_goals([], date(2024, 1, 1))),
    ]
    for fig in figures:
        assert fig.layout.title.text == "No data to display"
        assert len(fig.data) == 0


def test_expense_breakdown_chart() -> None:
    series = pd.Series({'Rent': 15000.0, 'Food': 4000.0}, name='Amount')
    fig = viz.create_expense_breakdown_chart(series)
    assert fig.data[0].type == 'pie'
    assert list(fig.data[0].labels) == ['Rent', 'Food']


def test_allocation_chart_skips_empty_types() -> None:
    summary = summarize_portfolio([Fund('A', 'Equity', 100, 150), Fund('B', 'Debt', 100, 50)])
    fig = viz.create_allocation_chart(summary)
    assert set(fig.data[0].labels) == {'Equity', 'Debt'}


def test_goal_progress_chart_caps_bars() -> None:
    goals = [Goal('Big', 1000, date(2030, 1, 1), current_saved=2500), Goal('Small', 1000, date(2030, 1, 1), current_saved=100)]
    fig = viz.create_goal_progress_chart(summarize_goals(goals, date(2024, 1, 1)))
    assert list(fig.data[0].x) == [100.0, 10.0]
    assert fig.data[0].hovertext[0] == '250.0%'


def test_budget_split_chart() -> None:
    split = classify_budget(20000, 10000, 5000, 8000, 7000, 50000)
    fig = viz.create_budget_split_chart(split)
    assert len(fig.data) == 2
    assert len(fig.data[0].y) == 4
