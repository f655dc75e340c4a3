"""Tests for the dashboard's record actions.

Streamlit calls are replaced by a recorder so that the functions can be
exercised without a running app.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from finance_tracker import dashboard
from finance_tracker.analytics import MonthlyFinanceAnalytics
from finance_tracker.models import EntityKind, ExpenseEntry, Fund, Goal, IncomeEntry
from finance_tracker.periods import MonthKey
from finance_tracker.snapshot import MonthSnapshot


class FakeStore:
    def __init__(self, create_ok=True, delete_ok=True, update_ok=True):
        self.create_ok = create_ok
        self.delete_ok = delete_ok
        self.update_ok = update_ok
        self.created = []
        self.deleted = []
        self.updated = []

    def create(self, kind, record):
        self.created.append((kind, record))
        return record if self.create_ok else None

    def delete(self, kind, user_id, record_id):
        self.deleted.append((kind, user_id, record_id))
        return self.delete_ok

    def update(self, kind, user_id, record_id, changes):
        self.updated.append((kind, user_id, record_id, dict(changes)))
        return self.update_ok


@pytest.fixture
def messages(monkeypatch):
    recorded = {'error': [], 'success': []}
    fake_st = SimpleNamespace(
        error=recorded['error'].append,
        success=recorded['success'].append,
    )
    monkeypatch.setattr(dashboard, 'st', fake_st)
    return recorded


def test_month_options() -> None:
    options = dashboard.month_options(date(2024, 2, 10), count=3)
    assert options == [MonthKey(2024, 2), MonthKey(2024, 1), MonthKey(2023, 12)]


def test_submit_record_success(messages) -> None:
    store = FakeStore()
    goal = Goal('House', 5000000, date(2030, 1, 1), user_id='u1')
    assert dashboard.submit_record(store, goal)
    assert store.created == [(EntityKind.GOAL, goal)]
    assert messages['success'] and not messages['error']


def test_submit_record_invalid_never_reaches_store(messages) -> None:
    store = FakeStore()
    bad = ExpenseEntry(date=date(2024, 1, 1), category='Fixed', sub_category='Food', amount=10)
    assert dashboard.submit_record(store, bad) is False
    assert store.created == []
    assert 'Food' in messages['error'][0]


def test_submit_record_store_failure_is_shown(messages) -> None:
    store = FakeStore(create_ok=False)
    entry = IncomeEntry(date=date(2024, 1, 1), source='Salary', amount=100)
    assert dashboard.submit_record(store, entry) is False
    assert len(store.created) == 1
    assert messages['error'] and not messages['success']


@pytest.mark.parametrize('ok', [True, False])
def test_delete_record(messages, ok) -> None:
    store = FakeStore(delete_ok=ok)
    assert dashboard.delete_record(store, EntityKind.EXPENSE, 'u1', 3) is ok
    assert store.deleted == [(EntityKind.EXPENSE, 'u1', 3)]
    assert bool(messages['success']) is ok
    assert bool(messages['error']) is not ok


@pytest.mark.parametrize('ok', [True, False])
def test_update_record(messages, ok) -> None:
    store = FakeStore(update_ok=ok)
    assert dashboard.update_record(store, EntityKind.FUND, 'u1', 7, {'current_value': 1500.0}) is ok
    assert store.updated == [(EntityKind.FUND, 'u1', 7, {'current_value': 1500.0})]
    assert bool(messages['success']) is ok
    assert bool(messages['error']) is not ok


def test_changed_fields_keeps_only_edits() -> None:
    goal = Goal('Car', 100000.0, date(2026, 1, 1), monthly_contribution=5000.0, current_saved=1000.0)
    values = {
        'current_saved': 25000.0,
        'monthly_contribution': 5000.0,
        'target_amount': 100000.0,
        'target_date': date(2026, 1, 1),
    }
    assert dashboard.changed_fields(goal, values) == {'current_saved': 25000.0}


def test_editable_fields_exist_on_records() -> None:
    for kind, names in dashboard.EDITABLE_FIELDS.items():
        assert kind.updatable
        assert set(names) <= set(kind.record_type.__dataclass_fields__)
    assert 'current_value' in dashboard.EDITABLE_FIELDS[EntityKind.FUND]


def test_portfolio_shows_allocation_table(monkeypatch) -> None:
    shown = []
    column = SimpleNamespace(metric=lambda *args, **kwargs: None)
    fake_st = SimpleNamespace(
        subheader=lambda text: None,
        info=lambda text: None,
        caption=lambda text: None,
        columns=lambda n: [column] * n,
        plotly_chart=lambda fig, **kwargs: None,
        dataframe=lambda df, **kwargs: shown.append(df),
    )
    monkeypatch.setattr(dashboard, 'st', fake_st)
    snapshot = MonthSnapshot.from_records('2024-05', date(2024, 5, 20), user_id='u1', funds=[
        Fund('A', 'Equity', invested_amount=1000, current_value=1200),
        Fund('B', 'Debt', invested_amount=3000, current_value=3000),
    ])
    dashboard.render_portfolio(MonthlyFinanceAnalytics(snapshot))
    assert len(shown) == 1
    assert list(shown[0]['Fund Type'][:2]) == ['Debt', 'Equity']
