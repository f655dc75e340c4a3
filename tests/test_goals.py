from datetime import date, timedelta

import pytest

from finance_tracker.goals import GoalStatus, months_until, project_goal, summarize_goals
from finance_tracker.models import Goal

TODAY = date(2025, 3, 15)


def _goal(target=120000.0, saved=30000.0, target_date=None, contribution=10000.0, name='Car'):
    return Goal(
        goal_name=name,
        target_amount=target,
        target_date=target_date or TODAY + timedelta(days=180),
        monthly_contribution=contribution,
        current_saved=saved,
    )


def test_goal_behind_schedule() -> None:
    projection = project_goal(_goal(), TODAY, 'flat30')
    assert projection.progress_pct == 25.0
    assert projection.remaining == 90000
    assert projection.months_remaining == 6
    assert projection.required_monthly == 15000
    assert projection.is_on_track is False
    assert projection.is_past_due is False
    assert projection.status is GoalStatus.BEHIND_SCHEDULE
    assert projection.status_message == "Need ₹15,000.00/month to reach goal on time"


def test_goal_on_track() -> None:
    projection = project_goal(_goal(contribution=15000), TODAY, 'flat30')
    assert projection.is_on_track
    assert projection.status is GoalStatus.ON_TRACK


def test_achieved_goal_is_never_past_due() -> None:
    projection = project_goal(_goal(target=1000, saved=1000, target_date=TODAY - timedelta(days=1)), TODAY)
    assert projection.progress_pct == 100
    assert projection.is_past_due is False
    assert projection.status is GoalStatus.ACHIEVED
    assert projection.status_message == "Goal Achieved!"


def test_past_due_goal() -> None:
    projection = project_goal(_goal(saved=500, target_date=TODAY - timedelta(days=10)), TODAY)
    assert projection.is_past_due
    assert projection.months_remaining == 0
    assert projection.required_monthly == 0
    assert projection.status is GoalStatus.PAST_DUE


def test_over_saved_goal_exposes_raw_progress() -> None:
    projection = project_goal(_goal(target=1000, saved=1500), TODAY)
    assert projection.progress_pct == 150.0
    assert projection.progress_pct_display == 100.0
    assert projection.remaining == -500
    assert projection.status is GoalStatus.ACHIEVED


def test_goal_due_today_is_not_past_due() -> None:
    projection = project_goal(_goal(target_date=TODAY), TODAY)
    assert projection.is_past_due is False
    assert projection.months_remaining == 0
    assert projection.is_on_track


def test_target_date_as_string() -> None:
    projection = project_goal(_goal(target_date='2025-09-11'), TODAY, 'flat30')
    assert projection.months_remaining == 6


@pytest.mark.parametrize('days, expected', [(0, 0), (29, 0), (30, 1), (59, 1), (365, 12), (-40, 0)])
def test_flat30_months(days, expected) -> None:
    assert months_until(TODAY + timedelta(days=days), TODAY, 'flat30') == expected


def test_calendar_months() -> None:
    assert months_until(date(2025, 9, 15), TODAY, 'calendar') == 6
    assert months_until(date(2025, 9, 14), TODAY, 'calendar') == 5
    assert months_until(date(2026, 3, 31), TODAY, 'calendar') == 12
    assert months_until(date(2025, 1, 1), TODAY, 'calendar') == 0


def test_status_labels_are_exclusive() -> None:
    goals = [
        _goal(target=1000, saved=1000, target_date=TODAY - timedelta(days=1)),
        _goal(saved=10, target_date=TODAY - timedelta(days=1)),
        _goal(contribution=20000),
        _goal(contribution=0),
    ]
    statuses = [project_goal(g, TODAY).status for g in goals]
    assert statuses == [
        GoalStatus.ACHIEVED,
        GoalStatus.PAST_DUE,
        GoalStatus.ON_TRACK,
        GoalStatus.BEHIND_SCHEDULE,
    ]


def test_summarize_goals() -> None:
    summary = summarize_goals([_goal(), _goal(target=80000, saved=50000, contribution=2000)], TODAY)
    assert summary.total_target == 200000
    assert summary.total_saved == 80000
    assert summary.total_monthly_contribution == 12000
    assert summary.overall_progress_pct == pytest.approx(40.0)
    assert len(summary.goals) == 2
