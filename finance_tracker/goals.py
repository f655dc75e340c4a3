"""Savings goal projections.

Status is derived on every call from the goal's fields and the ``today``
passed in; nothing about a goal's status is stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Sequence, Tuple

from . import config
from .aggregation import clamp_percent, percent_of, sum_amounts
from .formatting import format_currency
from .models import Goal, parse_date


class GoalStatus(str, Enum):
    ACHIEVED = "achieved"
    PAST_DUE = "past_due"
    ON_TRACK = "on_track"
    BEHIND_SCHEDULE = "behind_schedule"

    @property
    def label(self) -> str:
        return {
            GoalStatus.ACHIEVED: "Goal Achieved",
            GoalStatus.PAST_DUE: "Past Due",
            GoalStatus.ON_TRACK: "On Track",
            GoalStatus.BEHIND_SCHEDULE: "Behind Schedule",
        }[self]


@dataclass(frozen=True)
class GoalProjection:
    goal: Goal
    progress_pct: float
    progress_pct_display: float
    remaining: float
    months_remaining: int
    required_monthly: float
    is_on_track: bool
    is_past_due: bool

    @property
    def is_achieved(self) -> bool:
        return self.progress_pct >= 100

    @property
    def status(self) -> GoalStatus:
        if self.is_achieved:
            return GoalStatus.ACHIEVED
        if self.is_past_due:
            return GoalStatus.PAST_DUE
        if self.is_on_track:
            return GoalStatus.ON_TRACK
        return GoalStatus.BEHIND_SCHEDULE

    @property
    def status_message(self) -> str:
        status = self.status
        if status is GoalStatus.ACHIEVED:
            return "Goal Achieved!"
        if status is GoalStatus.PAST_DUE:
            return f"Target date {parse_date(self.goal.target_date):%d %b %Y} has passed"
        if status is GoalStatus.ON_TRACK:
            return "You're on track to reach your goal!"
        return f"Need {format_currency(self.required_monthly)}/month to reach goal on time"


@dataclass(frozen=True)
class GoalsSummary:
    goals: Tuple[GoalProjection, ...]
    total_target: float
    total_saved: float
    total_monthly_contribution: float
    overall_progress_pct: float


def months_until(target: date, today: date, mode: Optional[str] = None) -> int:
    """Whole months from ``today`` to ``target``, never negative.

    ``flat30`` counts 30-day blocks; ``calendar`` counts calendar months,
    dropping the last one when its day-of-month has not been reached.
    """
    mode = config.resolve_mode(mode, config.GOAL_MONTH_MODES, config.GOAL_MONTH_MODE)
    if mode == "flat30":
        return max(0, (target - today).days // 30)
    months = (target.year - today.year) * 12 + (target.month - today.month)
    if target.day < today.day:
        months -= 1
    return max(0, months)


def project_goal(goal: Goal, today: date, month_mode: Optional[str] = None) -> GoalProjection:
    target_date = parse_date(goal.target_date)
    progress = percent_of(goal.current_saved, goal.target_amount)
    remaining = goal.target_amount - goal.current_saved
    months = months_until(target_date, today, month_mode)
    required = remaining / months if months > 0 else 0.0
    return GoalProjection(
        goal=goal,
        progress_pct=progress,
        progress_pct_display=clamp_percent(progress),
        remaining=remaining,
        months_remaining=months,
        required_monthly=required,
        is_on_track=goal.monthly_contribution >= required,
        is_past_due=target_date < today and progress < 100,
    )


def summarize_goals(goals: Sequence[Goal], today: date, month_mode: Optional[str] = None) -> GoalsSummary:
    target = sum_amounts(goals, 'target_amount')
    saved = sum_amounts(goals, 'current_saved')
    return GoalsSummary(
        goals=tuple(project_goal(g, today, month_mode) for g in goals),
        total_target=target,
        total_saved=saved,
        total_monthly_contribution=sum_amounts(goals, 'monthly_contribution'),
        overall_progress_pct=percent_of(saved, target),
    )
