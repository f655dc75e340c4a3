from datetime import date

import pytest

from finance_tracker.models import IncomeEntry
from finance_tracker.periods import (
    DateRange,
    MonthKey,
    current_month_key,
    filter_by_period,
    month_range,
    parse_month_key,
    shift_month,
)


def test_parse_month_key() -> None:
    assert parse_month_key('2024-02') == MonthKey(2024, 2)
    assert str(MonthKey(2024, 2)) == '2024-02'


@pytest.mark.parametrize('bad', ['2024-13', '2024-00', '2024/02', '24-02', ''])
def test_parse_month_key_rejects_malformed(bad) -> None:
    with pytest.raises(ValueError):
        parse_month_key(bad)


def test_legacy_range_rolls_day_31_into_next_month() -> None:
    assert month_range('2024-01', 'legacy') == DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert month_range('2024-02', 'legacy') == DateRange(date(2024, 2, 1), date(2024, 3, 2))
    assert month_range('2023-02', 'legacy').end == date(2023, 3, 3)
    assert month_range('2024-04', 'legacy').end == date(2024, 5, 1)


def test_calendar_range_ends_on_last_day() -> None:
    assert month_range('2024-02', 'calendar') == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert month_range('2024-04', 'calendar').end == date(2024, 4, 30)
    assert month_range('2024-12', 'calendar').end == date(2024, 12, 31)


def test_month_range_is_deterministic() -> None:
    assert month_range('2024-06', 'legacy') == month_range(MonthKey(2024, 6), 'legacy')


def test_month_range_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        month_range('2024-06', 'fortnightly')


def test_month_range_uses_configured_default(monkeypatch) -> None:
    from finance_tracker import config

    monkeypatch.setattr(config, 'MONTH_RANGE_MODE', 'calendar')
    assert month_range('2024-04').end == date(2024, 4, 30)
    monkeypatch.setattr(config, 'MONTH_RANGE_MODE', 'legacy')
    assert month_range('2024-04').end == date(2024, 5, 1)


def test_shift_month_crosses_years() -> None:
    assert shift_month('2024-01', -1) == MonthKey(2023, 12)
    assert shift_month('2024-12', 1) == MonthKey(2025, 1)
    assert shift_month('2024-06', -18) == MonthKey(2022, 12)


def test_current_month_key() -> None:
    assert current_month_key(date(2025, 3, 17)) == MonthKey(2025, 3)


def test_filter_by_period() -> None:
    incomes = [
        IncomeEntry(date=date(2024, 4, 30), source='Salary', amount=1),
        IncomeEntry(date=date(2024, 5, 1), source='Bonus', amount=2),
        IncomeEntry(date=date(2024, 3, 31), source='Old', amount=3),
    ]
    legacy = filter_by_period(incomes, month_range('2024-04', 'legacy'))
    calendar = filter_by_period(incomes, month_range('2024-04', 'calendar'))
    assert [i.source for i in legacy] == ['Salary', 'Bonus']
    assert [i.source for i in calendar] == ['Salary']
