import pytest

from finance_tracker import config


def test_resolve_mode_falls_back_to_default() -> None:
    assert config.resolve_mode(None, config.GOAL_MONTH_MODES, 'flat30') == 'flat30'
    assert config.resolve_mode(' Calendar ', config.GOAL_MONTH_MODES, 'flat30') == 'calendar'


def test_resolve_mode_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        config.resolve_mode('fortnightly', config.MONTH_RANGE_MODES, 'legacy')


def test_budget_defaults_load() -> None:
    bands = config.load_config('budget')['bands']
    assert set(bands) == {'Needs', 'Wants', 'Investments', 'Savings'}
    assert config.get_config_value('budget', 'bands', 'Needs', 'target_low') == 55


def test_missing_config_value_uses_default() -> None:
    assert config.get_config_value('budget', 'bands', 'Luxuries', default='n/a') == 'n/a'
    assert config.get_config_value('does_not_exist', default={}) == {}


def test_load_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        config.load_config('does_not_exist')
