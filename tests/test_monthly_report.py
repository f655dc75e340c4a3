import importlib.util
from datetime import date
from pathlib import Path

import pytest

from finance_tracker import config
from finance_tracker.models import EntityKind, ExpenseEntry, IncomeEntry
from finance_tracker.store import init_db

SCRIPT_PATH = Path(__file__).resolve().parents[1] / 'scripts' / 'monthly_report.py'


def _load_script():
    spec = importlib.util.spec_from_file_location('monthly_report_test', SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_report_prints_month(tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.setattr(config, 'CURRENCY_SYMBOL', '₹')
    db_path = tmp_path / 'finance.db'
    store = init_db(db_path)
    store.create(EntityKind.INCOME, IncomeEntry(date=date(2024, 5, 1), source='Salary', amount=50000, user_id='u1'))
    store.create(EntityKind.EXPENSE, ExpenseEntry(
        date=date(2024, 5, 3), category='Fixed', sub_category='Rent', amount=20000, user_id='u1',
    ))

    _load_script().cli(['u1', '--month', '2024-05', '--db', str(db_path)])
    out = capsys.readouterr().out
    assert 'Monthly summary for u1 · 2024-05' in out
    assert '₹50,000.00' in out
    assert 'Rent' in out


def test_report_without_records(tmp_path, capsys) -> None:
    _load_script().cli(['nobody', '--db', str(tmp_path / 'finance.db')])
    assert "No records stored for user 'nobody'" in capsys.readouterr().out


def test_malformed_month_is_a_usage_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _load_script().cli(['u1', '--month', 'May', '--db', str(tmp_path / 'finance.db')])
    assert excinfo.value.code == 2
    assert 'YYYY-MM' in capsys.readouterr().err


def test_unusable_database_is_a_usage_error(tmp_path, capsys) -> None:
    # A directory cannot be opened as a database file
    with pytest.raises(SystemExit) as excinfo:
        _load_script().cli(['u1', '--db', str(tmp_path)])
    assert excinfo.value.code == 2
    assert 'Traceback' not in capsys.readouterr().err
