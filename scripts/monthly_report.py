#!/usr/bin/env python3
"""Print a user's monthly summary from the SQLite record store."""

from __future__ import annotations

import argparse
import sqlite3
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker.analytics import MonthlyFinanceAnalytics
from finance_tracker.config import configure_logging
from finance_tracker.formatting import format_currency, format_percent
from finance_tracker.periods import current_month_key, parse_month_key
from finance_tracker.snapshot import load_month_snapshot
from finance_tracker.store import RecordStoreError, SQLiteRecordStore, init_db, row_counts


def main(user_id: str, month: Optional[str] = None, db_path: Optional[str] = None) -> None:
    today = date.today()
    month_key = parse_month_key(month) if month else current_month_key(today)
    store: SQLiteRecordStore = init_db(db_path)
    month = str(month_key)

    counts = row_counts(store, user_id)
    if not any(counts.values()):
        print(f"No records stored for user {user_id!r}.")
        return

    analytics = MonthlyFinanceAnalytics(load_month_snapshot(store, user_id, month, today))
    summary = analytics.monthly_summary()

    print(f"Monthly summary for {user_id} · {month}")
    print(f"  Income:        {format_currency(summary['total_income'])}")
    print(
        f"  Expenses:      {format_currency(summary['total_expenses'])} "
        f"(fixed {format_currency(summary['fixed_expenses'])}, "
        f"variable {format_currency(summary['variable_expenses'])})"
    )
    print(f"  SIP:           {format_currency(summary['total_sip'])}")
    print(f"  Savings left:  {format_currency(summary['savings_left'])} ({format_percent(summary['savings_rate'])})")
    print(f"  EMI:           {format_currency(summary['total_emi'])} (debt-to-income {format_percent(summary['debt_to_income'])})")
    print(
        f"  Portfolio:     {format_currency(summary['total_current_value'])} "
        f"returns {format_currency(summary['total_returns'])} ({format_percent(summary['returns_pct'], 2)})"
    )

    breakdown = analytics.expense_breakdown()
    if not breakdown.empty:
        print("\nExpenses by sub-category:")
        print(breakdown.to_string())

    print("\nBudget split:")
    for bucket in analytics.budget_split().buckets:
        marker = '' if bucket.within_target else '  (outside target)'
        print(f"  {bucket.label:<22} {format_percent(bucket.pct):>7}  target {bucket.target_low:g}-{bucket.target_high:g}%{marker}")

    goals = analytics.goal_summary()
    if goals.goals:
        print("\nGoals:")
        for projection in goals.goals:
            print(
                f"  {projection.goal.goal_name:<22} {format_percent(projection.progress_pct):>7}  "
                f"{projection.status.label}: {projection.status_message}"
            )


def cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Print a monthly finance summary.')
    parser.add_argument('user', help='User id whose records to summarize')
    parser.add_argument('--month', help='Month as YYYY-MM (defaults to the current month)')
    parser.add_argument('--db', help='Path to the SQLite database')
    parser.add_argument('--log-level', default=None, help='Logging level, e.g. DEBUG')
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        main(args.user, month=args.month, db_path=args.db)
    except (RecordStoreError, sqlite3.Error, ValueError) as exc:
        parser.error(str(exc))


if __name__ == '__main__':
    cli()
