"""Streamlit app for the finance tracker.

The page shows the monthly summary for one user and month (income,
expenses, EMIs, investments, goals and the budget split) and offers
sidebar forms to add records.  The record tables delete entries and
edit loans, funds and goals in place.  All numbers come from
:class:`finance_tracker.analytics.MonthlyFinanceAnalytics`; this module
only lays them out.

To run the dashboard from the command line::

    streamlit run finance_tracker/dashboard.py

or use ``python run_dashboard.py``.
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

if __package__:
    from . import visualization as viz
    from .analytics import MonthlyFinanceAnalytics
    from .config import configure_logging
    from .formatting import format_currency, format_percent
    from .funds import allocation_frame
    from .goals import GoalStatus
    from .models import (
        EXPENSE_SUBCATEGORIES,
        PAYMENT_METHODS,
        EntityKind,
        ExpenseCategory,
        ExpenseEntry,
        Fund,
        FundType,
        Goal,
        IncomeEntry,
        Loan,
        Record,
        RecordValidationError,
        parse_date,
        validate_record,
    )
    from .periods import MonthKey, current_month_key, shift_month
    from .snapshot import load_month_snapshot
    from .store import RecordStore, RecordStoreError, init_db
else:
    # Executed directly by ``streamlit run``: make the package importable.
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from finance_tracker import visualization as viz  # type: ignore
    from finance_tracker.analytics import MonthlyFinanceAnalytics  # type: ignore
    from finance_tracker.config import configure_logging  # type: ignore
    from finance_tracker.formatting import format_currency, format_percent  # type: ignore
    from finance_tracker.funds import allocation_frame  # type: ignore
    from finance_tracker.goals import GoalStatus  # type: ignore
    from finance_tracker.models import (  # type: ignore
        EXPENSE_SUBCATEGORIES,
        PAYMENT_METHODS,
        EntityKind,
        ExpenseCategory,
        ExpenseEntry,
        Fund,
        FundType,
        Goal,
        IncomeEntry,
        Loan,
        Record,
        RecordValidationError,
        parse_date,
        validate_record,
    )
    from finance_tracker.periods import MonthKey, current_month_key, shift_month  # type: ignore
    from finance_tracker.snapshot import load_month_snapshot  # type: ignore
    from finance_tracker.store import RecordStore, RecordStoreError, init_db  # type: ignore


def month_options(today: date, count: int = 24) -> List[MonthKey]:
    """The current month followed by the ``count - 1`` months before it."""
    current = current_month_key(today)
    return [shift_month(current, -i) for i in range(count)]


def submit_record(store: RecordStore, record: Record) -> bool:
    """Validate and store a new record, reporting the outcome on the page."""
    kind = EntityKind.for_record(record)
    try:
        validate_record(record)
    except RecordValidationError as exc:
        st.error(f"Could not save: {exc}")
        return False
    if store.create(kind, record) is None:
        st.error("Saving failed. The record was not stored.")
        return False
    st.success("Saved.")
    return True


def delete_record(store: RecordStore, kind: EntityKind, user_id: str, record_id: int) -> bool:
    if not store.delete(kind, user_id, record_id):
        st.error("Delete failed. The record is unchanged.")
        return False
    st.success("Deleted.")
    return True


def update_record(
    store: RecordStore,
    kind: EntityKind,
    user_id: str,
    record_id: int,
    changes: Dict[str, Any],
) -> bool:
    """Apply ``changes`` to a stored loan, fund or goal, reporting the outcome."""
    if not store.update(kind, user_id, record_id, changes):
        st.error("Update failed. The record is unchanged.")
        return False
    st.success("Updated.")
    return True


# Fields offered by the per-record edit forms
EDITABLE_FIELDS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.LOAN: ('emi_amount', 'interest_rate_pct', 'remaining_months', 'outstanding_principal', 'end_date'),
    EntityKind.FUND: ('current_value', 'invested_amount', 'sip_amount', 'lumpsum_amount'),
    EntityKind.GOAL: ('current_saved', 'monthly_contribution', 'target_amount', 'target_date'),
}


def changed_fields(record: Record, values: Dict[str, Any]) -> Dict[str, Any]:
    """The entries of ``values`` that differ from ``record``."""
    return {name: value for name, value in values.items() if getattr(record, name) != value}


def _rerun() -> None:
    if hasattr(st, "rerun"):
        st.rerun()
    else:  # pragma: no cover - older Streamlit
        st.experimental_rerun()


def render_record_forms(store: RecordStore, user_id: str, today: date) -> None:
    """Sidebar forms for adding each kind of record."""
    st.sidebar.header("Add records")

    with st.sidebar.expander("Income"):
        with st.form("income_form", clear_on_submit=True):
            entry_date = st.date_input("Date", value=today, key="income_date")
            source = st.text_input("Source")
            amount = st.number_input("Amount", min_value=0.0, step=100.0, key="income_amount")
            account = st.text_input("Account")
            notes = st.text_input("Notes")
            if st.form_submit_button("Add income"):
                if submit_record(store, IncomeEntry(
                    date=entry_date, source=source, amount=amount,
                    account=account, notes=notes, user_id=user_id,
                )):
                    _rerun()

    with st.sidebar.expander("Expense"):
        category = st.selectbox("Category", [c.value for c in ExpenseCategory], key="expense_category")
        with st.form("expense_form", clear_on_submit=True):
            entry_date = st.date_input("Date", value=today, key="expense_date")
            sub_category = st.selectbox(
                "Sub category", sorted(EXPENSE_SUBCATEGORIES[ExpenseCategory(category)])
            )
            amount = st.number_input("Amount", min_value=0.0, step=100.0, key="expense_amount")
            payment_method = st.selectbox("Payment method", list(PAYMENT_METHODS))
            note = st.text_input("Vendor / note")
            if st.form_submit_button("Add expense"):
                if submit_record(store, ExpenseEntry(
                    date=entry_date, category=category, sub_category=sub_category,
                    amount=amount, payment_method=payment_method, note=note, user_id=user_id,
                )):
                    _rerun()

    with st.sidebar.expander("Loan / EMI"):
        with st.form("loan_form", clear_on_submit=True):
            loan_type = st.text_input("Loan type")
            total_amount = st.number_input("Total amount", min_value=0.0, step=1000.0)
            interest_rate = st.number_input("Interest rate (%)", min_value=0.0, step=0.1)
            emi_amount = st.number_input("EMI amount", min_value=0.0, step=100.0)
            start_date = st.date_input("Start date", value=today, key="loan_start")
            end_date = st.date_input("End date", value=today, key="loan_end")
            remaining_months = st.number_input("Remaining months", min_value=0, step=1)
            outstanding = st.number_input("Outstanding principal", min_value=0.0, step=1000.0)
            if st.form_submit_button("Add loan"):
                if submit_record(store, Loan(
                    loan_type=loan_type, total_amount=total_amount, interest_rate_pct=interest_rate,
                    emi_amount=emi_amount, start_date=start_date, end_date=end_date,
                    remaining_months=int(remaining_months), outstanding_principal=outstanding,
                    user_id=user_id,
                )):
                    _rerun()

    with st.sidebar.expander("Mutual fund"):
        with st.form("fund_form", clear_on_submit=True):
            fund_name = st.text_input("Fund name")
            fund_type = st.selectbox("Fund type", [t.value for t in FundType])
            sip_amount = st.number_input("Monthly SIP", min_value=0.0, step=500.0)
            sip_day = st.number_input("SIP day (0 for none)", min_value=0, max_value=31, step=1)
            lumpsum = st.number_input("Lumpsum", min_value=0.0, step=1000.0)
            invested = st.number_input("Invested amount", min_value=0.0, step=1000.0)
            current = st.number_input("Current value", min_value=0.0, step=1000.0)
            if st.form_submit_button("Add fund"):
                if submit_record(store, Fund(
                    fund_name=fund_name, fund_type=fund_type, sip_amount=sip_amount,
                    sip_day_of_month=int(sip_day) or None, lumpsum_amount=lumpsum,
                    invested_amount=invested, current_value=current, user_id=user_id,
                )):
                    _rerun()

    with st.sidebar.expander("Goal"):
        with st.form("goal_form", clear_on_submit=True):
            goal_name = st.text_input("Goal name")
            target_amount = st.number_input("Target amount", min_value=0.0, step=1000.0)
            target_date = st.date_input("Target date", value=today, key="goal_date")
            contribution = st.number_input("Monthly contribution", min_value=0.0, step=500.0)
            saved = st.number_input("Currently saved", min_value=0.0, step=1000.0)
            if st.form_submit_button("Add goal"):
                if submit_record(store, Goal(
                    goal_name=goal_name, target_amount=target_amount, target_date=target_date,
                    monthly_contribution=contribution, current_saved=saved, user_id=user_id,
                )):
                    _rerun()


def render_summary(analytics: MonthlyFinanceAnalytics) -> None:
    summary = analytics.monthly_summary()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", format_currency(summary['total_income']))
    col2.metric(
        "Total Expenses",
        format_currency(summary['total_expenses']),
        help=(
            f"Fixed: {format_currency(summary['fixed_expenses'])} | "
            f"Variable: {format_currency(summary['variable_expenses'])}"
        ),
    )
    col3.metric("Investments (SIP)", format_currency(summary['total_sip']))
    col4.metric(
        "Savings Left",
        format_currency(summary['savings_left']),
        f"{format_percent(summary['savings_rate'])} of income",
    )


def render_loans(analytics: MonthlyFinanceAnalytics) -> None:
    st.subheader("EMI Commitments")
    loans = analytics.loan_summary()
    if not loans.loans:
        st.info("No active loans")
        return
    for projection in loans.loans:
        loan = projection.loan
        st.markdown(
            f"**{loan.loan_type}** · {format_currency(loan.emi_amount)}/month · "
            f"{loan.remaining_months} months left · "
            f"Outstanding {format_currency(loan.outstanding_principal)}"
        )
        st.progress(projection.paid_pct_display / 100, text=f"Paid {format_percent(projection.paid_pct_display)}")
    st.markdown(f"**Total Monthly EMI:** {format_currency(loans.total_emi)}")
    if analytics.total_income > 0:
        st.caption(f"Debt-to-Income: {format_percent(loans.debt_to_income)}")


def render_portfolio(analytics: MonthlyFinanceAnalytics) -> None:
    st.subheader("Investment Performance")
    portfolio = analytics.portfolio_summary()
    if not portfolio.funds:
        st.info("No mutual funds added")
        return
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Invested", format_currency(portfolio.total_invested))
    col2.metric("Current Value", format_currency(portfolio.total_current_value))
    col3.metric(
        "Total Returns",
        format_currency(portfolio.total_returns),
        format_percent(portfolio.returns_pct, digits=2),
    )
    st.caption(" | ".join(f"{count} {name}" for name, count in portfolio.type_counts.items()))
    st.plotly_chart(viz.create_allocation_chart(portfolio), use_container_width=True)
    st.dataframe(allocation_frame(portfolio), hide_index=True, use_container_width=True)


def render_goals(analytics: MonthlyFinanceAnalytics) -> None:
    st.subheader("Goals Progress")
    goals = analytics.goal_summary()
    if not goals.goals:
        st.info("No goals set yet")
        return
    for projection in goals.goals:
        goal = projection.goal
        with st.expander(f"{goal.goal_name} · {format_percent(projection.progress_pct)}"):
            col1, col2 = st.columns(2)
            col1.metric("Target", format_currency(goal.target_amount))
            col1.metric("Saved", format_currency(goal.current_saved))
            col2.metric("Monthly Contribution", format_currency(goal.monthly_contribution))
            col2.metric("Months Remaining", projection.months_remaining)
            st.progress(projection.progress_pct_display / 100)
            status = projection.status
            if status in (GoalStatus.ACHIEVED, GoalStatus.ON_TRACK):
                st.success(projection.status_message)
            elif status is GoalStatus.PAST_DUE:
                st.error(projection.status_message)
            else:
                st.warning(projection.status_message)
    st.plotly_chart(viz.create_goal_progress_chart(goals), use_container_width=True)


def render_budget(analytics: MonthlyFinanceAnalytics) -> None:
    st.subheader("Quick Budget Analysis (50/30/20 Modified)")
    split = analytics.budget_split()
    columns = st.columns(len(split.buckets))
    for column, bucket in zip(columns, split.buckets):
        column.metric(bucket.label, format_percent(bucket.pct))
        column.caption(f"Target: {bucket.target_low:g}-{bucket.target_high:g}%")
    st.plotly_chart(viz.create_budget_split_chart(split), use_container_width=True)


def render_edit_form(store: RecordStore, user_id: str, kind: EntityKind, record: Record) -> None:
    """Form pre-filled with the editable fields of one loan, fund or goal."""
    with st.form(f"edit_{kind.value}_{record.id}"):
        values: Dict[str, Any] = {}
        for name in EDITABLE_FIELDS[kind]:
            label = name.replace('_', ' ').capitalize()
            current = getattr(record, name)
            key = f"edit_{kind.value}_{record.id}_{name}"
            if name.endswith('date'):
                values[name] = st.date_input(label, value=parse_date(current), key=key)
            elif name == 'remaining_months':
                values[name] = int(st.number_input(label, min_value=0, value=int(current or 0), step=1, key=key))
            else:
                values[name] = float(st.number_input(label, min_value=0.0, value=float(current or 0.0), key=key))
        if st.form_submit_button("Save changes"):
            changes = changed_fields(record, values)
            if not changes:
                st.info("Nothing to update")
            elif update_record(store, kind, user_id, record.id, changes):
                _rerun()


def render_records(store: RecordStore, user_id: str, analytics: MonthlyFinanceAnalytics) -> None:
    """Tables of the month's records with delete and edit controls."""
    for kind, label in (
        (EntityKind.INCOME, "Income"),
        (EntityKind.EXPENSE, "Expenses"),
        (EntityKind.LOAN, "Loans"),
        (EntityKind.FUND, "Mutual funds"),
        (EntityKind.GOAL, "Goals"),
    ):
        records = {r.id: r for r in analytics.records(kind)}
        df = analytics.records_frame(kind)
        with st.expander(f"{label} ({len(df)})"):
            if df.empty:
                st.info(f"No {label.lower()} recorded")
                continue
            st.dataframe(df.drop(columns=['user_id']), use_container_width=True)
            record_id = st.selectbox("Record id", list(records), key=f"select_{kind.value}")
            if st.button("Delete", key=f"delete_button_{kind.value}"):
                if delete_record(store, kind, user_id, int(record_id)):
                    _rerun()
            if kind.updatable:
                render_edit_form(store, user_id, kind, records[record_id])


def main(today: Optional[date] = None) -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Finance Tracker", layout="wide")
    today = today or date.today()
    store = init_db()

    user_id = st.sidebar.text_input("User", value=os.getenv("FINTRACK_USER", "default"))
    months = month_options(today)
    month = st.sidebar.selectbox("Month", months, format_func=str)

    render_record_forms(store, user_id, today)

    st.title("Monthly Summary")
    try:
        snapshot = load_month_snapshot(store, user_id, month, today)
    except RecordStoreError as exc:
        st.error(f"Could not load records: {exc}")
        st.stop()
        return
    analytics = MonthlyFinanceAnalytics(snapshot)

    render_summary(analytics)
    left, right = st.columns(2)
    with left:
        render_loans(analytics)
    with right:
        render_portfolio(analytics)

    income_sources = analytics.income_by_source()
    if not income_sources.empty:
        st.subheader("Income by Source")
        st.dataframe(pd.DataFrame(income_sources), use_container_width=True)

    breakdown = analytics.expense_breakdown()
    if not breakdown.empty:
        st.subheader("Expense Breakdown")
        st.plotly_chart(viz.create_expense_breakdown_chart(breakdown), use_container_width=True)
        st.dataframe(pd.DataFrame(breakdown), use_container_width=True)

    render_goals(analytics)
    render_budget(analytics)
    render_records(store, user_id, analytics)


if __name__ == "__main__":  # pragma: no cover
    main()
