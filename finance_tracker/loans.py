"""Loan (EMI) progress and debt load.

``remaining_months`` and ``outstanding_principal`` are the user's own
figures.  No amortization schedule is derived from the interest rate and
the two are not checked against each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .aggregation import clamp_percent, percent_of, sum_amounts
from .models import Loan


@dataclass(frozen=True)
class LoanProjection:
    loan: Loan
    paid_amount: float
    paid_pct: float
    paid_pct_display: float

    @property
    def remaining_months(self) -> int:
        return self.loan.remaining_months

    @property
    def outstanding_principal(self) -> float:
        return self.loan.outstanding_principal


@dataclass(frozen=True)
class LoanSummary:
    loans: Tuple[LoanProjection, ...]
    total_emi: float
    total_outstanding: float
    debt_to_income: float


def project_loan(loan: Loan) -> LoanProjection:
    """Share of the loan already repaid.

    ``paid_pct_display`` is clamped to [0, 100] so that an outstanding
    principal above the loan amount shows 0% instead of a negative bar.
    """
    paid = loan.total_amount - loan.outstanding_principal
    paid_pct = percent_of(paid, loan.total_amount)
    return LoanProjection(
        loan=loan,
        paid_amount=paid,
        paid_pct=paid_pct,
        paid_pct_display=clamp_percent(paid_pct),
    )


def total_emi(loans: Sequence[Loan]) -> float:
    return sum_amounts(loans, 'emi_amount')


def total_outstanding(loans: Sequence[Loan]) -> float:
    return sum_amounts(loans, 'outstanding_principal')


def debt_to_income(total_emi_amount: float, total_income: float) -> float:
    return percent_of(total_emi_amount, total_income)


def summarize_loans(loans: Sequence[Loan], total_income: float) -> LoanSummary:
    emi = total_emi(loans)
    return LoanSummary(
        loans=tuple(project_loan(loan) for loan in loans),
        total_emi=emi,
        total_outstanding=total_outstanding(loans),
        debt_to_income=debt_to_income(emi, total_income),
    )
