"""Monthly debt amortisation helpers."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict

PAID_OFF_THRESHOLD = 0.01  # sub-penny remainder counts as cleared


class MonthlyUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    new_balance: float
    interest_charged: float
    principal_paid: float
    is_paid_off: bool


class RepaymentStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int  # 1-based
    balance: float
    interest: float
    principal: float
    cumulative_interest: float
    cumulative_principal: float


def monthly_rate(apr: float) -> float:
    return apr / 12 / 100


def apply_monthly_update(balance: float, apr: float, monthly_repayment: float) -> MonthlyUpdate:
    """
    One month of interest then repayment:
      interest    = balance * APR / 12 / 100
      new balance = max(0, balance - repayment + interest)
    """
    if balance <= 0:
        return MonthlyUpdate(new_balance=0.0, interest_charged=0.0, principal_paid=0.0, is_paid_off=True)

    interest = balance * monthly_rate(apr)
    balance_with_interest = balance + interest

    if monthly_repayment >= balance_with_interest:
        return MonthlyUpdate(
            new_balance=0.0,
            interest_charged=interest,
            principal_paid=balance,
            is_paid_off=True,
        )

    new_balance = balance_with_interest - monthly_repayment
    return MonthlyUpdate(
        new_balance=max(0.0, new_balance),
        interest_charged=interest,
        principal_paid=max(0.0, monthly_repayment - interest),
        is_paid_off=new_balance <= PAID_OFF_THRESHOLD,
    )


def project_repayment_schedule(
    balance: float,
    apr: float,
    monthly_repayment: float,
    max_months: int = 600,
) -> List[RepaymentStep]:
    """Month-by-month schedule until paid off or `max_months` is reached."""
    steps: List[RepaymentStep] = []
    if balance <= 0 or monthly_repayment <= 0:
        return steps

    current = balance
    cumulative_interest = 0.0
    cumulative_principal = 0.0

    for month in range(1, max_months + 1):
        update = apply_monthly_update(current, apr, monthly_repayment)
        cumulative_interest += update.interest_charged
        cumulative_principal += update.principal_paid
        steps.append(
            RepaymentStep(
                month=month,
                balance=update.new_balance,
                interest=update.interest_charged,
                principal=update.principal_paid,
                cumulative_interest=cumulative_interest,
                cumulative_principal=cumulative_principal,
            )
        )
        current = update.new_balance
        if update.is_paid_off:
            break

    return steps


__all__ = [
    "MonthlyUpdate",
    "RepaymentStep",
    "apply_monthly_update",
    "project_repayment_schedule",
]
