from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from fireplan.core.debt import apply_monthly_update
from fireplan.core.formatting import format_compact_value
from fireplan.core.projection import FIRE_DEFAULTS, Projection, project_year_value
from fireplan.models import DebtPortfolioData, FireSettings, SplitPortfolioData

DEBT_FREE_TAIL_YEARS = 2


# -----------------------------
# Bar records
# -----------------------------


class ChartBar(BaseModel):
    """Growth bar: base compounding on the starting value + contribution impact."""

    model_config = ConfigDict(frozen=True)

    year: int
    label: str
    total_value: float
    base_growth_value: float
    contribution_value: float
    is_fire_year: bool
    base_label: str
    contrib_label: Optional[str] = None


class SplitChartBar(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    label: str
    accessible_value: float
    locked_value: float
    total_value: float
    accessible_label: str
    locked_label: str
    is_sipp_accessible: bool
    is_fire_year: bool


class DebtChartBar(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    label: str
    total_debt: float
    principal_remaining: float
    interest_in_balance: float
    principal_label: str
    interest_label: str
    cumulative_interest: float
    is_debt_free_year: bool


# -----------------------------
# Growth bars
# -----------------------------


def compute_chart_bars(projection: Projection, currency: str) -> List[ChartBar]:
    """
    Split each projected year into base growth and contribution impact.

      base[0] = current value
      base[n] = base[n-1] * (1 + r)
      contribution[n] = max(0, total[n] - base[n])
    """
    years = projection.years
    if not years:
        return []

    base_series = [projection.current_portfolio_value]
    for _ in years[1:]:
        base_series.append(base_series[-1] * (1 + projection.real_growth_rate))

    bars: List[ChartBar] = []
    prev_target_hit = False
    for year_data, base in zip(years, base_series):
        # clamp float noise below zero
        contribution = max(0.0, year_data.portfolio_value - base)
        is_fire_year = year_data.is_target_hit and not prev_target_hit
        prev_target_hit = year_data.is_target_hit

        bars.append(
            ChartBar(
                year=year_data.year,
                label=format_compact_value(year_data.portfolio_value, currency),
                total_value=year_data.portfolio_value,
                base_growth_value=base,
                contribution_value=contribution,
                is_fire_year=is_fire_year,
                base_label=format_compact_value(base, currency),
                contrib_label=format_compact_value(contribution, currency) if contribution > 0 else None,
            )
        )
    return bars


# -----------------------------
# Accessible vs locked bars
# -----------------------------


def compute_split_chart_bars(
    projection: Projection,
    split: SplitPortfolioData,
    settings: FireSettings,
    currency: str,
) -> List[SplitChartBar]:
    """
    Project accessible and locked balances as two independent series.

    Both use the engine's recurrence and stop contributing after the
    FIRE year (the FIRE year itself still contributes).
    """
    years = projection.years
    if not years:
        return []

    rate = projection.real_growth_rate
    fire_year = projection.fire_year
    sipp_access_year = settings.yearOfBirth + settings.sippAccessAge

    accessible_series = [split.accessibleValue]
    locked_series = [split.lockedValue]
    for year_data in years[1:]:
        pre_fire = fire_year is None or year_data.year <= fire_year
        acc_contrib = split.accessibleAnnualContribution if pre_fire else 0.0
        lock_contrib = split.lockedAnnualContribution if pre_fire else 0.0
        accessible_series.append(project_year_value(accessible_series[-1], rate, acc_contrib))
        locked_series.append(project_year_value(locked_series[-1], rate, lock_contrib))

    bars: List[SplitChartBar] = []
    prev_target_hit = False
    for year_data, accessible, locked in zip(years, accessible_series, locked_series):
        total = accessible + locked
        is_fire_year = year_data.is_target_hit and not prev_target_hit
        prev_target_hit = year_data.is_target_hit

        bars.append(
            SplitChartBar(
                year=year_data.year,
                label=format_compact_value(total, currency),
                accessible_value=accessible,
                locked_value=locked,
                total_value=total,
                accessible_label=format_compact_value(accessible, currency),
                locked_label=format_compact_value(locked, currency) if locked > 0 else "",
                is_sipp_accessible=year_data.year >= sipp_access_year,
                is_fire_year=is_fire_year,
            )
        )
    return bars


# -----------------------------
# Debt bars
# -----------------------------


def compute_debt_chart_bars(
    debt: DebtPortfolioData,
    projection: Projection,
    currency: str,
) -> List[DebtChartBar]:
    """
    Yearly debt snapshots from a monthly amortisation of every position.

    Bar 0 is today's balance, all principal. Later bars split the
    outstanding balance into the interest accrued during that year
    (capped at the balance) and the remaining principal. The series ends
    two years after the first debt-free year, or at the projection cap.
    """
    if not debt.positions or debt.totalDebt <= 0:
        return []

    start_year = projection.years[0].year if projection.years else None
    if start_year is None:
        return []

    balances = [p.currentBalance for p in debt.positions]
    cumulative_interest = 0.0
    debt_free_index: Optional[int] = None

    bars: List[DebtChartBar] = [
        DebtChartBar(
            year=start_year,
            label=format_compact_value(debt.totalDebt, currency),
            total_debt=debt.totalDebt,
            principal_remaining=debt.totalDebt,
            interest_in_balance=0.0,
            principal_label=format_compact_value(debt.totalDebt, currency),
            interest_label="",
            cumulative_interest=0.0,
            is_debt_free_year=False,
        )
    ]

    for index in range(1, FIRE_DEFAULTS.maxProjectionYears + 1):
        year_interest = 0.0
        for _ in range(12):
            for i, position in enumerate(debt.positions):
                if balances[i] <= 0:
                    continue
                update = apply_monthly_update(balances[i], position.apr, position.monthlyRepayment)
                balances[i] = 0.0 if update.is_paid_off else update.new_balance
                year_interest += update.interest_charged

        cumulative_interest += year_interest
        total = sum(balances)
        interest_in_balance = min(year_interest, total)
        principal_remaining = total - interest_in_balance

        is_debt_free = total <= 0 and debt_free_index is None
        if is_debt_free:
            debt_free_index = index

        bars.append(
            DebtChartBar(
                year=start_year + index,
                label=format_compact_value(total, currency),
                total_debt=total,
                principal_remaining=principal_remaining,
                interest_in_balance=interest_in_balance,
                principal_label=format_compact_value(principal_remaining, currency),
                interest_label=(
                    format_compact_value(interest_in_balance, currency) if interest_in_balance > 0 else ""
                ),
                cumulative_interest=cumulative_interest,
                is_debt_free_year=is_debt_free,
            )
        )

        if debt_free_index is not None and index >= debt_free_index + DEBT_FREE_TAIL_YEARS:
            break

    return bars


__all__ = [
    "ChartBar",
    "SplitChartBar",
    "DebtChartBar",
    "compute_chart_bars",
    "compute_split_chart_bars",
    "compute_debt_chart_bars",
]
