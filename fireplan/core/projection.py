from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from fireplan.core.rates import days_until, real_growth_rate, working_days, years_until
from fireplan.logger import get_app_logger
from fireplan.models import FireContribution, FireSettings

logger = get_app_logger(__name__)


# -----------------------------
# Defaults
# -----------------------------


class FireDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    withdrawalRate: float = 4.0        # the "4% rule"
    annualInflation: float = 2.5
    annualGrowthRate: float = 7.0
    holidayEntitlement: float = 25
    sippAccessAge: int = 57
    maxProjectionYears: int = 30
    postFireYears: int = 5


FIRE_DEFAULTS = FireDefaults()


# -----------------------------
# Engine input / output
# -----------------------------


class FireCalculatorInput(BaseModel):
    """Everything the projection needs, assembled from settings + live value."""

    model_config = ConfigDict(frozen=True)

    current_portfolio_value: float
    target_value: float
    annual_growth_rate: float  # percent, e.g. 7
    annual_inflation: float    # percent, e.g. 2.5
    annual_contribution: float
    year_of_birth: int
    sipp_access_age: int
    holiday_entitlement: float

    @classmethod
    def from_settings(cls, settings: FireSettings, current_portfolio_value: float) -> "FireCalculatorInput":
        return cls(
            current_portfolio_value=current_portfolio_value,
            target_value=settings.targetValue,
            annual_growth_rate=settings.annualGrowthRate,
            annual_inflation=settings.annualInflation,
            annual_contribution=total_annual_contribution(settings.contributions),
            year_of_birth=settings.yearOfBirth,
            sipp_access_age=settings.sippAccessAge,
            holiday_entitlement=settings.holidayEntitlement,
        )


class ProjectionYear(BaseModel):
    """One simulated calendar year, values in today's money."""

    model_config = ConfigDict(frozen=True)

    year: int
    age: int
    portfolio_value: float
    is_target_hit: bool
    is_sipp_accessible: bool


class Projection(BaseModel):
    model_config = ConfigDict(frozen=True)

    years: List[ProjectionYear]
    fire_year: Optional[int]
    fire_age: Optional[int]
    days_to_fire: Optional[int]
    working_days_to_fire: Optional[int]
    current_portfolio_value: float
    annual_contribution: float
    real_growth_rate: float
    target_value: float
    target_hit_in_window: bool


# -----------------------------
# Year-by-year growth
# -----------------------------


def project_year_value(previous_value: float, real_rate: float, annual_contribution: float) -> float:
    """
    newValue = previous * (1 + r) + contribution * (1 + r / 2)

    Contributions arrive monthly, so on average each one is invested for
    half of the year it was paid in.
    """
    growth_on_existing = previous_value * (1 + real_rate)
    contribution_with_growth = annual_contribution * (1 + real_rate / 2)
    return growth_on_existing + contribution_with_growth


def calculate_projection(inputs: FireCalculatorInput, now: Optional[datetime] = None) -> Projection:
    """
    Build the FIRE timeline from the current year.

    Conventions:
      - Year 0 is now.year and holds the current portfolio value as-is.
      - While accumulating, every year adds the annual contribution.
        The year the target is first hit still gets its contribution;
        only years strictly after it coast with zero contributions.
      - Stops after maxProjectionYears steps, or postFireYears past the
        first hit year, whichever comes first.
    """
    now = now or datetime.now()
    real_rate = real_growth_rate(inputs.annual_growth_rate, inputs.annual_inflation)
    current_year = now.year
    max_years = FIRE_DEFAULTS.maxProjectionYears
    post_years = FIRE_DEFAULTS.postFireYears

    years: List[ProjectionYear] = []
    fire_year: Optional[int] = None
    value = float(inputs.current_portfolio_value)

    for step in range(max_years + 1):
        year = current_year + step
        age = year - inputs.year_of_birth

        # fire_year is only set after the hit year is recorded
        contribution = 0.0 if fire_year is not None else inputs.annual_contribution
        if step > 0:
            value = project_year_value(value, real_rate, contribution)

        is_target_hit = value >= inputs.target_value
        years.append(
            ProjectionYear(
                year=year,
                age=age,
                portfolio_value=value,
                is_target_hit=is_target_hit,
                is_sipp_accessible=age >= inputs.sipp_access_age,
            )
        )

        if is_target_hit and fire_year is None:
            fire_year = year

        if fire_year is not None and year >= fire_year + post_years:
            break

    # ---------- Derived metrics ----------
    fire_age = fire_year - inputs.year_of_birth if fire_year is not None else None
    days_to_fire: Optional[int] = None
    working_days_to_fire: Optional[int] = None
    if fire_year is not None:
        days_to_fire = days_until(fire_year, now)
        working_days_to_fire = working_days(
            days_to_fire,
            years_until(fire_year, now),
            inputs.holiday_entitlement,
        )

    logger.debug(
        f"Projected {len(years)} years at real rate {real_rate:.4f}; fire_year={fire_year}"
    )

    return Projection(
        years=years,
        fire_year=fire_year,
        fire_age=fire_age,
        days_to_fire=days_to_fire,
        working_days_to_fire=working_days_to_fire,
        current_portfolio_value=inputs.current_portfolio_value,
        annual_contribution=inputs.annual_contribution,
        real_growth_rate=real_rate,
        target_value=inputs.target_value,
        target_hit_in_window=fire_year is not None,
    )


# -----------------------------
# FIRE number & contributions
# -----------------------------


def fire_number(monthly_spending: float, withdrawal_rate: float) -> float:
    """monthly spending * 12 * (100 / rate); 0 when the rate is not positive."""
    if withdrawal_rate <= 0:
        return 0.0
    return monthly_spending * 12 * (100 / withdrawal_rate)


def total_annual_contribution(contributions: Iterable[FireContribution]) -> float:
    """Sum of positive monthly amounts * 12; non-positive amounts are skipped."""
    monthly_total = sum(c.monthlyAmount for c in contributions if c.monthlyAmount > 0)
    return monthly_total * 12


def target_fire_year(settings: FireSettings) -> Optional[int]:
    """Resolve the optional target age / year into a calendar year."""
    if settings.targetFireYear is not None:
        return settings.targetFireYear
    if settings.targetFireAge is not None:
        return settings.yearOfBirth + settings.targetFireAge
    return None


def project_from_settings(
    settings: FireSettings,
    current_portfolio_value: float,
    now: Optional[datetime] = None,
) -> Projection:
    return calculate_projection(
        FireCalculatorInput.from_settings(settings, current_portfolio_value),
        now=now,
    )


__all__ = [
    "FIRE_DEFAULTS",
    "FireDefaults",
    "FireCalculatorInput",
    "ProjectionYear",
    "Projection",
    "project_year_value",
    "calculate_projection",
    "project_from_settings",
    "fire_number",
    "total_annual_contribution",
    "target_fire_year",
]
