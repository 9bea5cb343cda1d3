"""
Plain-text calculation summaries.

Each chart gets a short explanation of how its numbers were produced.
The text is embedded as the SVG <title> (tooltip) and returned by the API
alongside the chart.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fireplan.core.debt import PAID_OFF_THRESHOLD, project_repayment_schedule
from fireplan.core.formatting import format_compact_value
from fireplan.core.projection import Projection
from fireplan.models import DebtPortfolioData, FireSettings, SplitPortfolioData

RULE = "-" * 39


def _plain(value: float) -> str:
    """7.0 -> "7", 2.5 -> "2.5"."""
    return f"{value:g}"


def build_growth_chart_summary(
    projection: Projection,
    settings: FireSettings,
    currency: str,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now()
    real_rate = settings.annualGrowthRate - settings.annualInflation
    contrib_label = (
        f"{format_compact_value(projection.annual_contribution, currency)}/yr"
        if projection.annual_contribution > 0
        else "none"
    )

    lines: List[str] = [
        "FIRE Growth Projection",
        RULE,
        f"Starting Portfolio: {format_compact_value(projection.current_portfolio_value, currency)}",
        f"FIRE Target: {format_compact_value(projection.target_value, currency)}",
        f"Real Return: {real_rate:.1f}% ({_plain(settings.annualGrowthRate)}% growth"
        f" - {_plain(settings.annualInflation)}% inflation)",
        f"Annual Contributions: {contrib_label}",
        "",
    ]

    if len(projection.years) >= 2:
        y0, y1 = projection.years[0], projection.years[1]
        growth = y0.portfolio_value * (real_rate / 100)
        sample = (
            f"  {y0.year}: {format_compact_value(y0.portfolio_value, currency)} "
            f"x {real_rate:.1f}% = +{format_compact_value(growth, currency)} growth"
        )
        if projection.annual_contribution > 0:
            sample += f" + {format_compact_value(projection.annual_contribution, currency)} contributions"
        lines.extend(
            [
                "How it works:",
                sample,
                f"  {y1.year}: {format_compact_value(y1.portfolio_value, currency)} (compounding continues)",
                "",
            ]
        )

    if projection.target_hit_in_window and projection.fire_year is not None:
        lines.append(
            f"Projected FIRE: {projection.fire_year} (age {projection.fire_age}) "
            f"- {projection.fire_year - now.year} years from now"
        )
    else:
        lines.append("Target not reached within 30-year projection window.")

    return "\n".join(lines)


def _series_at(start: float, annual_contribution: float, rate: float, years: int) -> float:
    """Closed form of the yearly recurrence after `years` contributing steps."""
    growth = (1 + rate) ** years
    annuity = (growth - 1) / rate if rate != 0 else float(years)
    return start * growth + annual_contribution * annuity * (1 + rate / 2)


def build_split_chart_summary(
    projection: Projection,
    settings: FireSettings,
    split: SplitPortfolioData,
    currency: str,
) -> str:
    real_rate = settings.annualGrowthRate - settings.annualInflation
    sipp_year = settings.yearOfBirth + settings.sippAccessAge

    lines: List[str] = [
        "Accessible vs Locked Split",
        RULE,
        f"Accessible (ISA/GIA): {format_compact_value(split.accessibleValue, currency)}",
        f"Locked (SIPP/401K): {format_compact_value(split.lockedValue, currency)}",
        f"Contributions: {format_compact_value(split.accessibleAnnualContribution, currency)}/yr accessible, "
        f"{format_compact_value(split.lockedAnnualContribution, currency)}/yr locked",
        f"Both grow at {real_rate:.1f}% real return.",
        "",
        f"Pension Access: age {settings.sippAccessAge} ({sipp_year})",
        "Locked funds shown as 'Unlocked' after pension access age.",
        "",
    ]

    if len(projection.years) >= 2:
        mid = len(projection.years) // 2
        rate = real_rate / 100
        accessible = _series_at(split.accessibleValue, split.accessibleAnnualContribution, rate, mid)
        locked = _series_at(split.lockedValue, split.lockedAnnualContribution, rate, mid)
        lines.append(
            f"Example ({projection.years[mid].year}): ~{format_compact_value(accessible, currency)} accessible + "
            f"~{format_compact_value(locked, currency)} locked"
        )

    if projection.target_hit_in_window:
        lines.extend(["", f"FIRE target reached: {projection.fire_year} (age {projection.fire_age})"])

    return "\n".join(lines)


def build_debt_chart_summary(debt: DebtPortfolioData, currency: str) -> str:
    lines: List[str] = [
        "Debt Repayment Projection",
        RULE,
        f"Total Debt: {format_compact_value(debt.totalDebt, currency)}",
        f"Number of Debts: {len(debt.positions)}",
        "",
    ]

    for position in debt.positions:
        lines.append(
            f"{position.name}: {format_compact_value(position.currentBalance, currency)} "
            f"@ {_plain(position.apr)}% APR, {format_compact_value(position.monthlyRepayment, currency)}/mo"
        )
        if position.apr > 0:
            lines.append(f"  Monthly interest: {format_compact_value(position.monthly_interest, currency)}")

        steps = project_repayment_schedule(position.currentBalance, position.apr, position.monthlyRepayment)
        if steps and steps[-1].balance <= PAID_OFF_THRESHOLD:
            lines.append(
                f"  Paid off in {len(steps)} months "
                f"({format_compact_value(steps[-1].cumulative_interest, currency)} interest)"
            )
        elif steps:
            lines.append(f"  Not paid off within {len(steps)} months")

    combined = sum(p.monthlyRepayment for p in debt.positions)
    lines.extend(["", f"Combined monthly repayments: {format_compact_value(combined, currency)}/mo"])
    return "\n".join(lines)


__all__ = [
    "build_growth_chart_summary",
    "build_split_chart_summary",
    "build_debt_chart_summary",
]
