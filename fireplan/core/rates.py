"""Rate and calendar helpers shared by the projection engine."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

DAYS_PER_YEAR = 365.25
SECONDS_PER_DAY = 24 * 60 * 60


def real_growth_rate(nominal_growth_pct: float, inflation_pct: float) -> float:
    """Convert nominal growth and inflation percentages into a real rate decimal.

    Simple subtraction (Fisher approximation); negative results are valid.
    real_growth_rate(7, 2.5) -> 0.045
    """
    return (nominal_growth_pct - inflation_pct) / 100


def days_until(target_year: int, now: Optional[datetime] = None) -> int:
    """Calendar days from `now` to 1 January of `target_year`, rounded up, never negative."""
    now = now or datetime.now()
    target = datetime(target_year, 1, 1, tzinfo=now.tzinfo)
    diff_days = (target - now).total_seconds() / SECONDS_PER_DAY
    return max(0, math.ceil(diff_days))


def years_until(target_year: int, now: Optional[datetime] = None) -> float:
    return days_until(target_year, now) / DAYS_PER_YEAR


def working_days(total_days: float, years_remaining: float, holiday_days: float) -> int:
    """
    Estimate working days from calendar days:
      business days = total_days * 5/7
      working days  = business days - holiday_days * years_remaining
    Rounded half up, floored at 0.
    """
    business_days = total_days * (5 / 7)
    holidays = holiday_days * years_remaining
    return max(0, math.floor(business_days - holidays + 0.5))


__all__ = [
    "DAYS_PER_YEAR",
    "real_growth_rate",
    "days_until",
    "years_until",
    "working_days",
]
