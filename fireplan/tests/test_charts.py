from __future__ import annotations

import pytest
from pydantic import ValidationError

from fireplan.core.charts import compute_chart_bars, compute_debt_chart_bars, compute_split_chart_bars
from fireplan.core.projection import Projection, project_from_settings
from fireplan.models import DebtPortfolioData, DebtPosition, FireSettings, SplitPortfolioData


@pytest.fixture
def projection(settings, now) -> Projection:
    return project_from_settings(settings, 250_000.0, now=now)


@pytest.fixture
def debts() -> DebtPortfolioData:
    return DebtPortfolioData.from_positions(
        [
            DebtPosition(name="Credit Card", currentBalance=5_000, apr=19.9, monthlyRepayment=250),
            DebtPosition(name="Student Loan", currentBalance=10_000, apr=5.5, monthlyRepayment=200),
        ]
    )


# -----------------------------
# Growth bars
# -----------------------------


def test_growth_bars_split_total_into_base_and_contributions(projection):
    bars = compute_chart_bars(projection, "GBP")

    assert len(bars) == len(projection.years)
    for bar in bars:
        assert bar.base_growth_value + bar.contribution_value == pytest.approx(bar.total_value, abs=0.01)
        assert bar.contribution_value >= 0


def test_growth_base_series_compounds_without_contributions(projection):
    bars = compute_chart_bars(projection, "GBP")

    assert bars[0].base_growth_value == 250_000.0
    assert bars[0].contribution_value == 0
    assert bars[0].contrib_label is None
    assert bars[3].base_growth_value == pytest.approx(250_000 * 1.045**3)


def test_growth_fire_year_flagged_once(projection):
    bars = compute_chart_bars(projection, "GBP")

    fire_bars = [bar for bar in bars if bar.is_fire_year]
    assert len(fire_bars) == 1
    assert fire_bars[0].year == projection.fire_year


def test_growth_labels_are_compact(projection):
    bars = compute_chart_bars(projection, "USD")
    assert bars[0].label == "$250K"
    assert bars[0].base_label == "$250K"


def test_growth_bars_empty_projection(projection):
    empty = projection.model_copy(update={"years": []})
    assert compute_chart_bars(empty, "GBP") == []


# -----------------------------
# Split bars
# -----------------------------


def test_split_series_sum_to_projection(projection, settings):
    split = SplitPortfolioData(
        accessibleValue=150_000,
        lockedValue=100_000,
        accessibleAnnualContribution=18_000,
        lockedAnnualContribution=6_000,
    )
    bars = compute_split_chart_bars(projection, split, settings, "GBP")

    for bar, year in zip(bars, projection.years):
        assert bar.accessible_value + bar.locked_value == pytest.approx(year.portfolio_value)
        assert bar.total_value == pytest.approx(year.portfolio_value)


def test_split_pension_access_and_fire_flags(projection, settings):
    split = SplitPortfolioData(accessibleValue=250_000, lockedValue=0, lockedAnnualContribution=0)
    older = settings.model_copy(update={"yearOfBirth": 1975})
    bars = compute_split_chart_bars(projection, split, older, "GBP")

    access_year = 1975 + 57
    for bar in bars:
        assert bar.is_sipp_accessible == (bar.year >= access_year)
        assert bar.locked_label == ""
    assert sum(bar.is_fire_year for bar in bars) == 1


def test_split_has_locked():
    assert SplitPortfolioData(lockedAnnualContribution=100).has_locked
    assert not SplitPortfolioData(accessibleValue=100).has_locked


def test_debt_position_repayment_must_beat_interest():
    # 10k at 30% accrues 250/mo
    with pytest.raises(ValidationError):
        DebtPosition(name="Card", currentBalance=10_000, apr=30, monthlyRepayment=100)
    with pytest.raises(ValidationError):
        DebtPosition(name="Card", currentBalance=12_000, apr=12, monthlyRepayment=120)

    assert DebtPosition(name="Card", currentBalance=12_000, apr=12, monthlyRepayment=121).monthly_interest == 120
    assert DebtPosition(name="Cleared", currentBalance=0, apr=12, monthlyRepayment=0).monthly_interest == 0


def test_debt_portfolio_total_must_match_balances():
    position = DebtPosition(name="Loan", currentBalance=10_000, apr=0, monthlyRepayment=100)
    with pytest.raises(ValidationError):
        DebtPortfolioData(totalDebt=100, positions=[position])

    assert DebtPortfolioData.from_positions([position]).totalDebt == 10_000


# -----------------------------
# Debt bars
# -----------------------------


def test_debt_bars_empty_without_debt(projection):
    assert compute_debt_chart_bars(DebtPortfolioData(totalDebt=0, positions=[]), projection, "GBP") == []
    zero = DebtPortfolioData.from_positions(
        [DebtPosition(name="Paid", currentBalance=0, apr=5, monthlyRepayment=100)]
    )
    assert compute_debt_chart_bars(zero, projection, "GBP") == []


def test_debt_first_bar_is_static_snapshot(debts, projection, now):
    bars = compute_debt_chart_bars(debts, projection, "GBP")

    first = bars[0]
    assert first.year == now.year
    assert first.total_debt == 15_000
    assert first.principal_remaining == 15_000
    assert first.interest_in_balance == 0
    assert first.cumulative_interest == 0
    assert first.is_debt_free_year is False


def test_debt_bars_principal_plus_interest_is_total(debts, projection):
    bars = compute_debt_chart_bars(debts, projection, "GBP")

    for bar in bars:
        assert bar.principal_remaining + bar.interest_in_balance == pytest.approx(bar.total_debt, abs=1)


def test_debt_total_never_increases(debts, projection):
    bars = compute_debt_chart_bars(debts, projection, "GBP")

    for prev, cur in zip(bars, bars[1:]):
        assert cur.total_debt <= prev.total_debt + 0.01
        assert cur.cumulative_interest >= prev.cumulative_interest


def test_debt_interest_shown_while_balance_remains(debts, projection):
    bars = compute_debt_chart_bars(debts, projection, "GBP")

    assert bars[1].interest_in_balance > 0
    assert bars[1].interest_label


def test_zero_apr_debt_cleared_in_tenth_month(projection, now):
    debt = DebtPortfolioData.from_positions(
        [DebtPosition(name="Loan", currentBalance=5_000, apr=0, monthlyRepayment=500)]
    )
    bars = compute_debt_chart_bars(debt, projection, "GBP")

    free = [bar for bar in bars if bar.is_debt_free_year]
    assert len(free) == 1
    assert free[0].year == now.year + 1
    assert free[0].total_debt == 0
    # two trailing years after the debt-free year
    assert len(bars) == 4
    for bar in bars:
        assert bar.interest_in_balance == 0
        assert bar.cumulative_interest == 0


def test_debt_positions_paid_at_different_times(projection):
    debt = DebtPortfolioData.from_positions(
        [
            DebtPosition(name="Short", currentBalance=1_000, apr=0, monthlyRepayment=500),
            DebtPosition(name="Long", currentBalance=20_000, apr=3, monthlyRepayment=400),
        ]
    )
    bars = compute_debt_chart_bars(debt, projection, "GBP")

    assert bars[1].total_debt < 20_000
    assert sum(bar.is_debt_free_year for bar in bars) == 1
    assert bars[-1].total_debt == 0


def test_debt_window_is_capped(projection):
    debt = DebtPortfolioData.from_positions(
        [DebtPosition(name="Mortgage", currentBalance=500_000, apr=4, monthlyRepayment=1_700)]
    )
    bars = compute_debt_chart_bars(debt, projection, "GBP")

    assert len(bars) == 31
    assert not any(bar.is_debt_free_year for bar in bars)


def test_settings_fixture_is_valid(settings: FireSettings):
    assert settings.withdrawalRate == 4.0
    assert settings.sippAccessAge == 57
