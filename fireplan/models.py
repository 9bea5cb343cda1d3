from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FireContribution(BaseModel):
    """A recurring monthly contribution into one position.

    Only identifiers are stored; display names are resolved by the host.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    id: str
    positionId: str
    accountId: str
    monthlyAmount: float


class FireSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    targetValue: float = Field(ge=0)
    withdrawalRate: float = 4.0
    annualInflation: float = 2.5
    annualGrowthRate: float = 7.0
    yearOfBirth: int = Field(ge=1900, le=2100)
    holidayEntitlement: float = Field(default=25, ge=0, le=366)
    sippAccessAge: int = Field(default=57, ge=0, le=120)

    # at most one of these may be set
    targetFireAge: Optional[int] = Field(default=None, ge=0, le=120)
    targetFireYear: Optional[int] = Field(default=None, ge=1900, le=2200)

    excludedAccountIds: List[str] = Field(default_factory=list)
    contributions: List[FireContribution] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_single_target(self) -> "FireSettings":
        if self.targetFireAge is not None and self.targetFireYear is not None:
            raise ValueError("targetFireAge and targetFireYear are mutually exclusive")
        return self


class SplitPortfolioData(BaseModel):
    """Current value and yearly contributions split by pension lock."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    accessibleValue: float = 0.0
    lockedValue: float = 0.0
    accessibleAnnualContribution: float = 0.0
    lockedAnnualContribution: float = 0.0

    @property
    def has_locked(self) -> bool:
        return self.lockedValue > 0 or self.lockedAnnualContribution > 0


class DebtPosition(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    name: str
    currentBalance: float = Field(ge=0)
    apr: float = Field(ge=0)
    monthlyRepayment: float = Field(ge=0)

    @property
    def monthly_interest(self) -> float:
        return self.currentBalance * self.apr / 12 / 100

    @model_validator(mode="after")
    def ensure_repayment_reduces_balance(self) -> "DebtPosition":
        if self.currentBalance > 0 and self.monthlyRepayment <= self.monthly_interest:
            raise ValueError(
                f"monthlyRepayment for {self.name!r} must exceed the monthly interest "
                f"({self.monthly_interest:.2f}) so the balance falls"
            )
        return self


class DebtPortfolioData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    totalDebt: float = Field(ge=0)
    positions: List[DebtPosition] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_total_matches_positions(self) -> "DebtPortfolioData":
        balances = sum(p.currentBalance for p in self.positions)
        if abs(self.totalDebt - balances) > 0.01:
            raise ValueError(f"totalDebt {self.totalDebt} does not match position balances {balances}")
        return self

    @classmethod
    def from_positions(cls, positions: List[DebtPosition]) -> "DebtPortfolioData":
        return cls(
            totalDebt=sum(p.currentBalance for p in positions),
            positions=list(positions),
        )
