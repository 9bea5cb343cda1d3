"""Data contracts for the projection endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fireplan.core.projection import Projection
from fireplan.models import FireSettings


class ProjectionRequest(BaseModel):
    """Settings plus the live portfolio value to project from."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    settings: FireSettings
    currentPortfolioValue: float = Field(..., ge=0, description="Value of included accounts today.")
    now: Optional[datetime] = Field(
        None,
        description="Reference time for year 0 and countdowns; defaults to the server clock.",
    )


class ProjectionResponse(BaseModel):
    projection: Projection
    targetFireYear: Optional[int] = None


class FireNumberRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    monthlySpending: float = Field(..., ge=0)
    withdrawalRate: float = Field(4.0, description="Safe withdrawal rate in percent.")


class FireNumberResponse(BaseModel):
    fireNumber: float
