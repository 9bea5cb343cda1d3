"""Data contracts for the chart endpoints."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from fireplan.core.charts import ChartBar, DebtChartBar, SplitChartBar
from fireplan.models import DebtPortfolioData, SplitPortfolioData
from fireplan.schemas.projection import ProjectionRequest


class ChartRequest(ProjectionRequest):
    """
    Projection inputs plus display hints.

    `theme` and `currency` fall back to the app settings when omitted.
    `split` is required by the split chart and `debt` by the debt chart.
    """

    theme: Optional[Literal["light", "dark"]] = None
    currency: Optional[str] = Field(None, min_length=1, max_length=8)
    split: Optional[SplitPortfolioData] = None
    debt: Optional[DebtPortfolioData] = None


class ChartResponse(BaseModel):
    svg: str
    summary: str
    bars: Union[List[ChartBar], List[SplitChartBar], List[DebtChartBar]]
    fallback: Optional[str] = None
