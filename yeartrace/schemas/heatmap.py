"""
Heatmap response schemas.

GET /heatmap?year=YYYY → HeatmapResponse
"""
from typing import Optional

from pydantic import BaseModel, Field

from yeartrace.schemas.catalog import TierOut


class HeatmapCellOut(BaseModel):
    date: str
    weekday: int = Field(description="0 = Monday … 6 = Sunday.")
    score: Optional[int] = Field(default=None, description="Null when nothing was logged.")
    status_tier_id: Optional[str] = None
    color: Optional[str] = None


class HeatmapResponse(BaseModel):
    year: int
    logged_days: int
    years_with_data: list[int]
    legend: list[TierOut] = Field(description="Status tiers, lowest threshold first.")
    cells: list[HeatmapCellOut]
