"""
Heatmap router.

GET /heatmap?year=YYYY: one cell per calendar day, coloured by status tier
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from yeartrace.core.deps import get_plugin
from yeartrace.routers.catalog import tier_to_response
from yeartrace.schemas.heatmap import HeatmapCellOut, HeatmapResponse
from yeartrace.services.heatmap import HeatmapCell
from yeartrace.services.plugin import YeartracePlugin

router = APIRouter(prefix="/heatmap", tags=["heatmap"])


def _cell_to_response(c: HeatmapCell) -> HeatmapCellOut:
    return HeatmapCellOut(
        date=c.date,
        weekday=c.weekday,
        score=c.score,
        status_tier_id=c.status_tier_id,
        color=c.color,
    )


@router.get(
    "",
    response_model=HeatmapResponse,
    summary="Year heatmap",
)
def year_heatmap(
    year: Optional[int] = Query(
        default=None,
        ge=1,
        le=9999,
        description="Calendar year. Defaults to the current year.",
        examples=[2024],
    ),
    plugin: YeartracePlugin = Depends(get_plugin),
):
    """
    Return every day of the year with its score, tier id and tier colour.
    Days without a record have null score and colour.
    """
    target = year or date.today().year
    cells = plugin.heatmap.year(target)
    return HeatmapResponse(
        year=target,
        logged_days=sum(1 for c in cells if c.score is not None),
        years_with_data=plugin.heatmap.years(),
        legend=[tier_to_response(t) for t in plugin.settings.status_tiers],
        cells=[_cell_to_response(c) for c in cells],
    )
