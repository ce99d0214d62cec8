"""
Records router (daily panel).

GET    /records/{day}
POST   /records/{day}/behaviors
POST   /records/{day}/behaviors/{behavior_id}/increment
DELETE /records/{day}/behaviors/{behavior_id}
PUT    /records/{day}/note
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from yeartrace.core.deps import get_plugin
from yeartrace.routers.catalog import behavior_to_response, tier_to_response
from yeartrace.schemas.domain import DayRecord
from yeartrace.schemas.records import (
    BehaviorEntryRequest,
    DayPanelEntryOut,
    DayPanelResponse,
    DayRecordResponse,
    IncrementRequest,
    NoteRequest,
)
from yeartrace.services.commands import (
    IncrementBehaviorEntry,
    RemoveBehaviorEntry,
    SetDayNote,
    UpsertBehaviorEntry,
)
from yeartrace.services.heatmap import DayPanel, build_day_panel
from yeartrace.services.plugin import YeartracePlugin

router = APIRouter(prefix="/records", tags=["records"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _record_to_response(r: DayRecord) -> DayRecordResponse:
    return DayRecordResponse(
        date=r.date,
        behaviors=dict(r.behaviors),
        score=r.score,
        status_tier_id=r.status_tier_id,
        note=r.note,
    )


def _panel_to_response(p: DayPanel) -> DayPanelResponse:
    return DayPanelResponse(
        date=p.date,
        score=p.score,
        tier=tier_to_response(p.tier) if p.tier else None,
        note=p.note,
        entries=[
            DayPanelEntryOut(
                behavior=behavior_to_response(e.behavior),
                value=e.value,
                contribution=e.contribution,
            )
            for e in p.entries
        ],
        orphaned=p.orphaned,
    )


# ---------------------------------------------------------------------------
# GET /records/{day}
# ---------------------------------------------------------------------------

@router.get(
    "/{day}",
    response_model=DayPanelResponse,
    summary="Daily panel for one date",
)
def day_panel(day: date, plugin: YeartracePlugin = Depends(get_plugin)):
    """
    Every catalog behavior with its logged value and the points it earned,
    plus the day's score and status tier. A date with nothing logged
    returns score 0 and no tier.
    """
    return _panel_to_response(build_day_panel(day, plugin.store, plugin.settings))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

@router.post(
    "/{day}/behaviors",
    response_model=DayRecordResponse,
    summary="Log a behavior value for a date",
    responses={404: {"description": "Behavior not in the catalog."}},
)
async def log_behavior(
    day: date,
    payload: BehaviorEntryRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    record = await plugin.apply(
        UpsertBehaviorEntry(date=day, behavior_id=payload.behavior_id, value=payload.value)
    )
    return _record_to_response(record)


@router.post(
    "/{day}/behaviors/{behavior_id}/increment",
    response_model=DayRecordResponse,
    summary="Add to a behavior's count",
    responses={404: {"description": "Behavior not in the catalog."}},
)
async def increment_behavior(
    day: date,
    behavior_id: str,
    payload: IncrementRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    record = await plugin.apply(
        IncrementBehaviorEntry(date=day, behavior_id=behavior_id, delta=payload.delta)
    )
    return _record_to_response(record)


@router.delete(
    "/{day}/behaviors/{behavior_id}",
    response_model=DayRecordResponse,
    summary="Clear a behavior's value for a date",
)
async def clear_behavior(
    day: date,
    behavior_id: str,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    record = await plugin.apply(RemoveBehaviorEntry(date=day, behavior_id=behavior_id))
    return _record_to_response(record)


@router.put(
    "/{day}/note",
    response_model=DayRecordResponse,
    summary="Set or clear the note for a date",
)
async def set_note(
    day: date,
    payload: NoteRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    record = await plugin.apply(SetDayNote(date=day, note=payload.note))
    return _record_to_response(record)
