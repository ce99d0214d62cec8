"""
Day record request / response schemas.

GET    /records/{day}                                  → DayPanelResponse
POST   /records/{day}/behaviors                        → BehaviorEntryRequest → DayRecordResponse
POST   /records/{day}/behaviors/{behavior_id}/increment → IncrementRequest   → DayRecordResponse
DELETE /records/{day}/behaviors/{behavior_id}           → DayRecordResponse
PUT    /records/{day}/note                             → NoteRequest        → DayRecordResponse
"""
from __future__ import annotations

from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt

from yeartrace.schemas.catalog import BehaviorOut, TierOut


class BehaviorEntryRequest(BaseModel):
    behavior_id: Annotated[str, Field(min_length=1, examples=["b2"])]
    value: Union[StrictBool, Annotated[StrictInt, Field(ge=0)]] = Field(
        description="Completion flag, or a count for repeatable behaviors.",
        examples=[True, 4],
    )


class IncrementRequest(BaseModel):
    delta: int = Field(default=1, description="Added to the count; the result never drops below 0.")


class NoteRequest(BaseModel):
    note: Optional[str] = Field(default=None, max_length=10_000)


class DayRecordResponse(BaseModel):
    date: str
    behaviors: dict[str, Union[bool, int]]
    score: int
    status_tier_id: Optional[str] = None
    note: Optional[str] = None


class DayPanelEntryOut(BaseModel):
    behavior: BehaviorOut
    value: Optional[Union[bool, int]] = None
    contribution: int


class DayPanelResponse(BaseModel):
    date: str
    score: int
    tier: Optional[TierOut] = None
    note: Optional[str] = None
    entries: list[DayPanelEntryOut]
    orphaned: dict[str, Any] = Field(
        default_factory=dict,
        description="Logged values whose behavior is no longer in the catalog.",
    )
