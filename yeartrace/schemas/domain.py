"""
Configuration model: the entities stored in the persisted settings document.

Attributes are snake_case in Python; the document keeps its camelCase keys
(minScore, maxCount, statusTierId, dateRange, statusTiers) through aliases,
so dump with `by_alias=True` when writing it back.
"""
from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BehaviorType(str, enum.Enum):
    main = "main"
    secondary = "secondary"
    habit = "habit"


class GoalLevel(str, enum.Enum):
    year = "year"
    month = "month"
    week = "week"
    day = "day"


class GoalStatus(str, enum.Enum):
    in_progress = "in-progress"
    completed = "completed"
    abandoned = "abandoned"


# A logged value is either a count (repeatable behaviors) or a completion flag.
EntryValue = Union[bool, int]


class DocumentModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class Behavior(DocumentModel):
    id: str
    name: str = ""
    score: int = 1
    repeatable: bool = False
    type: BehaviorType = BehaviorType.habit
    max_count: Optional[int] = Field(
        default=None,
        description="Cap on the counted repetitions. None means uncapped.",
    )
    category: Optional[str] = None


class StatusTier(DocumentModel):
    id: str
    name: str = ""
    min_score: int = Field(default=0, description="Inclusive lower bound.")
    color: str = "var(--color-base-40)"


class DateRange(DocumentModel):
    start: str
    end: str


class Goal(DocumentModel):
    id: str
    title: str
    level: GoalLevel
    date_range: DateRange
    status: GoalStatus = GoalStatus.in_progress


class DayRecord(DocumentModel):
    date: str
    behaviors: dict[str, EntryValue] = Field(default_factory=dict)
    # Derived caches, written only by the records store.
    score: int = 0
    status_tier_id: Optional[str] = None
    note: Optional[str] = None


class YeartraceSettings(DocumentModel):
    """Aggregate root: the single persisted document."""
    behaviors: list[Behavior] = Field(default_factory=list)
    status_tiers: list[StatusTier] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    records: dict[str, DayRecord] = Field(default_factory=dict)

    def find_behavior(self, behavior_id: str) -> Optional[Behavior]:
        return next((b for b in self.behaviors if b.id == behavior_id), None)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
