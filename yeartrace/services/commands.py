"""
Discrete commands issued by the views, applied through
`RecordsStore.dispatch`.

Each command names its date and knows how to mutate a copy of that day's
behavior mapping. Derived fields are never touched here.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from yeartrace.schemas.domain import EntryValue

DateLike = Union[str, date]


@dataclass(frozen=True)
class UpsertBehaviorEntry:
    """Set a behavior's value for the day (flag or count)."""
    date: DateLike
    behavior_id: str
    value: EntryValue

    def apply(self, behaviors: dict[str, EntryValue]) -> None:
        behaviors[self.behavior_id] = self.value


@dataclass(frozen=True)
class IncrementBehaviorEntry:
    """Add `delta` to a count, never going below zero. Flags count as 0/1."""
    date: DateLike
    behavior_id: str
    delta: int = 1

    def apply(self, behaviors: dict[str, EntryValue]) -> None:
        current = int(behaviors.get(self.behavior_id, 0))
        behaviors[self.behavior_id] = max(current + self.delta, 0)


@dataclass(frozen=True)
class RemoveBehaviorEntry:
    date: DateLike
    behavior_id: str

    def apply(self, behaviors: dict[str, EntryValue]) -> None:
        behaviors.pop(self.behavior_id, None)


@dataclass(frozen=True)
class SetDayNote:
    date: DateLike
    note: Optional[str]


BehaviorCommand = Union[UpsertBehaviorEntry, IncrementBehaviorEntry, RemoveBehaviorEntry]
Command = Union[BehaviorCommand, SetDayNote]
