"""
Read models for the two views: the year heatmap and the daily panel.

HeatmapProjection subscribes to the records store and keeps the latest
published mapping; cells are built on demand against the current tier
catalog so a recoloured tier shows up without touching the records.

build_day_panel(day, store, settings) → DayPanel   (no subscription needed)
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Optional

from yeartrace.schemas.domain import Behavior, DayRecord, StatusTier, YeartraceSettings
from yeartrace.services.commands import DateLike
from yeartrace.services.records_store import RecordsMap, RecordsStore, normalize_date
from yeartrace.services.scoring import behavior_contribution
from yeartrace.services.tiers import find_tier


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class HeatmapCell:
    date: str
    weekday: int                  # 0 = Monday
    score: Optional[int] = None   # None when nothing was logged
    status_tier_id: Optional[str] = None
    color: Optional[str] = None


@dataclass
class DayPanelEntry:
    behavior: Behavior
    value: Any                    # None when not logged today
    contribution: int


@dataclass
class DayPanel:
    date: str
    score: int
    tier: Optional[StatusTier]
    note: Optional[str]
    entries: list[DayPanelEntry]
    # Logged ids whose behavior was since removed from the catalog.
    orphaned: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Heatmap
# ---------------------------------------------------------------------------

class HeatmapProjection:

    def __init__(self, store: RecordsStore, catalog_provider: Callable[[], YeartraceSettings]):
        self._catalog_provider = catalog_provider
        self._records: RecordsMap = {}
        self.updates = 0
        self._unsubscribe = store.subscribe(self._on_records)

    def _on_records(self, records: RecordsMap) -> None:
        self._records = records
        self.updates += 1

    def close(self) -> None:
        self._unsubscribe()

    def years(self) -> list[int]:
        return sorted({int(key[:4]) for key in self._records})

    def cell(self, day: date) -> HeatmapCell:
        key = day.isoformat()
        cell = HeatmapCell(date=key, weekday=day.weekday())
        record: Optional[DayRecord] = self._records.get(key)
        if record is None:
            return cell
        tier = find_tier(record.status_tier_id, self._catalog_provider().status_tiers)
        cell.score = record.score
        cell.status_tier_id = record.status_tier_id
        cell.color = tier.color if tier else None
        return cell

    def year(self, year: int) -> list[HeatmapCell]:
        """One cell per calendar day of `year`, January 1st first."""
        start = date(year, 1, 1)
        days = 366 if calendar.isleap(year) else 365
        return [self.cell(start + timedelta(days=i)) for i in range(days)]


# ---------------------------------------------------------------------------
# Daily panel
# ---------------------------------------------------------------------------

def build_day_panel(day: DateLike, store: RecordsStore, settings: YeartraceSettings) -> DayPanel:
    key = normalize_date(day)
    record = store.get(key)
    logged = dict(record.behaviors) if record else {}

    entries = []
    for behavior in settings.behaviors:
        value = logged.pop(behavior.id, None)
        contribution = behavior_contribution(behavior, value) if value is not None else 0
        entries.append(DayPanelEntry(behavior=behavior, value=value, contribution=contribution))

    return DayPanel(
        date=key,
        score=record.score if record else 0,
        tier=find_tier(record.status_tier_id, settings.status_tiers) if record else None,
        note=record.note if record else None,
        entries=entries,
        orphaned=logged,
    )
