"""
Records store: the in-memory source of truth for every DayRecord.

Built once per process and handed to whoever needs it (plugin, views,
persistence bridge). It is the only writer of the date → DayRecord mapping
and of the derived `score` / `status_tier_id` fields.

Public API
----------
get(date)                 -> DayRecord | None
upsert(date, mutator)     -> DayRecord        (recompute + publish)
set_note(date, note)      -> DayRecord        (recompute + publish)
dispatch(command)         -> DayRecord        (commands.py entry point)
subscribe(callback)       -> unsubscribe()    (called now, then per publish)
replace_all(records)      -> None             (bulk load + recompute, one publish)
recompute_all()           -> None             (after catalog edits, one publish)
snapshot()                -> dict             (deep copy for persistence)

Publication is synchronous and ordered: a write made by a subscriber while
a publish is running is queued and delivered after the current one reaches
every subscriber. Readers (get, subscribers, snapshot) always receive
copies; the live records are replaced on every write, never mutated.
"""
from __future__ import annotations

import logging
from collections import deque
from datetime import date, datetime
from typing import Callable, Mapping, Optional

from yeartrace.core.errors import InvalidRecordDateError
from yeartrace.schemas.domain import DayRecord, EntryValue, YeartraceSettings
from yeartrace.services.commands import (
    Command,
    DateLike,
    SetDayNote,
)
from yeartrace.services.scoring import compute_score
from yeartrace.services.tiers import resolve_tier

logger = logging.getLogger(__name__)

RecordsMap = dict[str, DayRecord]
Subscriber = Callable[[RecordsMap], None]
Mutator = Callable[[dict[str, EntryValue]], Optional[Mapping[str, EntryValue]]]
CatalogProvider = Callable[[], YeartraceSettings]


def normalize_date(value: DateLike) -> str:
    """Return the canonical YYYY-MM-DD key for `value`."""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError:
        raise InvalidRecordDateError(value) from None


def _copy(records: Mapping[str, DayRecord]) -> RecordsMap:
    return {key: record.model_copy(deep=True) for key, record in records.items()}


class RecordsStore:

    def __init__(self, catalog_provider: CatalogProvider):
        # Called on every write so scores track the current catalogs.
        self._catalog_provider = catalog_provider
        self._records: RecordsMap = {}
        self._subscribers: list[tuple[object, Subscriber]] = []
        self._pending: deque[RecordsMap] = deque()
        self._publishing = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, day: DateLike) -> Optional[DayRecord]:
        record = self._records.get(normalize_date(day))
        return record.model_copy(deep=True) if record is not None else None

    def snapshot(self) -> RecordsMap:
        return _copy(self._records)

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, day: DateLike, mutator: Mutator) -> DayRecord:
        key = normalize_date(day)
        current = self._records.get(key)
        behaviors = dict(current.behaviors) if current else {}

        replaced = mutator(behaviors)
        if replaced is not None:
            behaviors = dict(replaced)

        record = self._derive(key, behaviors, current.note if current else None)
        self._records[key] = record
        logger.debug("Upserted %s: score=%d tier=%s", key, record.score, record.status_tier_id)
        self._publish()
        return record.model_copy(deep=True)

    def set_note(self, day: DateLike, note: Optional[str]) -> DayRecord:
        key = normalize_date(day)
        current = self._records.get(key)
        behaviors = dict(current.behaviors) if current else {}
        record = self._derive(key, behaviors, note or None)
        self._records[key] = record
        self._publish()
        return record.model_copy(deep=True)

    def dispatch(self, command: Command) -> DayRecord:
        if isinstance(command, SetDayNote):
            return self.set_note(command.date, command.note)
        return self.upsert(command.date, command.apply)

    def replace_all(
        self,
        records: Mapping[str, DayRecord],
        catalogs: Optional[YeartraceSettings] = None,
    ) -> None:
        """
        Swap in a whole mapping (a freshly loaded document). Cached score and
        tier are re-derived, against `catalogs` when given, otherwise against
        the catalog provider.
        """
        self._records = {
            key: self._derive(key, dict(record.behaviors), record.note, catalogs)
            for key, record in records.items()
        }
        logger.info("Loaded %d day records", len(self._records))
        self._publish()

    def recompute_all(self) -> None:
        self._records = {
            key: self._derive(key, dict(record.behaviors), record.note)
            for key, record in self._records.items()
        }
        self._publish()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        token = object()
        self._subscribers.append((token, callback))
        callback(_copy(self._records))

        def unsubscribe() -> None:
            self._subscribers = [s for s in self._subscribers if s[0] is not token]

        return unsubscribe

    def _publish(self) -> None:
        # Records are never mutated in place, so a shallow copy pins this state.
        self._pending.append(dict(self._records))
        if self._publishing:
            return
        self._publishing = True
        try:
            while self._pending:
                state = self._pending.popleft()
                for _, callback in list(self._subscribers):
                    callback(_copy(state))
        finally:
            self._pending.clear()
            self._publishing = False

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _derive(
        self,
        key: str,
        behaviors: dict[str, EntryValue],
        note: Optional[str],
        catalogs: Optional[YeartraceSettings] = None,
    ) -> DayRecord:
        if catalogs is None:
            catalogs = self._catalog_provider()
        score = compute_score(behaviors, catalogs.behaviors)
        return DayRecord(
            date=key,
            behaviors=behaviors,
            score=score,
            status_tier_id=resolve_tier(score, catalogs.status_tiers),
            note=note,
        )
