"""
Seed catalogs and the merge of a persisted document over them.

Public API
----------
default_settings()      -> YeartraceSettings   (fresh copy every call)
merge_settings(raw)     -> YeartraceSettings   (never raises)

Merge rule: shallow override per top-level key. A key that is missing or
fails validation keeps its default; arrays are replaced wholesale, never
merged element-wise. Within `records` a single bad record, or one
whose key is not a calendar date, is dropped instead of the whole mapping.
Each kept record takes its `date` from its key.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from yeartrace.core.errors import InvalidRecordDateError
from yeartrace.schemas.domain import (
    Behavior,
    BehaviorType,
    DayRecord,
    Goal,
    StatusTier,
    YeartraceSettings,
)
from yeartrace.services.records_store import normalize_date

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed catalogs
# ---------------------------------------------------------------------------

_DEFAULT_BEHAVIORS = [
    Behavior(id="b1", name="文献阅读", score=1, repeatable=True, type=BehaviorType.main),
    Behavior(id="b2", name="项目编码", score=1, repeatable=True, max_count=10,
             type=BehaviorType.secondary),
    Behavior(id="b3", name="早睡", score=2, repeatable=False, type=BehaviorType.habit),
]

_DEFAULT_TIERS = [
    StatusTier(id="t1", name="低能量", min_score=0, color="var(--color-base-40)"),
    StatusTier(id="t2", name="普通", min_score=3, color="var(--color-green)"),
    StatusTier(id="t3", name="良好", min_score=6, color="var(--color-blue)"),
    StatusTier(id="t4", name="高峰", min_score=9, color="var(--color-purple)"),
]


def default_settings() -> YeartraceSettings:
    return YeartraceSettings(
        behaviors=[b.model_copy(deep=True) for b in _DEFAULT_BEHAVIORS],
        status_tiers=[t.model_copy(deep=True) for t in _DEFAULT_TIERS],
        goals=[],
        records={},
    )


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

_behaviors_adapter = TypeAdapter(list[Behavior])
_tiers_adapter = TypeAdapter(list[StatusTier])
_goals_adapter = TypeAdapter(list[Goal])


def _field(raw: dict, key: str, adapter: TypeAdapter, default: Any) -> Any:
    if key not in raw:
        return default
    try:
        return adapter.validate_python(raw[key])
    except ValidationError as exc:
        logger.warning(
            "Persisted %r is malformed (%d errors); using default",
            key, exc.error_count(),
        )
        return default


def _records(raw: dict) -> dict[str, DayRecord]:
    value = raw.get("records")
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Persisted 'records' is not a mapping; using default")
        return {}

    records: dict[str, DayRecord] = {}
    for day, payload in value.items():
        try:
            key = normalize_date(day)
        except InvalidRecordDateError:
            logger.warning("Skipping day record with invalid date key %r", day)
            continue
        try:
            if isinstance(payload, dict):
                payload = {**payload, "date": key}
            record = DayRecord.model_validate(payload)
        except ValidationError:
            logger.warning("Skipping malformed day record %r", day)
            continue
        records[key] = record
    return records


def merge_settings(raw: Any) -> YeartraceSettings:
    """Overlay a persisted (possibly partial or older) document on the defaults."""
    defaults = default_settings()
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Persisted document is %s, not a mapping; using defaults",
                           type(raw).__name__)
        return defaults

    return YeartraceSettings(
        behaviors=_field(raw, "behaviors", _behaviors_adapter, defaults.behaviors),
        status_tiers=_field(raw, "statusTiers", _tiers_adapter, defaults.status_tiers),
        goals=_field(raw, "goals", _goals_adapter, defaults.goals),
        records=_records(raw),
    )
