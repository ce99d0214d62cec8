"""
Scoring engine: a day's total score from its logged behaviors.

Pure functions, no I/O. Every behavior type (main, secondary, habit)
contributes through its `score` weight:

  flag  (bool)                 → score if True else 0
  count (int), repeatable      → score * min(count, max_count or uncapped)
  count (int), not repeatable  → score if count > 0 else 0

Ids missing from the catalog contribute nothing; the caller keeps them in
storage untouched. Negative weights are summed as-is.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from yeartrace.schemas.domain import Behavior, EntryValue


def behavior_contribution(behavior: Behavior, value: EntryValue) -> int:
    """Points a single logged value earns for `behavior`."""
    # bool is an int subclass: test it first.
    if isinstance(value, bool):
        return behavior.score if value else 0

    count = max(int(value), 0)
    if not behavior.repeatable:
        return behavior.score if count > 0 else 0

    cap = behavior.max_count if behavior.max_count is not None else count
    return behavior.score * min(count, cap)


def score_breakdown(
    day_behaviors: Mapping[str, EntryValue],
    catalog: Iterable[Behavior],
) -> dict[str, int]:
    """Per-behavior contribution for every catalog entry logged that day."""
    breakdown: dict[str, int] = {}
    for behavior in catalog:
        if behavior.id in day_behaviors:
            breakdown[behavior.id] = behavior_contribution(
                behavior, day_behaviors[behavior.id]
            )
    return breakdown


def compute_score(
    day_behaviors: Mapping[str, EntryValue],
    catalog: Iterable[Behavior],
) -> int:
    return sum(score_breakdown(day_behaviors, catalog).values())
