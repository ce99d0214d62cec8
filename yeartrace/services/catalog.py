"""
Catalog editing for behaviors and status tiers (the settings tab).

Numeric fields arrive as raw form text and are read up to the first
non-digit ("12px" is 12). Text that does not start with an integer is
ignored: the previous value stays and the field name is
reported back in `EditResult.ignored`. Nothing here raises for bad numbers.

The tier list is re-sorted by min_score after every insert or threshold
change, and two tiers may not share a threshold.

Deleting a behavior only touches the catalog. Day records keep the id and
its logged values; they simply stop scoring.
"""
from __future__ import annotations

import logging
import random
import re
import string
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from yeartrace.core.errors import (
    BehaviorNotFoundError,
    DuplicateTierThresholdError,
    TierNotFoundError,
)
from yeartrace.schemas.domain import Behavior, BehaviorType, StatusTier, YeartraceSettings
from yeartrace.services.tiers import sort_tiers

logger = logging.getLogger(__name__)

NumericInput = Union[str, int, None]

_BASE36 = string.digits + string.ascii_lowercase
DEFAULT_TIER_COLOR = "var(--color-base-40)"
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass
class EditResult:
    entity: Any
    ignored: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_base36(n: int) -> str:
    digits = []
    while True:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
        if n == 0:
            return "".join(reversed(digits))


def generate_id() -> str:
    """Millisecond timestamp in base36 plus a random base36 suffix."""
    suffix = "".join(random.choices(_BASE36, k=11))
    return _to_base36(int(time.time() * 1000)) + suffix


def parse_int(value: NumericInput) -> Optional[int]:
    """
    Leading integer of form input ("12px" -> 12, "3.7" -> 3), or None when
    the text does not start with one.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _get_behavior(settings: YeartraceSettings, behavior_id: str) -> Behavior:
    behavior = settings.find_behavior(behavior_id)
    if behavior is None:
        raise BehaviorNotFoundError(behavior_id)
    return behavior


def _get_tier(settings: YeartraceSettings, tier_id: str) -> StatusTier:
    tier = next((t for t in settings.status_tiers if t.id == tier_id), None)
    if tier is None:
        raise TierNotFoundError(tier_id)
    return tier


def _check_threshold_free(
    settings: YeartraceSettings, min_score: int, exclude_id: Optional[str] = None
) -> None:
    for tier in settings.status_tiers:
        if tier.id != exclude_id and tier.min_score == min_score:
            raise DuplicateTierThresholdError(min_score, tier.id)


# ---------------------------------------------------------------------------
# Behaviors
# ---------------------------------------------------------------------------

def add_behavior(
    settings: YeartraceSettings,
    name: str = "",
    score: int = 1,
    repeatable: bool = False,
    type: BehaviorType = BehaviorType.habit,
    max_count: Optional[int] = None,
    category: Optional[str] = None,
) -> Behavior:
    behavior = Behavior(
        id=generate_id(),
        name=name,
        score=score,
        repeatable=repeatable,
        type=type,
        max_count=max_count,
        category=category,
    )
    settings.behaviors.append(behavior)
    logger.info("Added behavior %s (%r)", behavior.id, behavior.name)
    return behavior


def update_behavior(
    settings: YeartraceSettings,
    behavior_id: str,
    *,
    name: Optional[str] = None,
    score: NumericInput = None,
    repeatable: Optional[bool] = None,
    type: Optional[BehaviorType] = None,
    max_count: NumericInput = None,
    category: Optional[str] = None,
) -> EditResult:
    """
    Apply the given fields to a behavior. An empty `max_count` string clears
    the cap; any other unparsable number is ignored.
    """
    behavior = _get_behavior(settings, behavior_id)
    result = EditResult(entity=behavior)
    new_type = BehaviorType(type).value if type is not None else None

    if name is not None:
        behavior.name = name
    if repeatable is not None:
        behavior.repeatable = repeatable
    if new_type is not None:
        behavior.type = new_type
    if category is not None:
        behavior.category = category or None

    if score is not None:
        parsed = parse_int(score)
        if parsed is None:
            result.ignored.append("score")
        else:
            behavior.score = parsed

    if max_count is not None:
        if isinstance(max_count, str) and not max_count.strip():
            behavior.max_count = None
        else:
            parsed = parse_int(max_count)
            if parsed is None or parsed < 0:
                result.ignored.append("max_count")
            else:
                behavior.max_count = parsed

    if result.ignored:
        logger.info("Behavior %s: ignored non-numeric %s", behavior_id, result.ignored)
    return result


def delete_behavior(settings: YeartraceSettings, behavior_id: str) -> Behavior:
    behavior = _get_behavior(settings, behavior_id)
    settings.behaviors.remove(behavior)
    logger.info("Deleted behavior %s; day records keep its entries", behavior_id)
    return behavior


# ---------------------------------------------------------------------------
# Status tiers
# ---------------------------------------------------------------------------

def add_tier(
    settings: YeartraceSettings,
    min_score: int,
    name: str = "",
    color: str = DEFAULT_TIER_COLOR,
) -> StatusTier:
    _check_threshold_free(settings, min_score)
    tier = StatusTier(id=generate_id(), name=name, min_score=min_score, color=color)
    settings.status_tiers = sort_tiers([*settings.status_tiers, tier])
    logger.info("Added status tier %s at minScore %d", tier.id, min_score)
    return tier


def update_tier(
    settings: YeartraceSettings,
    tier_id: str,
    *,
    name: Optional[str] = None,
    min_score: NumericInput = None,
    color: Optional[str] = None,
) -> EditResult:
    tier = _get_tier(settings, tier_id)
    result = EditResult(entity=tier)

    parsed = parse_int(min_score) if min_score is not None else None
    if min_score is not None and parsed is None:
        result.ignored.append("min_score")
    if parsed is not None:
        _check_threshold_free(settings, parsed, exclude_id=tier.id)

    if name is not None:
        tier.name = name
    if color is not None:
        tier.color = color
    if parsed is not None and parsed != tier.min_score:
        tier.min_score = parsed
        settings.status_tiers = sort_tiers(settings.status_tiers)

    if result.ignored:
        logger.info("Tier %s: ignored non-numeric %s", tier_id, result.ignored)
    return result


def delete_tier(settings: YeartraceSettings, tier_id: str) -> StatusTier:
    tier = _get_tier(settings, tier_id)
    settings.status_tiers.remove(tier)
    logger.info("Deleted status tier %s", tier_id)
    return tier
