"""
Tier resolver: maps a score to the status tier whose threshold it reaches.
"""
from __future__ import annotations

from typing import Iterable, Optional

from yeartrace.schemas.domain import StatusTier


def sort_tiers(tiers: Iterable[StatusTier]) -> list[StatusTier]:
    """Stable sort by min_score ascending."""
    return sorted(tiers, key=lambda t: t.min_score)


def resolve_tier_entry(score: int, tiers: Iterable[StatusTier]) -> Optional[StatusTier]:
    """
    Return the tier with the greatest `min_score <= score`, or None.

    Input order is not trusted. When two tiers share a threshold the one
    later in the list wins.
    """
    best: Optional[StatusTier] = None
    for tier in tiers:
        if tier.min_score > score:
            continue
        if best is None or tier.min_score >= best.min_score:
            best = tier
    return best


def resolve_tier(score: int, tiers: Iterable[StatusTier]) -> Optional[str]:
    tier = resolve_tier_entry(score, tiers)
    return tier.id if tier else None


def find_tier(tier_id: Optional[str], tiers: Iterable[StatusTier]) -> Optional[StatusTier]:
    if tier_id is None:
        return None
    return next((t for t in tiers if t.id == tier_id), None)
