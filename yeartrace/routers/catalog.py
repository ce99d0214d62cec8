"""
Catalog router (settings tab).

GET    /catalog/behaviors
POST   /catalog/behaviors
PATCH  /catalog/behaviors/{behavior_id}
DELETE /catalog/behaviors/{behavior_id}
GET    /catalog/tiers
POST   /catalog/tiers
PATCH  /catalog/tiers/{tier_id}
DELETE /catalog/tiers/{tier_id}
GET    /catalog/goals

Every write re-derives all day records against the edited catalog and
saves the document.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from yeartrace.core.deps import get_plugin
from yeartrace.schemas.catalog import (
    BehaviorCreateRequest,
    BehaviorEditResponse,
    BehaviorOut,
    BehaviorPatchRequest,
    GoalOut,
    TierCreateRequest,
    TierEditResponse,
    TierOut,
    TierPatchRequest,
)
from yeartrace.schemas.domain import Behavior, Goal, StatusTier
from yeartrace.services import catalog
from yeartrace.services.plugin import YeartracePlugin

router = APIRouter(prefix="/catalog", tags=["catalog"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def behavior_to_response(b: Behavior) -> BehaviorOut:
    return BehaviorOut(
        id=b.id,
        name=b.name,
        score=b.score,
        repeatable=b.repeatable,
        type=b.type,
        max_count=b.max_count,
        category=b.category,
    )


def tier_to_response(t: StatusTier) -> TierOut:
    return TierOut(id=t.id, name=t.name, min_score=t.min_score, color=t.color)


def _goal_to_response(g: Goal) -> GoalOut:
    return GoalOut(
        id=g.id,
        title=g.title,
        level=g.level,
        start=g.date_range.start,
        end=g.date_range.end,
        status=g.status,
    )


# ---------------------------------------------------------------------------
# Behaviors
# ---------------------------------------------------------------------------

@router.get("/behaviors", response_model=list[BehaviorOut], summary="List tracked behaviors")
def list_behaviors(plugin: YeartracePlugin = Depends(get_plugin)):
    return [behavior_to_response(b) for b in plugin.settings.behaviors]


@router.post(
    "/behaviors",
    response_model=BehaviorOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a behavior",
)
async def create_behavior(
    payload: BehaviorCreateRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    behavior = await plugin.edit_catalog(
        lambda s: catalog.add_behavior(s, **payload.model_dump())
    )
    return behavior_to_response(behavior)


@router.patch(
    "/behaviors/{behavior_id}",
    response_model=BehaviorEditResponse,
    summary="Edit a behavior",
    responses={404: {"description": "Behavior not in the catalog."}},
)
async def patch_behavior(
    behavior_id: str,
    payload: BehaviorPatchRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    """
    Apply the provided fields. `score` and `max_count` accept form text;
    values that do not parse are left unchanged and listed in `ignored`.
    """
    result = await plugin.edit_catalog(
        lambda s: catalog.update_behavior(s, behavior_id, **payload.model_dump(exclude_unset=True))
    )
    return BehaviorEditResponse(
        behavior=behavior_to_response(result.entity),
        ignored=result.ignored,
    )


@router.delete(
    "/behaviors/{behavior_id}",
    response_model=BehaviorOut,
    summary="Remove a behavior from the catalog",
    responses={404: {"description": "Behavior not in the catalog."}},
)
async def remove_behavior(behavior_id: str, plugin: YeartracePlugin = Depends(get_plugin)):
    """Day records keep the logged values; they stop contributing to scores."""
    behavior = await plugin.edit_catalog(lambda s: catalog.delete_behavior(s, behavior_id))
    return behavior_to_response(behavior)


# ---------------------------------------------------------------------------
# Status tiers
# ---------------------------------------------------------------------------

@router.get("/tiers", response_model=list[TierOut], summary="List status tiers (ascending)")
def list_tiers(plugin: YeartracePlugin = Depends(get_plugin)):
    return [tier_to_response(t) for t in plugin.settings.status_tiers]


@router.post(
    "/tiers",
    response_model=TierOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a status tier",
    responses={409: {"description": "Another tier already uses this min_score."}},
)
async def create_tier(payload: TierCreateRequest, plugin: YeartracePlugin = Depends(get_plugin)):
    tier = await plugin.edit_catalog(
        lambda s: catalog.add_tier(
            s, min_score=payload.min_score, name=payload.name, color=payload.color
        )
    )
    return tier_to_response(tier)


@router.patch(
    "/tiers/{tier_id}",
    response_model=TierEditResponse,
    summary="Edit a status tier",
    responses={
        404: {"description": "Tier not in the catalog."},
        409: {"description": "Another tier already uses this min_score."},
    },
)
async def patch_tier(
    tier_id: str,
    payload: TierPatchRequest,
    plugin: YeartracePlugin = Depends(get_plugin),
):
    result = await plugin.edit_catalog(
        lambda s: catalog.update_tier(s, tier_id, **payload.model_dump(exclude_unset=True))
    )
    return TierEditResponse(tier=tier_to_response(result.entity), ignored=result.ignored)


@router.delete(
    "/tiers/{tier_id}",
    response_model=TierOut,
    summary="Remove a status tier",
    responses={404: {"description": "Tier not in the catalog."}},
)
async def remove_tier(tier_id: str, plugin: YeartracePlugin = Depends(get_plugin)):
    tier = await plugin.edit_catalog(lambda s: catalog.delete_tier(s, tier_id))
    return tier_to_response(tier)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

@router.get("/goals", response_model=list[GoalOut], summary="List goals")
def list_goals(plugin: YeartracePlugin = Depends(get_plugin)):
    return [_goal_to_response(g) for g in plugin.settings.goals]
