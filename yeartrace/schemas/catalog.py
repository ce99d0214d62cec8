"""
Catalog (settings tab) request / response schemas.

Numeric fields on PATCH bodies accept raw form text; unparsable values are
skipped and listed in the response's `ignored` field.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from yeartrace.schemas.domain import BehaviorType

FormNumber = Optional[Union[int, str]]


class BehaviorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    score: int
    repeatable: bool
    type: str
    max_count: Optional[int] = None
    category: Optional[str] = None


class TierOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    min_score: int
    color: str


class GoalOut(BaseModel):
    id: str
    title: str
    level: str
    start: str
    end: str
    status: str


class BehaviorCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(default="", max_length=256, examples=["运动"])
    score: int = 1
    repeatable: bool = False
    type: BehaviorType = BehaviorType.habit
    max_count: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None


class BehaviorPatchRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, max_length=256)
    score: FormNumber = Field(default=None, examples=["3"])
    repeatable: Optional[bool] = None
    type: Optional[BehaviorType] = None
    max_count: FormNumber = Field(
        default=None, description='Empty string "" removes the cap.'
    )
    category: Optional[str] = None


class TierCreateRequest(BaseModel):
    name: str = Field(default="", max_length=256)
    min_score: int = Field(examples=[6])
    color: str = "var(--color-base-40)"


class TierPatchRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=256)
    min_score: FormNumber = Field(default=None, examples=["6"])
    color: Optional[str] = None


class BehaviorEditResponse(BaseModel):
    behavior: BehaviorOut
    ignored: list[str] = Field(default_factory=list)


class TierEditResponse(BaseModel):
    tier: TierOut
    ignored: list[str] = Field(default_factory=list)
