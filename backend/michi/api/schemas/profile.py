"""Learner profile schemas."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from michi.api.schemas.common import CamelModel


class _PassthroughModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class LearningPreferences(_PassthroughModel):
    preferred_learning_times: List[str] = Field(default_factory=list)
    preferred_duration: Literal["short", "medium", "long"] = "medium"
    preferred_duration_minutes: Optional[int] = Field(default=None, ge=15, le=120)
    interaction_style: Literal["solo", "collaborative", "mixed"] = "mixed"
    content_format: List[str] = Field(default_factory=list)


class LearningConstraints(_PassthroughModel):
    max_daily_minutes: Optional[int] = Field(default=None, gt=0)
    available_days: Optional[List[str]] = None
    must_avoid_times: Optional[List[str]] = None


class PBLProfile(_PassthroughModel):
    interests: List[str] = Field(default_factory=list)
    dislikes: Optional[List[str]] = None
    current_level: Literal["beginner", "intermediate", "advanced"] = "beginner"
    learning_goals: List[str] = Field(default_factory=list)
    preferred_artifact_types: List[str] = Field(default_factory=list)


class ExperientialProfile(_PassthroughModel):
    preferred_field_experiences: List[str] = Field(default_factory=list)
    reflection_style: Literal["journal", "discussion", "artistic", "analytical"] = "journal"
    inquiry_approach: Literal["structured", "open-ended", "guided"] = "guided"


class LearnerProfile(_PassthroughModel):
    name: str = Field(..., min_length=1)
    timezone: str
    age_band: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    preferences: LearningPreferences = Field(default_factory=LearningPreferences)
    constraints: LearningConstraints = Field(default_factory=LearningConstraints)
    pbl_profile: PBLProfile = Field(default_factory=PBLProfile)
    experiential_profile: ExperientialProfile = Field(default_factory=ExperientialProfile)


class ProfileResponse(CamelModel):
    profile: Optional[LearnerProfile] = None


class ProfileSaveRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    profile: LearnerProfile
