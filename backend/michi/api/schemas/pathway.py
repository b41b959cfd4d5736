"""Schemas for pathway drafts, finalized plans and AI plan requests."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from michi.api.schemas.common import CamelModel
from michi.api.schemas.ai_plan import AIPlanBlock, AIPlanDay
from michi.api.schemas.profile import LearnerProfile
from michi.api.schemas.trip import LearningTarget, LearningTrack

PathwayDraftType = Literal["continuous", "themes", "hybrid"]
DRAFT_TYPES: tuple[PathwayDraftType, ...] = ("continuous", "themes", "hybrid")


class PathwayDraftDay(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    day: int
    date: str
    headline: str
    summary: Optional[str] = None


class PathwayDraft(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    type: PathwayDraftType
    title: str
    overview: str
    why_it_fits: str
    days: List[PathwayDraftDay]
    rationale: Optional[str] = None


class PathwayDraftsResponse(CamelModel):
    drafts: List[PathwayDraft]


class TripContext(CamelModel):
    """Trip fields the prompts need; ids and timestamps are optional here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[str] = None
    title: str
    start_date: dt.date
    end_date: dt.date
    base_location: str
    learning_target: Optional[LearningTarget] = None


class ItineraryItem(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    date_time: str
    title: str
    location: str = ""
    notes: str = ""


class GenerationOptions(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    selected_days: List[dt.date] = Field(default_factory=list)
    image_mode: Optional[str] = None
    include_maps: bool = False


class AIPlanRequest(CamelModel):
    learner_profile_id: Optional[str] = None
    learner_profile: Optional[LearnerProfile] = None
    trip: TripContext
    learning_target: LearningTarget
    existing_itinerary: List[ItineraryItem] = Field(default_factory=list)
    generation_options: Optional[GenerationOptions] = None

    @model_validator(mode="after")
    def _require_profile(self) -> "AIPlanRequest":
        if self.learner_profile is None and not self.learner_profile_id:
            raise ValueError("Either learnerProfile or learnerProfileId must be provided")
        return self


class DraftsRequest(CamelModel):
    trip_id: str = Field(..., min_length=1)
    learner_id: str = Field(..., min_length=1)
    selected_dates: List[str] = Field(..., min_length=1)
    effort_mode: LearningTrack
    trip: TripContext
    learner_profile: LearnerProfile


class FinalizeRequest(CamelModel):
    trip_id: str = Field(..., min_length=1)
    learner_id: str = Field(..., min_length=1)
    chosen_draft_id: str = Field(..., min_length=1)
    selected_dates: List[str] = Field(..., min_length=1)
    effort_mode: LearningTrack
    trip: TripContext
    learner_profile: LearnerProfile
    chosen_draft: Dict[str, Any]
    edited_draft: Optional[Dict[str, Any]] = None


class FinalPathwayBlock(AIPlanBlock):
    local_options: Optional[List[Dict[str, Any]]] = None


class FinalPathwayDay(AIPlanDay):
    schedule_blocks: List[FinalPathwayBlock]
    date: dt.date


class FinalPathwayPlan(CamelModel):
    days: List[FinalPathwayDay]
    summary: Optional[str] = None


class PathwayResponse(CamelModel):
    pathway: Optional[Dict[str, Any]] = None


class PathwaySaveRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    trip_id: str = Field(..., min_length=1)
    pathway: Dict[str, Any]
