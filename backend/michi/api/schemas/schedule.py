"""Schedule block schemas."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from michi.api.schemas.common import CamelModel


class ScheduleBlock(CamelModel):
    """A dated, timed unit of learning; unknown enrichment keys are kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    date: dt.date
    start_time: str
    duration: int = Field(..., gt=0)
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_generated: bool
    created_at: dt.datetime
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    driving_question: Optional[str] = None
    field_experience: Optional[str] = None
    inquiry_task: Optional[str] = None
    artifact: Optional[str] = None
    reflection_prompt: Optional[str] = None
    critique_step: Optional[str] = None
    local_options: Optional[List[Dict[str, Any]]] = None


class ScheduleBlocksResponse(CamelModel):
    schedule_blocks: List[ScheduleBlock]


class ScheduleBlocksSaveRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    trip_id: str = Field(..., min_length=1)
    schedule_blocks: List[ScheduleBlock]


class ScheduleGenerateRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    timezone: Optional[str] = None


class ApplyPlanRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    plan: Dict[str, Any]
