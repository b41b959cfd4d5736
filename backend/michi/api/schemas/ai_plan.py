"""Structural contract for multi-day plans produced by the generative model."""
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import Field

from michi.api.schemas.common import CamelModel


class AIPlanBlock(CamelModel):
    start_time: str
    # Strict: model output such as "45" or 30.0 is rejected, not coerced.
    duration: int = Field(..., gt=0, strict=True)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class AIPlanDay(CamelModel):
    day: int = Field(..., ge=1, strict=True)
    driving_question: str = Field(..., min_length=1)
    field_experience: str = Field(..., min_length=1)
    inquiry_task: str = Field(..., min_length=1)
    artifact: str = Field(..., min_length=1)
    reflection_prompt: str = Field(..., min_length=1)
    critique_step: str = Field(..., min_length=1)
    schedule_blocks: List[AIPlanBlock]
    # Set once a day has been pinned to a selected calendar date.
    date: Optional[dt.date] = None


class AIPlanResponse(CamelModel):
    days: List[AIPlanDay]
    summary: Optional[str] = None
    verify_locally: Optional[str] = None
