"""Schemas for trips and their learning targets."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from michi.api.schemas.common import CamelModel

LearningTrack = Literal["15min", "60min", "4hrs", "weekly"]


class LearningTarget(CamelModel):
    track: LearningTrack
    # Required for the weekly track; checked when durations are resolved.
    weekly_hours: Optional[float] = None


class Trip(CamelModel):
    id: str
    title: str
    start_date: date
    end_date: date
    base_location: str
    learning_target: Optional[LearningTarget] = None
    created_at: datetime


class TripRecord(CamelModel):
    """Stored envelope around a trip, keyed by trip id."""

    id: str
    owner_user_id: Optional[str] = None
    trip: Trip
    created_at: datetime
    updated_at: datetime


class TripCreateRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    base_location: str = Field(..., min_length=1)
    learning_target: Optional[LearningTarget] = None

    @model_validator(mode="after")
    def _check_range(self) -> "TripCreateRequest":
        if self.start_date > self.end_date:
            raise ValueError("startDate must be on or before endDate")
        return self


class TripUpdateRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    base_location: Optional[str] = Field(default=None, min_length=1)
    learning_target: Optional[LearningTarget] = None

    def updates(self) -> dict:
        """Fields the caller actually sent, minus the owner id."""
        return self.model_dump(exclude_unset=True, exclude={"user_id"})


class TripResponse(CamelModel):
    trip: Trip


class TripListResponse(CamelModel):
    trips: List[Trip]


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
