"""Schedule block storage plus deterministic and AI-driven regeneration."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from michi.api.schemas.schedule import (
    ApplyPlanRequest,
    ScheduleBlocksResponse,
    ScheduleBlocksSaveRequest,
    ScheduleGenerateRequest,
)
from michi.api.schemas.trip import SuccessResponse
from michi.core.context import bind_user_id
from michi.core.errors import InvalidRequestError
from michi.db.deps import get_db
from michi.observability.metrics import timed_metric
from michi.observability.tracing import trace
from michi.services.ai_plan_reconciler import apply_ai_plan
from michi.services.ai_plan_validator import validate_ai_plan
from michi.services.metadata_store import UserMetadataStore
from michi.services.schedule_generator import generate_schedule_blocks
from michi.services.trip_store import TripStore, get_trip_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/user/schedule-blocks",
    response_model=ScheduleBlocksResponse,
    response_model_exclude_none=True,
    tags=["schedule"],
)
def get_schedule_blocks(
    user_id: str = Query(..., min_length=1),
    trip_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
) -> ScheduleBlocksResponse:
    bind_user_id(user_id)
    return ScheduleBlocksResponse(schedule_blocks=UserMetadataStore(db).get_schedule_blocks(user_id, trip_id))


@router.put("/user/schedule-blocks", response_model=SuccessResponse, response_model_exclude_none=True, tags=["schedule"])
def save_schedule_blocks(payload: ScheduleBlocksSaveRequest, db: Session = Depends(get_db)) -> SuccessResponse:
    """Replace the stored block list for one trip; other trips are untouched."""
    bind_user_id(payload.user_id)
    UserMetadataStore(db).save_schedule_blocks(payload.user_id, payload.trip_id, payload.schedule_blocks)
    return SuccessResponse(message="Schedule blocks saved successfully")


@router.post(
    "/trips/{trip_id}/schedule/generate",
    response_model=ScheduleBlocksResponse,
    response_model_exclude_none=True,
    tags=["schedule"],
)
def generate_trip_schedule(
    trip_id: str,
    payload: ScheduleGenerateRequest,
    http_request: Request,
    store: TripStore = Depends(get_trip_store),
    db: Session = Depends(get_db),
) -> ScheduleBlocksResponse:
    """Regenerate the one-block-per-day schedule, keeping manual blocks."""
    bind_user_id(payload.user_id)
    request_id = getattr(http_request.state, "request_id", None)
    trip = store.get_trip(payload.user_id, trip_id)
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    if trip.learning_target is None:
        raise InvalidRequestError("Trip has no learning target")

    metadata: Dict[str, Any] = {"route": "/trips/{id}/schedule/generate", "track": trip.learning_target.track}
    metadata_store = UserMetadataStore(db)
    with trace("schedule.generate", metadata=metadata, user_id=payload.user_id, trip_id=trip_id, request_id=request_id):
        with timed_metric("schedule.generate", metadata) as extra:
            existing = metadata_store.get_schedule_blocks(payload.user_id, trip_id)
            blocks = generate_schedule_blocks(trip, existing, payload.timezone)
            extra["block_count"] = len(blocks)
            metadata_store.save_schedule_blocks(payload.user_id, trip_id, blocks)
    return ScheduleBlocksResponse(schedule_blocks=blocks)


@router.post(
    "/trips/{trip_id}/schedule/apply-plan",
    response_model=ScheduleBlocksResponse,
    response_model_exclude_none=True,
    tags=["schedule"],
)
def apply_plan_to_schedule(
    trip_id: str,
    payload: ApplyPlanRequest,
    http_request: Request,
    store: TripStore = Depends(get_trip_store),
    db: Session = Depends(get_db),
) -> ScheduleBlocksResponse:
    """Replace generated blocks with those of an AI plan; manual blocks survive."""
    bind_user_id(payload.user_id)
    request_id = getattr(http_request.state, "request_id", None)
    trip = store.get_trip(payload.user_id, trip_id)
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")

    raw_days = payload.plan.get("days")
    plan = validate_ai_plan(payload.plan, len(raw_days) if isinstance(raw_days, list) else 0)

    metadata: Dict[str, Any] = {"route": "/trips/{id}/schedule/apply-plan", "days": len(plan.days)}
    metadata_store = UserMetadataStore(db)
    with trace("schedule.apply_plan", metadata=metadata, user_id=payload.user_id, trip_id=trip_id, request_id=request_id):
        with timed_metric("schedule.apply_plan", metadata) as extra:
            existing = metadata_store.get_schedule_blocks(payload.user_id, trip_id)
            blocks = apply_ai_plan(existing, plan, trip_id, trip_location=trip.base_location)
            extra["block_count"] = len(blocks)
            metadata_store.save_schedule_blocks(payload.user_id, trip_id, blocks)
    logger.info("Applied plan with %d days to trip %s", len(plan.days), trip_id)
    return ScheduleBlocksResponse(schedule_blocks=blocks)
