"""Orchestrates model calls for one-shot plans, drafts and finalized pathways."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import ValidationError

from michi.api.schemas.ai_plan import AIPlanResponse
from michi.api.schemas.pathway import (
    AIPlanRequest,
    DraftsRequest,
    FinalizeRequest,
    FinalPathwayBlock,
    FinalPathwayDay,
    FinalPathwayPlan,
    PathwayDraft,
)
from michi.core.errors import InvalidRequestError
from michi.observability.metrics import log_metric
from michi.services.ai_plan_validator import validate_ai_plan
from michi.services.learner_profiles import get_learner_profile
from michi.services.llm_client import PathwayModel, extract_json
from michi.services.pathway_drafts import select_pathway_drafts, validate_edited_draft
from michi.services.pathway_prompts import build_drafts_prompt, build_finalize_prompt, build_plan_prompt

logger = logging.getLogger(__name__)


def generate_ai_plan(
    request: AIPlanRequest,
    model: PathwayModel,
    *,
    request_id: Optional[str] = None,
) -> AIPlanResponse:
    """
    Generate and validate a plan covering the selected days or the whole trip.

    With selected days, day ``i`` of the model's answer is pinned to the
    ``i``-th selected date (ascending) and renumbered by its offset from the
    trip start, so day numbers line up with the trip calendar.
    """
    profile = request.learner_profile or get_learner_profile(request.learner_profile_id or "")
    trip = request.trip
    options = request.generation_options
    selected_days = sorted(options.selected_days) if options and options.selected_days else []

    if selected_days:
        outside = [day.isoformat() for day in selected_days if not trip.start_date <= day <= trip.end_date]
        if outside:
            raise InvalidRequestError("selectedDays must fall within the trip dates", details={"outside": outside})
        num_days = len(selected_days)
    else:
        num_days = (trip.end_date - trip.start_date).days + 1
    if num_days < 1:
        raise InvalidRequestError("Trip must span at least one day")

    system_prompt, user_prompt = build_plan_prompt(
        profile, trip, request.learning_target, request.existing_itinerary, num_days
    )
    metadata = {"trip_id": trip.id, "num_days": num_days, "track": request.learning_target.track}
    raw = model.complete(system_prompt, user_prompt, trace_name="pathway.plan", metadata=metadata, request_id=request_id)
    plan = validate_ai_plan(extract_json(raw), num_days)
    log_metric("pathway.plan.days", len(plan.days), metadata)

    if not selected_days:
        return plan

    mapped_days = []
    for index, day in enumerate(plan.days[: len(selected_days)]):
        actual = selected_days[index]
        mapped_days.append(day.model_copy(update={"day": (actual - trip.start_date).days + 1, "date": actual}))
    logger.info("Mapped %d plan days onto selected dates for trip %s", len(mapped_days), trip.id)
    return plan.model_copy(update={"days": mapped_days})


def generate_pathway_drafts(
    request: DraftsRequest,
    model: PathwayModel,
    *,
    request_id: Optional[str] = None,
) -> List[PathwayDraft]:
    system_prompt, user_prompt = build_drafts_prompt(
        request.learner_profile, request.trip, request.effort_mode, request.selected_dates
    )
    metadata = {"trip_id": request.trip_id, "num_days": len(request.selected_dates), "effort_mode": request.effort_mode}
    raw = model.complete(system_prompt, user_prompt, trace_name="pathway.drafts", metadata=metadata, request_id=request_id)
    return select_pathway_drafts(extract_json(raw), request.selected_dates)


def finalize_pathway(
    request: FinalizeRequest,
    model: PathwayModel,
    *,
    request_id: Optional[str] = None,
) -> FinalPathwayPlan:
    """Expand the chosen (or user-edited) draft into a plan pinned to the selected dates."""
    dates = _parse_selected_dates(request.selected_dates)
    if request.edited_draft is not None:
        draft = validate_edited_draft(request.edited_draft, request.selected_dates)
    else:
        try:
            draft = PathwayDraft.model_validate(request.chosen_draft)
        except ValidationError as exc:
            raise InvalidRequestError(
                "Invalid chosenDraft",
                details=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

    num_days = len(dates)
    system_prompt, user_prompt = build_finalize_prompt(
        request.learner_profile, request.trip, request.effort_mode, request.selected_dates, draft
    )
    metadata = {
        "trip_id": request.trip_id,
        "num_days": num_days,
        "draft_type": draft.type,
        "edited": request.edited_draft is not None,
    }
    raw = model.complete(system_prompt, user_prompt, trace_name="pathway.finalize", metadata=metadata, request_id=request_id)
    plan = validate_ai_plan(extract_json(raw), num_days)

    days = [
        FinalPathwayDay(
            day=index + 1,
            date=dates[index],
            driving_question=day.driving_question,
            field_experience=day.field_experience,
            inquiry_task=day.inquiry_task,
            artifact=day.artifact,
            reflection_prompt=day.reflection_prompt,
            critique_step=day.critique_step,
            schedule_blocks=[FinalPathwayBlock(**block.model_dump()) for block in day.schedule_blocks],
        )
        for index, day in enumerate(plan.days)
    ]
    return FinalPathwayPlan(days=days, summary=plan.summary)


def _parse_selected_dates(values: Sequence[str]) -> List[date]:
    parsed: List[date] = []
    for value in values:
        try:
            parsed.append(date.fromisoformat(value))
        except ValueError as exc:
            raise InvalidRequestError(f"selectedDates entry is not an ISO date: {value!r}") from exc
    return parsed
