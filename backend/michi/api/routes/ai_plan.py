"""One-shot AI learning plan generation."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from michi.api.schemas.ai_plan import AIPlanResponse
from michi.api.schemas.pathway import AIPlanRequest
from michi.core.errors import MichiError
from michi.observability.metrics import timed_metric
from michi.observability.tracing import trace
from michi.services.llm_client import PathwayModel, get_pathway_model
from michi.services.pathway_planner import generate_ai_plan

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/ai/plan", response_model=AIPlanResponse, response_model_exclude_none=True, tags=["ai"])
def create_ai_plan(
    payload: AIPlanRequest,
    http_request: Request,
    model: PathwayModel = Depends(get_pathway_model),
) -> AIPlanResponse:
    request_id = getattr(http_request.state, "request_id", None)
    options = payload.generation_options
    metadata: Dict[str, Any] = {
        "route": "/ai/plan",
        "track": payload.learning_target.track,
        "selected_days": len(options.selected_days) if options else 0,
        "profile_source": "inline" if payload.learner_profile else "builtin",
    }

    try:
        with trace("ai.plan", metadata=metadata, trip_id=payload.trip.id, request_id=request_id):
            with timed_metric("ai.plan", metadata) as extra:
                plan = generate_ai_plan(payload, model, request_id=request_id)
                extra["days"] = len(plan.days)
    except MichiError:
        raise
    except Exception as exc:
        logger.exception("AI plan generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate learning pathway",
        ) from exc
    return plan
