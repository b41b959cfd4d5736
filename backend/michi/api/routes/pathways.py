"""Two-phase pathway flow: three drafts, then a finalized plan."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from michi.api.schemas.pathway import (
    DraftsRequest,
    FinalizeRequest,
    FinalPathwayPlan,
    PathwayDraftsResponse,
)
from michi.core.context import bind_user_id
from michi.core.errors import MichiError
from michi.observability.metrics import log_metric, timed_metric
from michi.observability.tracing import trace
from michi.services.llm_client import PathwayModel, get_pathway_model
from michi.services.pathway_planner import finalize_pathway, generate_pathway_drafts

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/pathways/drafts",
    response_model=PathwayDraftsResponse,
    response_model_exclude_none=True,
    tags=["pathways"],
)
def create_pathway_drafts(
    payload: DraftsRequest,
    http_request: Request,
    model: PathwayModel = Depends(get_pathway_model),
) -> PathwayDraftsResponse:
    """Return exactly three lightweight drafts: continuous, themes, hybrid."""
    bind_user_id(payload.learner_id)
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/pathways/drafts",
        "effort_mode": payload.effort_mode,
        "num_days": len(payload.selected_dates),
    }

    try:
        with trace("pathway.drafts", metadata=metadata, user_id=payload.learner_id, trip_id=payload.trip_id, request_id=request_id):
            with timed_metric("pathway.drafts", metadata):
                drafts = generate_pathway_drafts(payload, model, request_id=request_id)
    except MichiError:
        raise
    except Exception as exc:
        logger.exception("Pathway draft generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate pathway drafts",
        ) from exc
    return PathwayDraftsResponse(drafts=drafts)


@router.post(
    "/pathways/finalize",
    response_model=FinalPathwayPlan,
    response_model_exclude_none=True,
    tags=["pathways"],
)
def finalize_pathway_plan(
    payload: FinalizeRequest,
    http_request: Request,
    model: PathwayModel = Depends(get_pathway_model),
) -> FinalPathwayPlan:
    bind_user_id(payload.learner_id)
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/pathways/finalize",
        "effort_mode": payload.effort_mode,
        "num_days": len(payload.selected_dates),
        "chosen_draft_id": payload.chosen_draft_id,
    }

    try:
        with trace("pathway.finalize", metadata=metadata, user_id=payload.learner_id, trip_id=payload.trip_id, request_id=request_id):
            with timed_metric("pathway.finalize", metadata):
                plan = finalize_pathway(payload, model, request_id=request_id)
    except MichiError:
        raise
    except Exception as exc:
        logger.exception("Pathway finalization failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to finalize pathway",
        ) from exc

    log_metric("pathway.finalize.edited", 1 if payload.edited_draft is not None else 0, {"trip_id": payload.trip_id})
    return plan
