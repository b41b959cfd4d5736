"""Finalized pathway storage per trip."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from michi.api.schemas.pathway import PathwayResponse, PathwaySaveRequest
from michi.api.schemas.trip import SuccessResponse
from michi.core.context import bind_user_id
from michi.db.deps import get_db
from michi.services.metadata_store import UserMetadataStore

router = APIRouter()


@router.get("/user/pathways", response_model=PathwayResponse, tags=["pathways"])
def get_pathway(
    user_id: str = Query(..., min_length=1),
    trip_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
) -> PathwayResponse:
    bind_user_id(user_id)
    return PathwayResponse(pathway=UserMetadataStore(db).get_pathway(user_id, trip_id))


@router.put("/user/pathways", response_model=SuccessResponse, response_model_exclude_none=True, tags=["pathways"])
def save_pathway(payload: PathwaySaveRequest, db: Session = Depends(get_db)) -> SuccessResponse:
    bind_user_id(payload.user_id)
    UserMetadataStore(db).save_pathway(payload.user_id, payload.trip_id, payload.pathway)
    return SuccessResponse(message="Pathway saved successfully")
