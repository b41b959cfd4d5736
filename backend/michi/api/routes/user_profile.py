"""Learner profile storage."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from michi.api.schemas.profile import ProfileResponse, ProfileSaveRequest
from michi.api.schemas.trip import SuccessResponse
from michi.core.context import bind_user_id
from michi.db.deps import get_db
from michi.services.metadata_store import UserMetadataStore

router = APIRouter()


@router.get("/user/profile", response_model=ProfileResponse, tags=["profile"])
def get_profile(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)) -> ProfileResponse:
    """Return the stored profile, or ``{"profile": null}`` when none was saved."""
    bind_user_id(user_id)
    return ProfileResponse(profile=UserMetadataStore(db).get_learner_profile(user_id))


@router.put("/user/profile", response_model=SuccessResponse, response_model_exclude_none=True, tags=["profile"])
def save_profile(payload: ProfileSaveRequest, db: Session = Depends(get_db)) -> SuccessResponse:
    bind_user_id(payload.user_id)
    UserMetadataStore(db).save_learner_profile(payload.user_id, payload.profile)
    return SuccessResponse(message="Profile saved successfully")
