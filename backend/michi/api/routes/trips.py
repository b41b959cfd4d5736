"""Trip CRUD routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from michi.api.schemas.trip import (
    SuccessResponse,
    TripCreateRequest,
    TripListResponse,
    TripResponse,
    TripUpdateRequest,
)
from michi.core.context import bind_user_id
from michi.observability.metrics import log_metric
from michi.observability.tracing import trace
from michi.services.trip_store import TripStore, get_trip_store

router = APIRouter()


@router.get("/trips", response_model=TripListResponse, response_model_exclude_none=True, tags=["trips"])
def list_trips(
    user_id: str = Query(..., min_length=1),
    store: TripStore = Depends(get_trip_store),
) -> TripListResponse:
    bind_user_id(user_id)
    return TripListResponse(trips=store.list_trips(user_id))


@router.post(
    "/trips",
    response_model=TripResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    tags=["trips"],
)
def create_trip(
    payload: TripCreateRequest,
    http_request: Request,
    store: TripStore = Depends(get_trip_store),
) -> TripResponse:
    bind_user_id(payload.user_id)
    request_id = getattr(http_request.state, "request_id", None)
    with trace("trip.create", metadata={"route": "/trips"}, user_id=payload.user_id, request_id=request_id):
        trip = store.create_trip(payload.user_id, payload)
    log_metric("trip.created", 1, {"has_target": trip.learning_target is not None})
    return TripResponse(trip=trip)


@router.get("/trips/{trip_id}", response_model=TripResponse, response_model_exclude_none=True, tags=["trips"])
def get_trip(
    trip_id: str,
    user_id: str = Query(..., min_length=1),
    store: TripStore = Depends(get_trip_store),
) -> TripResponse:
    bind_user_id(user_id)
    trip = store.get_trip(user_id, trip_id)
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return TripResponse(trip=trip)


@router.patch("/trips/{trip_id}", response_model=TripResponse, response_model_exclude_none=True, tags=["trips"])
def update_trip(
    trip_id: str,
    payload: TripUpdateRequest,
    store: TripStore = Depends(get_trip_store),
) -> TripResponse:
    """Apply a partial update; only fields present in the body change."""
    bind_user_id(payload.user_id)
    trip = store.update_trip(payload.user_id, trip_id, payload.updates())
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return TripResponse(trip=trip)


@router.delete("/trips/{trip_id}", response_model=SuccessResponse, response_model_exclude_none=True, tags=["trips"])
def delete_trip(
    trip_id: str,
    user_id: str = Query(..., min_length=1),
    store: TripStore = Depends(get_trip_store),
) -> SuccessResponse:
    bind_user_id(user_id)
    if not store.delete_trip(user_id, trip_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return SuccessResponse()
