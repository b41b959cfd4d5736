"""Owner-scoped trip persistence with metadata and JSON-file backends."""
from __future__ import annotations

import json
import logging
import os
import secrets
import string
import tempfile
import threading
from contextlib import contextmanager, nullcontext
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, ContextManager, Dict, Iterator, List, Optional

from fastapi import Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from michi.api.schemas.trip import Trip, TripCreateRequest, TripRecord
from michi.core.config import get_settings
from michi.core.errors import ConfigurationError, InvalidRequestError
from michi.db.deps import get_db
from michi.services.metadata_store import UserMetadataStore

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_trip_id(now: Optional[datetime] = None) -> str:
    stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"trip-{stamp}-{suffix}"


class TripStore:
    """Base interface; every operation is scoped to ``user_id``."""

    def _load(self, user_id: str) -> List[TripRecord]:
        raise NotImplementedError

    def _save(self, user_id: str, records: List[TripRecord]) -> None:
        raise NotImplementedError

    def _locked(self) -> ContextManager[Any]:
        """Held around each read-modify-write; backends sharing state across requests override it."""
        return nullcontext()

    def list_trips(self, user_id: str) -> List[Trip]:
        return [record.trip for record in self._load(user_id) if _owned(record, user_id)]

    def get_trip(self, user_id: str, trip_id: str) -> Optional[Trip]:
        record = _find(self._load(user_id), user_id, trip_id)
        return record.trip if record else None

    def create_trip(self, user_id: str, payload: TripCreateRequest) -> Trip:
        now = datetime.now(timezone.utc)
        trip = Trip(
            id=new_trip_id(now),
            title=payload.title,
            start_date=payload.start_date,
            end_date=payload.end_date,
            base_location=payload.base_location,
            learning_target=payload.learning_target,
            created_at=now,
        )
        with self._locked():
            records = self._load(user_id)
            records.append(TripRecord(id=trip.id, owner_user_id=user_id, trip=trip, created_at=now, updated_at=now))
            self._save(user_id, records)
        logger.info("Created trip %s for user %s", trip.id, user_id)
        return trip

    def update_trip(self, user_id: str, trip_id: str, updates: Dict[str, Any]) -> Optional[Trip]:
        """Shallow-merge ``updates`` into the stored trip; id and createdAt never change."""
        with self._locked():
            records = self._load(user_id)
            record = _find(records, user_id, trip_id)
            if record is None:
                return None

            merged = record.trip.model_dump()
            merged.update({key: value for key, value in updates.items() if key not in {"id", "created_at"}})
            try:
                trip = Trip.model_validate(merged)
            except ValidationError as exc:
                raise InvalidRequestError(
                    "Invalid trip update",
                    details=exc.errors(include_url=False, include_context=False, include_input=False),
                ) from exc
            if trip.start_date > trip.end_date:
                raise InvalidRequestError("startDate must be on or before endDate")

            record.trip = trip
            record.updated_at = datetime.now(timezone.utc)
            self._save(user_id, records)
            return trip

    def delete_trip(self, user_id: str, trip_id: str) -> bool:
        with self._locked():
            records = self._load(user_id)
            remaining = [record for record in records if not (record.id == trip_id and _owned(record, user_id))]
            if len(remaining) == len(records):
                return False
            self._save(user_id, remaining)
            logger.info("Deleted trip %s for user %s", trip_id, user_id)
        return True


class MetadataTripStore(TripStore):
    """Trip records kept under ``trips`` in the owner's private metadata."""

    def __init__(self, db: Session) -> None:
        self.metadata = UserMetadataStore(db)

    def _load(self, user_id: str) -> List[TripRecord]:
        records = []
        for raw in self.metadata.get_trip_records(user_id):
            raw = dict(raw)
            raw.setdefault("ownerUserId", user_id)
            records.append(TripRecord.model_validate(raw))
        return records

    def _save(self, user_id: str, records: List[TripRecord]) -> None:
        self.metadata.save_trip_records(user_id, [record.to_json_dict() for record in records])


class JsonFileTripStore(TripStore):
    """All users' trips in one JSON document: ``{"trips": [TripRecord, ...]}``."""

    _lock = threading.RLock()

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def _read_all(self) -> List[TripRecord]:
        with self._lock:
            if not self.path.exists():
                return []
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        return [TripRecord.model_validate(raw) for raw in data.get("trips", [])]

    def _load(self, user_id: str) -> List[TripRecord]:
        return self._read_all()

    def _save(self, user_id: str, records: List[TripRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"trips": [record.to_json_dict() for record in records]}
        # Readers only ever see a complete document: write a sibling file, then swap it in.
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2)
                os.replace(tmp_name, self.path)
            except Exception:
                Path(tmp_name).unlink(missing_ok=True)
                raise


def get_trip_store(db: Session = Depends(get_db)) -> TripStore:
    """FastAPI dependency choosing the backend from settings."""
    settings = get_settings()
    backend = settings.trip_store_backend.lower()
    if backend == "metadata":
        return MetadataTripStore(db)
    if backend == "file":
        return JsonFileTripStore(settings.trips_file_path)
    raise ConfigurationError(f"Unsupported trip store backend: {settings.trip_store_backend}")


def _owned(record: TripRecord, user_id: str) -> bool:
    return record.owner_user_id == user_id


def _find(records: List[TripRecord], user_id: str, trip_id: str) -> Optional[TripRecord]:
    return next((record for record in records if record.id == trip_id and _owned(record, user_id)), None)
