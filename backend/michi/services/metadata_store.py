"""Per-user metadata document access with key-scoped patch semantics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from michi.api.schemas.profile import LearnerProfile
from michi.api.schemas.schedule import ScheduleBlock
from michi.db.models.user_metadata import UserMetadata

logger = logging.getLogger(__name__)

MetadataSection = Literal["public", "private"]

TRIPS_KEY = "trips"
SCHEDULE_BLOCKS_KEY = "scheduleBlocks"
PATHWAYS_KEY = "pathways"
LEARNER_PROFILE_KEY = "learnerProfile"


@dataclass(frozen=True)
class MetadataPatch:
    """Replace one top-level key of one metadata section; siblings are untouched."""

    section: MetadataSection
    key: str
    value: Any


class UserMetadataStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def read(self, user_id: str, section: MetadataSection) -> Dict[str, Any]:
        row = self.db.get(UserMetadata, user_id)
        if row is None:
            return {}
        return dict(_section(row, section) or {})

    def apply(self, user_id: str, patch: MetadataPatch) -> None:
        row = self._lock_or_create(user_id)
        merged = dict(_section(row, patch.section) or {})
        merged[patch.key] = patch.value
        # JSON columns are not mutation-tracked; assign a fresh dict.
        setattr(row, _column(patch.section), merged)
        self.db.commit()
        logger.debug("Patched %s.%s for user %s", patch.section, patch.key, user_id)

    def _set_entry(self, user_id: str, section: MetadataSection, key: str, entry: str, value: Any) -> None:
        """Replace one entry of a per-trip map under ``key`` in a single transaction."""
        row = self._lock_or_create(user_id)
        current = dict(_section(row, section) or {})
        mapping = current.get(key)
        mapping = dict(mapping) if isinstance(mapping, dict) else {}
        mapping[entry] = value
        current[key] = mapping
        setattr(row, _column(section), current)
        self.db.commit()

    def _lock_or_create(self, user_id: str) -> UserMetadata:
        stmt = select(UserMetadata).where(UserMetadata.user_id == user_id).with_for_update()
        row = self.db.execute(stmt).scalar_one_or_none()
        if row is not None:
            return row

        row = UserMetadata(user_id=user_id, public_metadata={}, private_metadata={})
        self.db.add(row)
        try:
            self.db.flush()
            return row
        except IntegrityError:
            self.db.rollback()
            existing = self.db.execute(stmt).scalar_one_or_none()
            if existing:
                return existing
            raise

    # Typed accessors

    def get_schedule_blocks(self, user_id: str, trip_id: str) -> List[ScheduleBlock]:
        by_trip = self.read(user_id, "private").get(SCHEDULE_BLOCKS_KEY) or {}
        return [ScheduleBlock.model_validate(block) for block in by_trip.get(trip_id) or []]

    def save_schedule_blocks(self, user_id: str, trip_id: str, blocks: List[ScheduleBlock]) -> None:
        payload = [block.to_json_dict() for block in blocks]
        self._set_entry(user_id, "private", SCHEDULE_BLOCKS_KEY, trip_id, payload)
        logger.info("Saved %d schedule blocks for trip %s", len(payload), trip_id)

    def get_pathway(self, user_id: str, trip_id: str) -> Optional[Dict[str, Any]]:
        by_trip = self.read(user_id, "private").get(PATHWAYS_KEY) or {}
        return by_trip.get(trip_id)

    def save_pathway(self, user_id: str, trip_id: str, pathway: Dict[str, Any]) -> None:
        self._set_entry(user_id, "private", PATHWAYS_KEY, trip_id, pathway)

    def get_trip_records(self, user_id: str) -> List[Dict[str, Any]]:
        raw = self.read(user_id, "private").get(TRIPS_KEY)
        if isinstance(raw, list):
            return raw
        # Older documents nested the list one level deeper.
        if isinstance(raw, dict) and isinstance(raw.get(TRIPS_KEY), list):
            return raw[TRIPS_KEY]
        return []

    def save_trip_records(self, user_id: str, records: List[Dict[str, Any]]) -> None:
        self.apply(user_id, MetadataPatch("private", TRIPS_KEY, records))

    def get_learner_profile(self, user_id: str) -> Optional[LearnerProfile]:
        raw = self.read(user_id, "public").get(LEARNER_PROFILE_KEY)
        if raw is None:
            raw = self.read(user_id, "private").get(LEARNER_PROFILE_KEY)
        return LearnerProfile.model_validate(raw) if raw else None

    def save_learner_profile(self, user_id: str, profile: LearnerProfile) -> None:
        self.apply(user_id, MetadataPatch("public", LEARNER_PROFILE_KEY, profile.to_json_dict()))


def _column(section: MetadataSection) -> str:
    return "public_metadata" if section == "public" else "private_metadata"


def _section(row: UserMetadata, section: MetadataSection) -> Optional[Dict[str, Any]]:
    return getattr(row, _column(section))
