"""Turn validated AI plans into schedule blocks and merge them with stored ones."""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional
from uuid import uuid4

from michi.api.schemas.ai_plan import AIPlanBlock, AIPlanDay, AIPlanResponse
from michi.api.schemas.schedule import ScheduleBlock
from michi.core.errors import InvalidRequestError
from michi.services.activity_images import activity_image_alt, detect_activity_type

logger = logging.getLogger(__name__)


def plan_to_schedule_blocks(
    plan: AIPlanResponse,
    trip_id: str,
    *,
    trip_location: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ScheduleBlock]:
    """Expand every day's block descriptors into generated schedule blocks."""
    created_at = now or datetime.now(timezone.utc)
    blocks: List[ScheduleBlock] = []
    for day in plan.days:
        for descriptor in day.schedule_blocks:
            blocks.append(_build_block(day, descriptor, trip_id, trip_location, created_at))
    return blocks


def apply_ai_plan(
    existing_blocks: Iterable[ScheduleBlock],
    plan: AIPlanResponse,
    trip_id: str,
    *,
    trip_location: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ScheduleBlock]:
    """Keep manual blocks verbatim, drop earlier generated ones, append the plan's blocks."""
    new_blocks = plan_to_schedule_blocks(plan, trip_id, trip_location=trip_location, now=now)
    manual = [block for block in existing_blocks if not block.is_generated]
    logger.info(
        "Applied AI plan to trip %s: %d manual kept, %d generated",
        trip_id,
        len(manual),
        len(new_blocks),
    )
    return manual + new_blocks


def _build_block(
    day: AIPlanDay,
    descriptor: AIPlanBlock,
    trip_id: str,
    trip_location: Optional[str],
    created_at: datetime,
) -> ScheduleBlock:
    location = trip_location if day.field_experience else None
    activity = detect_activity_type(descriptor.title, descriptor.description, day.field_experience)
    return ScheduleBlock(
        id=f"ai-{trip_id}-day{day.day}-{uuid4().hex[:12]}",
        date=day.date or _block_date(descriptor.start_time),
        start_time=descriptor.start_time,
        duration=descriptor.duration,
        title=descriptor.title,
        description=descriptor.description,
        location=location,
        notes=f"{day.field_experience}\n\n{day.inquiry_task}\n\nArtifact: {day.artifact}",
        is_generated=True,
        created_at=created_at,
        image_alt=activity_image_alt(activity, location),
        driving_question=day.driving_question,
        field_experience=day.field_experience,
        inquiry_task=day.inquiry_task,
        artifact=day.artifact,
        reflection_prompt=day.reflection_prompt,
        critique_step=day.critique_step,
        local_options=getattr(descriptor, "local_options", None),
    )


def _block_date(start_time: str) -> date:
    """Calendar date as written in the start time, before any zone conversion."""
    try:
        return datetime.fromisoformat(start_time).date()
    except ValueError:
        try:
            return date.fromisoformat(start_time[:10])
        except ValueError as exc:
            raise InvalidRequestError(f"Unparseable schedule block startTime: {start_time!r}") from exc
