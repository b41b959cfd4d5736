"""Day-by-day schedule generation from a trip's learning target."""
from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from michi.api.schemas.schedule import ScheduleBlock
from michi.api.schemas.trip import Trip
from michi.core.errors import InvalidRequestError

logger = logging.getLogger(__name__)

TRACK_MINUTES = {
    "15min": 15,
    "60min": 60,
    "4hrs": 240,
}
DEFAULT_MINUTES = 60
GENERATED_BLOCK_TITLE = "Learning Block"
GENERATED_BLOCK_START = time(hour=10)


class LearningTargetError(InvalidRequestError):
    """Learning target cannot be turned into a per-day duration."""


def resolve_duration_minutes(track: str, weekly_hours: Optional[float] = None) -> int:
    """Map a learning track to the minutes scheduled per calendar day.

    Weekly budgets are spread across all seven days of the week, not only
    the days the trip covers.
    """
    if track in TRACK_MINUTES:
        return TRACK_MINUTES[track]
    if track == "weekly":
        if not weekly_hours or weekly_hours <= 0:
            raise LearningTargetError("Weekly hours must be greater than 0")
        # half-up, so 30.5 rounds to 31 rather than to the even neighbour
        return int(math.floor(weekly_hours * 60 / 7 + 0.5))
    return DEFAULT_MINUTES


def enumerate_days(start: date | str, end: date | str) -> List[str]:
    """Return ISO dates from start to end inclusive; empty when start > end."""
    current = _as_date(start)
    last = _as_date(end)
    days: List[str] = []
    while current <= last:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


def generate_schedule_blocks(
    trip: Trip,
    existing_blocks: Iterable[ScheduleBlock],
    timezone_name: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> List[ScheduleBlock]:
    """
    Build the authoritative block list for a trip.

    Manual blocks from ``existing_blocks`` are returned untouched and in order;
    previously generated ones are replaced by exactly one fresh block per trip
    day. Block ids depend only on trip id and date, so regenerating with an
    unchanged trip yields the same ids.
    """
    if trip.learning_target is None:
        return []

    target = trip.learning_target
    duration = resolve_duration_minutes(target.track, target.weekly_hours)
    tz = _load_zone(timezone_name)
    created_at = now or datetime.now(timezone.utc)

    generated: List[ScheduleBlock] = []
    for day in enumerate_days(trip.start_date, trip.end_date):
        start = datetime.combine(date.fromisoformat(day), GENERATED_BLOCK_START, tzinfo=tz)
        generated.append(
            ScheduleBlock(
                id=f"generated-{trip.id}-{day}",
                date=day,
                start_time=start.isoformat(),
                duration=duration,
                title=GENERATED_BLOCK_TITLE,
                is_generated=True,
                created_at=created_at,
            )
        )

    manual = [block for block in existing_blocks if not block.is_generated]
    logger.debug(
        "Generated %d blocks for trip %s (%d manual kept, %d min/day)",
        len(generated),
        trip.id,
        len(manual),
        duration,
    )
    return manual + generated


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError) as exc:
        raise InvalidRequestError(f"Invalid ISO date: {value!r}") from exc


def _load_zone(timezone_name: Optional[str]) -> Optional[ZoneInfo]:
    if not timezone_name:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidRequestError(f"Unknown timezone: {timezone_name}") from exc
