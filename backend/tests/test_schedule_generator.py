from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from michi.api.schemas.schedule import ScheduleBlock
from michi.api.schemas.trip import LearningTarget, Trip
from michi.core.errors import InvalidRequestError
from michi.services.schedule_generator import (
    LearningTargetError,
    enumerate_days,
    generate_schedule_blocks,
    resolve_duration_minutes,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def _trip(track: str | None = "60min", weekly_hours: float | None = None, **overrides) -> Trip:
    target = LearningTarget(track=track, weekly_hours=weekly_hours) if track else None
    fields = dict(
        id="trip-1",
        title="Kyoto summer",
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 3),
        base_location="Kyoto",
        learning_target=target,
        created_at=NOW,
    )
    fields.update(overrides)
    return Trip(**fields)


def _manual_block() -> ScheduleBlock:
    return ScheduleBlock(
        id="manual-1",
        date=date(2026, 6, 2),
        start_time="2026-06-02T14:00:00",
        duration=45,
        title="Tea ceremony",
        notes="Bring a notebook",
        is_generated=False,
        created_at=NOW,
    )


@pytest.mark.parametrize(
    ("track", "weekly_hours", "expected"),
    [
        ("15min", None, 15),
        ("60min", None, 60),
        ("4hrs", None, 240),
        ("weekly", 7, 60),
        ("weekly", 3.5, 30),
        ("weekly", 10, 86),
        ("weekly", 0.5, 4),
    ],
)
def test_resolve_duration_minutes(track, weekly_hours, expected) -> None:
    assert resolve_duration_minutes(track, weekly_hours) == expected


def test_weekly_budget_that_divides_evenly() -> None:
    # 1.75 h/week is exactly 15.0 min/day; 5.25 h/week is exactly 45.0
    assert resolve_duration_minutes("weekly", 1.75) == 15
    assert resolve_duration_minutes("weekly", 5.25) == 45


@pytest.mark.parametrize("weekly_hours", [None, 0, -2])
def test_weekly_without_positive_hours_is_rejected(weekly_hours) -> None:
    with pytest.raises(LearningTargetError, match="Weekly hours must be greater than 0"):
        resolve_duration_minutes("weekly", weekly_hours)


def test_learning_target_error_maps_to_bad_request() -> None:
    assert issubclass(LearningTargetError, InvalidRequestError)
    assert LearningTargetError("x").status_code == 400


def test_unknown_track_defaults_to_an_hour() -> None:
    assert resolve_duration_minutes("marathon") == 60


def test_enumerate_days_is_inclusive_and_crosses_months() -> None:
    assert enumerate_days("2026-01-30", "2026-02-02") == [
        "2026-01-30",
        "2026-01-31",
        "2026-02-01",
        "2026-02-02",
    ]


def test_enumerate_days_single_day_and_reversed_range() -> None:
    assert enumerate_days(date(2026, 6, 1), date(2026, 6, 1)) == ["2026-06-01"]
    assert enumerate_days("2026-06-05", "2026-06-01") == []


def test_enumerate_days_handles_leap_day() -> None:
    assert enumerate_days("2028-02-28", "2028-03-01") == ["2028-02-28", "2028-02-29", "2028-03-01"]


def test_enumerate_days_rejects_garbage() -> None:
    with pytest.raises(InvalidRequestError):
        enumerate_days("not-a-date", "2026-06-01")


def test_one_generated_block_per_day() -> None:
    blocks = generate_schedule_blocks(_trip(), [], now=NOW)

    assert [block.id for block in blocks] == [
        "generated-trip-1-2026-06-01",
        "generated-trip-1-2026-06-02",
        "generated-trip-1-2026-06-03",
    ]
    assert all(block.is_generated for block in blocks)
    assert all(block.duration == 60 for block in blocks)
    assert all(block.title == "Learning Block" for block in blocks)
    assert blocks[0].start_time == "2026-06-01T10:00:00"
    assert blocks[0].date == date(2026, 6, 1)
    assert blocks[0].created_at == NOW


def test_generated_blocks_start_at_ten_in_the_given_timezone() -> None:
    blocks = generate_schedule_blocks(_trip(), [], "Asia/Tokyo", now=NOW)

    for block in blocks:
        start = datetime.fromisoformat(block.start_time)
        assert start.hour == 10
        assert start.utcoffset().total_seconds() == 9 * 3600
    assert blocks[0].start_time == "2026-06-01T10:00:00+09:00"


def test_dst_transition_keeps_wall_clock_hour() -> None:
    trip = _trip(start_date=date(2026, 3, 7), end_date=date(2026, 3, 9))
    blocks = generate_schedule_blocks(trip, [], "America/New_York", now=NOW)

    assert [datetime.fromisoformat(block.start_time).hour for block in blocks] == [10, 10, 10]
    assert blocks[0].start_time.endswith("-05:00")
    assert blocks[2].start_time.endswith("-04:00")


def test_manual_blocks_preserved_first_and_unchanged() -> None:
    manual = _manual_block()
    stale = ScheduleBlock(
        id="generated-trip-1-2026-05-30",
        date=date(2026, 5, 30),
        start_time="2026-05-30T10:00:00",
        duration=15,
        title="Learning Block",
        is_generated=True,
        created_at=NOW,
    )

    blocks = generate_schedule_blocks(_trip(), [stale, manual], now=NOW)

    assert blocks[0] == manual
    assert len(blocks) == 4
    assert "generated-trip-1-2026-05-30" not in {block.id for block in blocks}


def test_regeneration_is_idempotent() -> None:
    trip = _trip(track="weekly", weekly_hours=7)
    first = generate_schedule_blocks(trip, [_manual_block()], now=NOW)
    second = generate_schedule_blocks(trip, first, now=NOW)

    assert [block.id for block in second] == [block.id for block in first]
    assert len(second) == len(first) == 4
    assert sum(1 for block in second if not block.is_generated) == 1


def test_trip_without_target_generates_nothing() -> None:
    assert generate_schedule_blocks(_trip(track=None), [_manual_block()]) == []


def test_single_day_trip_gets_one_block() -> None:
    trip = _trip(start_date=date(2026, 6, 1), end_date=date(2026, 6, 1), learning_target=LearningTarget(track="4hrs"))
    blocks = generate_schedule_blocks(trip, [], now=NOW)

    assert len(blocks) == 1
    assert blocks[0].duration == 240


def test_unknown_timezone_is_rejected() -> None:
    with pytest.raises(InvalidRequestError, match="Unknown timezone"):
        generate_schedule_blocks(_trip(), [], "Mars/Olympus_Mons")


def test_weekly_target_without_hours_fails_generation() -> None:
    with pytest.raises(LearningTargetError):
        generate_schedule_blocks(_trip(track="weekly"), [])
