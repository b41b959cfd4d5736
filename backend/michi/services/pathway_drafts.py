"""Three-way pathway draft selection and edited-draft checks."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from michi.api.schemas.pathway import DRAFT_TYPES, PathwayDraft, PathwayDraftDay
from michi.core.errors import InvalidRequestError, SchemaMismatchError

logger = logging.getLogger(__name__)

DEFAULT_OVERVIEW = "A learning pathway tailored to your trip."
DEFAULT_WHY_IT_FITS = "This pathway aligns with your learner profile."


def select_pathway_drafts(raw_response: Any, selected_dates: Sequence[str]) -> List[PathwayDraft]:
    """
    Return exactly one draft per type, in ``DRAFT_TYPES`` order.

    Each slot takes the model's draft with a matching type, else the draft at
    the same position, else the first draft. The chosen draft is relabelled
    with the slot's type so the result always covers all three approaches.
    """
    drafts = raw_response.get("drafts") if isinstance(raw_response, dict) else None
    if not isinstance(drafts, list) or len(drafts) != 3:
        count = len(drafts) if isinstance(drafts, list) else 0
        logger.warning("Drafts response carried %d drafts instead of 3", count)
        raise SchemaMismatchError("AI did not return exactly 3 pathway drafts")

    candidates = [entry if isinstance(entry, dict) else {} for entry in drafts]
    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)

    selected: List[PathwayDraft] = []
    for slot, draft_type in enumerate(DRAFT_TYPES):
        source = next((entry for entry in candidates if entry.get("type") == draft_type), None)
        if source is None:
            source = candidates[slot] if slot < len(candidates) else candidates[0]
        selected.append(_normalize_draft(source, draft_type, f"draft-{stamp}-{slot}", selected_dates))
    return selected


def validate_edited_draft(draft: Dict[str, Any], selected_dates: Sequence[str]) -> PathwayDraft:
    """Check a user-edited draft against the dates it must cover."""
    missing = [key for key in ("id", "type", "title", "overview", "whyItFits") if not draft.get(key)]
    if missing:
        raise InvalidRequestError(
            "Invalid editedDraft: missing required fields (id, type, title, overview, whyItFits)",
            details={"missing": missing},
        )

    days = draft.get("days")
    if not isinstance(days, list) or len(days) != len(selected_dates):
        day_count = len(days) if isinstance(days, list) else 0
        raise InvalidRequestError(
            f"Invalid editedDraft: days array length ({day_count}) must match selectedDates length ({len(selected_dates)})"
        )

    for index, day in enumerate(days):
        if not isinstance(day, dict) or not day.get("day") or not day.get("date") or not day.get("headline"):
            raise InvalidRequestError(
                f"Invalid editedDraft: day {index + 1} missing required fields (day, date, headline)"
            )
        if day["date"] != selected_dates[index]:
            raise InvalidRequestError(
                f"Invalid editedDraft: day {index + 1} date ({day['date']}) does not match "
                f"selectedDates[{index}] ({selected_dates[index]})"
            )

    try:
        return PathwayDraft.model_validate(draft)
    except ValidationError as exc:
        raise InvalidRequestError(
            "Invalid editedDraft",
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def fallback_days(selected_dates: Sequence[str]) -> List[PathwayDraftDay]:
    return [
        PathwayDraftDay(day=index + 1, date=value, headline=f"Day {index + 1} activities")
        for index, value in enumerate(selected_dates)
    ]


def _normalize_draft(
    source: Dict[str, Any],
    draft_type: str,
    draft_id: str,
    selected_dates: Sequence[str],
) -> PathwayDraft:
    return PathwayDraft(
        id=draft_id,
        type=draft_type,
        title=_text(source.get("title")) or f"{draft_type.capitalize()} Approach",
        overview=_text(source.get("overview")) or DEFAULT_OVERVIEW,
        why_it_fits=_text(source.get("whyItFits")) or DEFAULT_WHY_IT_FITS,
        days=_draft_days(source.get("days"), selected_dates),
        rationale=_text(source.get("rationale")),
    )


def _draft_days(raw_days: Any, selected_dates: Sequence[str]) -> List[PathwayDraftDay]:
    if not isinstance(raw_days, list) or not raw_days:
        return fallback_days(selected_dates)
    try:
        return [PathwayDraftDay.model_validate(entry) for entry in raw_days]
    except ValidationError:
        logger.info("Malformed draft days from model; synthesizing headlines")
        return fallback_days(selected_dates)


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
