"""Gatekeeping for untrusted plan JSON returned by the generative model."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from michi.api.schemas.ai_plan import AIPlanResponse
from michi.core.errors import SchemaMismatchError

logger = logging.getLogger(__name__)


def validate_ai_plan(payload: Any, expected_days: int) -> AIPlanResponse:
    """
    Validate ``payload`` against the plan contract for ``expected_days`` days.

    All violations are collected before raising so the caller can report the
    full list; nothing is returned unless every check passes.
    """
    violations: List[Dict[str, str]] = []

    days = payload.get("days") if isinstance(payload, dict) else None
    if isinstance(days, list) and len(days) != expected_days:
        violations.append(
            _violation(
                "days",
                f"Expected exactly {expected_days} days, got {len(days)}",
                "days_length",
            )
        )

    plan: AIPlanResponse | None = None
    try:
        plan = AIPlanResponse.model_validate(payload)
    except ValidationError as exc:
        for error in exc.errors(include_url=False, include_context=False, include_input=False):
            violations.append(_violation(_format_loc(error["loc"]), error["msg"], error["type"]))

    if plan is not None:
        for index, day in enumerate(plan.days):
            if day.day > expected_days:
                violations.append(
                    _violation(
                        f"days.{index}.day",
                        f"Day number {day.day} exceeds plan length {expected_days}",
                        "day_out_of_range",
                    )
                )

    if plan is None or violations:
        logger.warning("AI plan rejected with %d violation(s) (expected %d days)", len(violations), expected_days)
        raise SchemaMismatchError(details=violations)
    return plan


def _violation(path: str, message: str, kind: str) -> Dict[str, str]:
    return {"path": path, "message": message, "type": kind}


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"
