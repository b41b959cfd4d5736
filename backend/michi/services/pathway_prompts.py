"""Prompt construction for plan, draft and finalize calls."""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from michi.api.schemas.pathway import ItineraryItem, PathwayDraft, TripContext
from michi.api.schemas.profile import LearnerProfile
from michi.api.schemas.trip import LearningTarget

SYSTEM_PROMPT = (
    "You are Michi, a project-based learning designer for families who learn while they travel. "
    "You turn a place, a set of dates and a learner profile into field experiences with a clear "
    "driving question, a concrete artifact and a moment for reflection and critique. "
    "Respond with JSON only."
)

PLAN_DAY_FIELDS = (
    "1. drivingQuestion: an open question that drives the day's inquiry\n"
    "2. fieldExperience: a real-world experience grounded in the location\n"
    "3. inquiryTask: a specific investigation the learner carries out\n"
    "4. artifact: what the learner makes or produces\n"
    "5. reflectionPrompt: a reflection prompt suited to their reflection style\n"
    "6. critiqueStep: how the learner gets feedback and revises\n"
)

PLAN_JSON_SHAPE = """{
  "days": [
    {
      "day": 1,
      "drivingQuestion": "...",
      "fieldExperience": "...",
      "inquiryTask": "...",
      "artifact": "...",
      "reflectionPrompt": "...",
      "critiqueStep": "...",
      "scheduleBlocks": [
        {"startTime": "2026-06-01T09:00:00", "duration": 60, "title": "...", "description": "..."}
      ]
    }
  ],
  "summary": "One-paragraph overview"%s
}"""

VERIFY_LOCALLY_FIELD = ',\n  "verifyLocally": "Notes for local verification"'


def build_plan_prompt(
    profile: LearnerProfile,
    trip: TripContext,
    target: LearningTarget,
    itinerary: Sequence[ItineraryItem],
    num_days: int,
) -> Tuple[str, str]:
    """Prompt for a complete N-day pathway in one call."""
    itinerary_block = ""
    if itinerary:
        lines = "\n".join(f"- {item.title} at {item.location} on {item.date_time}" for item in itinerary)
        itinerary_block = f"### EXISTING ITINERARY ({len(itinerary)} items)\n{lines}\n\n"

    user_prompt = (
        f"Design a {num_days}-day experiential learning pathway.\n\n"
        f"{_profile_block(profile, include_schedule=True)}\n"
        "### TRIP\n"
        f"- Title: {trip.title}\n"
        f"- Location: {trip.base_location}\n"
        f"- Dates: {trip.start_date.isoformat()} to {trip.end_date.isoformat()}\n"
        f"- Learning target: {_target_label(target)}\n\n"
        f"{itinerary_block}"
        "### EACH DAY MUST INCLUDE\n"
        f"{PLAN_DAY_FIELDS}"
        f"7. scheduleBlocks: learning blocks with startTime (ISO datetime in {profile.timezone}), "
        "duration in minutes, title and an optional description\n\n"
        "### REQUIREMENTS\n"
        f"- Return exactly {num_days} days numbered 1-{num_days}\n"
        f"- Block dates fall between {trip.start_date.isoformat()} and {trip.end_date.isoformat()}\n"
        "- Respect preferred learning times and constraints\n"
        f"- Daily learning time follows the {target.track} target\n"
        f"- Field experiences use {trip.base_location}\n"
        f"- Artifacts favour: {_join(profile.pbl_profile.preferred_artifact_types)}\n"
        f"- Inquiry approach: {profile.experiential_profile.inquiry_approach}\n"
        '- Add a "verifyLocally" note listing what an adult should check on the ground\n\n'
        "### OUTPUT\n"
        "Return JSON matching this shape:\n"
        f"{PLAN_JSON_SHAPE % VERIFY_LOCALLY_FIELD}"
    )
    return SYSTEM_PROMPT, user_prompt


def build_drafts_prompt(
    profile: LearnerProfile,
    trip: TripContext,
    effort_mode: str,
    selected_dates: Sequence[str],
) -> Tuple[str, str]:
    """Prompt for three lightweight drafts, headlines only."""
    num_days = len(selected_dates)
    dates_summary = ", ".join(
        f"Day {index + 1}: {_short_date(value)}" for index, value in enumerate(selected_dates)
    )
    user_prompt = (
        f"Create 3 different pathway approaches for a {num_days}-day trip.\n\n"
        f"{_profile_block(profile, include_schedule=False)}\n"
        "### TRIP\n"
        f"- Title: {trip.title}\n"
        f"- Location: {trip.base_location}\n"
        f"- Selected dates: {dates_summary}\n"
        f"- Effort mode: {effort_mode}\n\n"
        "### APPROACHES\n"
        "1. continuous: each day builds on the one before toward a cumulative project.\n"
        "2. themes: each day explores its own theme; together they stay coherent.\n"
        "3. hybrid: some days build in sequence, others branch into themes.\n\n"
        "For each draft give type, title, overview (2-3 sentences), whyItFits (1-2 sentences) and "
        f"days: {num_days} objects with day (1-{num_days}), date (from the selected dates) and a "
        "headline of at most 60 characters. Keep drafts light: no detailed activities.\n\n"
        "### OUTPUT\n"
        '{"drafts": [\n'
        '  {"type": "continuous", "title": "...", "overview": "...", "whyItFits": "...", '
        f'"days": [{{"day": 1, "date": "{selected_dates[0] if selected_dates else ""}", "headline": "..."}}]}},\n'
        '  {"type": "themes", ...},\n'
        '  {"type": "hybrid", ...}\n'
        "]}"
    )
    return SYSTEM_PROMPT, user_prompt


def build_finalize_prompt(
    profile: LearnerProfile,
    trip: TripContext,
    effort_mode: str,
    selected_dates: Sequence[str],
    draft: PathwayDraft,
) -> Tuple[str, str]:
    """Prompt that expands the chosen draft into full day-by-day detail."""
    num_days = len(selected_dates)
    headlines: List[str] = []
    for index, value in enumerate(selected_dates):
        day = draft.days[index] if index < len(draft.days) else None
        headline = day.headline if day else f"Day {index + 1} activities"
        line = f"Day {index + 1} ({_short_date(value)}): {headline}"
        if day and day.summary:
            line += f"\n  Summary: {day.summary}"
        headlines.append(line)

    day_headlines = "\n".join(headlines)
    rationale_line = f"- Rationale: {draft.rationale}\n" if draft.rationale else ""
    user_prompt = (
        f"Expand the chosen approach into a detailed {num_days}-day learning plan.\n\n"
        f"{_profile_block(profile, include_schedule=True)}\n"
        "### TRIP\n"
        f"- Title: {trip.title}\n"
        f"- Location: {trip.base_location}\n"
        f"- Effort mode: {effort_mode}\n\n"
        "### CHOSEN APPROACH\n"
        f"- Type: {draft.type}\n"
        f"- Title: {draft.title}\n"
        f"- Overview: {draft.overview}\n"
        f"- Why it fits: {draft.why_it_fits}\n"
        f"{rationale_line}\n"
        "### DAY HEADLINES\n"
        f"{day_headlines}\n\n"
        "### EACH DAY MUST INCLUDE\n"
        f"{PLAN_DAY_FIELDS}"
        f"7. scheduleBlocks: learning blocks with startTime (ISO datetime in {profile.timezone}), "
        "duration in minutes, title and an optional description\n\n"
        "### REQUIREMENTS\n"
        f"- Return exactly {num_days} days numbered 1-{num_days}\n"
        f"- Block dates match, in order: {', '.join(selected_dates)}\n"
        f"- Daily learning time follows the {effort_mode} effort mode\n"
        f'- Stay consistent with "{draft.title}" throughout\n'
        "- No images, maps, precise addresses or personal data\n"
        "- Keep everything age-appropriate\n\n"
        "### OUTPUT\n"
        "Return JSON matching this shape:\n"
        f"{PLAN_JSON_SHAPE % ''}"
    )
    return SYSTEM_PROMPT, user_prompt


def _profile_block(profile: LearnerProfile, *, include_schedule: bool) -> str:
    pbl = profile.pbl_profile
    experiential = profile.experiential_profile
    lines = [
        "### LEARNER",
        f"- Name: {profile.name}",
        f"- Timezone: {profile.timezone}",
        f"- Level: {pbl.current_level}",
        f"- Interests: {_join(pbl.interests)}",
        f"- Goals: {_join(pbl.learning_goals)}",
        f"- Preferred artifacts: {_join(pbl.preferred_artifact_types)}",
    ]
    if include_schedule:
        prefs = profile.preferences
        lines += [
            f"- Preferred learning times: {_join(prefs.preferred_learning_times)}",
            f"- Preferred duration: {prefs.preferred_duration}",
            f"- Interaction style: {prefs.interaction_style}",
            f"- Preferred field experiences: {_join(experiential.preferred_field_experiences)}",
        ]
    lines += [
        f"- Reflection style: {experiential.reflection_style}",
        f"- Inquiry approach: {experiential.inquiry_approach}",
    ]
    if profile.constraints.max_daily_minutes:
        lines.append(f"- Max daily minutes: {profile.constraints.max_daily_minutes}")
    return "\n".join(lines) + "\n"


def _target_label(target: LearningTarget) -> str:
    if target.weekly_hours:
        return f"{target.track} ({target.weekly_hours:g} hrs/week)"
    return target.track


def _short_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{parsed:%b} {parsed.day}"


def _join(values: Optional[Sequence[str]]) -> str:
    return ", ".join(values) if values else "none given"
