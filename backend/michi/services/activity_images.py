"""Activity classification used to label schedule blocks for display."""
from __future__ import annotations

import re
from typing import Optional

ACTIVITY_PATTERNS = [
    ("museum", r"\b(museum|gallery|exhibition|collection)\b"),
    ("nature", r"\b(nature|hiking|trail|park|forest|beach|outdoor)\b"),
    ("market", r"\b(market|shopping|bazaar|vendor)\b"),
    ("historical", r"\b(historical|history|monument|ruin|ancient|heritage)\b"),
    ("cultural", r"\b(cultural|festival|ceremony|tradition|custom)\b"),
    ("lab", r"\b(lab|laboratory|experiment|science|research)\b"),
    ("workshop", r"\b(workshop|hands-on|craft|making|building)\b"),
    ("reading", r"\b(reading|book|text|article|literature)\b"),
    ("discussion", r"\b(discussion|talk|conversation|debate)\b"),
    ("reflection", r"\b(reflection|journal|think|contemplate)\b"),
]

ACTIVITY_LABELS = {
    "museum": "museum activity",
    "nature": "nature activity",
    "market": "market activity",
    "historical": "historical site",
    "cultural": "cultural activity",
    "lab": "laboratory activity",
    "workshop": "workshop activity",
    "reading": "reading activity",
    "discussion": "discussion activity",
    "reflection": "reflection activity",
    "default": "learning activity",
}


def detect_activity_type(title: str, description: Optional[str] = None, field_experience: Optional[str] = None) -> str:
    """First matching category wins; order mirrors ACTIVITY_PATTERNS."""
    text = f"{title} {description or ''} {field_experience or ''}".lower()
    for activity, pattern in ACTIVITY_PATTERNS:
        if re.search(pattern, text):
            return activity
    return "default"


def activity_image_alt(activity: str, location: Optional[str] = None) -> str:
    base = ACTIVITY_LABELS.get(activity, ACTIVITY_LABELS["default"])
    if location:
        return f"{base} at {location}"
    return base
