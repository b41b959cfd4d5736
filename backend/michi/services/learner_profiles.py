"""Built-in demo learner profiles."""
from __future__ import annotations

from typing import Any, Dict

from michi.api.schemas.profile import LearnerProfile
from michi.core.errors import NotFoundError

DEMO_PROFILES: Dict[str, Dict[str, Any]] = {
    "alice": {
        "name": "Alice",
        "timezone": "America/New_York",
        "preferences": {
            "preferredLearningTimes": ["morning", "afternoon"],
            "preferredDuration": "medium",
            "interactionStyle": "collaborative",
            "contentFormat": ["reading", "discussion", "hands-on"],
        },
        "constraints": {
            "maxDailyMinutes": 120,
            "availableDays": ["monday", "tuesday", "wednesday", "thursday", "friday"],
        },
        "pblProfile": {
            "interests": ["history", "culture", "language"],
            "currentLevel": "intermediate",
            "learningGoals": ["fluency in local language", "deep cultural understanding"],
            "preferredArtifactTypes": ["written", "visual"],
        },
        "experientialProfile": {
            "preferredFieldExperiences": ["museums", "historical sites", "cultural events"],
            "reflectionStyle": "journal",
            "inquiryApproach": "structured",
        },
    },
    "bob": {
        "name": "Bob",
        "timezone": "Europe/London",
        "preferences": {
            "preferredLearningTimes": ["evening"],
            "preferredDuration": "long",
            "interactionStyle": "solo",
            "contentFormat": ["reading", "video", "reflection"],
        },
        "constraints": {"maxDailyMinutes": 180},
        "pblProfile": {
            "interests": ["science", "technology", "nature"],
            "currentLevel": "advanced",
            "learningGoals": ["research skills", "scientific methodology"],
            "preferredArtifactTypes": ["written", "multimedia"],
        },
        "experientialProfile": {
            "preferredFieldExperiences": ["nature", "labs", "observatories"],
            "reflectionStyle": "analytical",
            "inquiryApproach": "open-ended",
        },
    },
    "sam": {
        "name": "Sam",
        "timezone": "Asia/Tokyo",
        "preferences": {
            "preferredLearningTimes": ["morning", "evening"],
            "preferredDuration": "short",
            "interactionStyle": "mixed",
            "contentFormat": ["hands-on", "video", "discussion"],
        },
        "constraints": {"maxDailyMinutes": 90, "mustAvoidTimes": ["12:00-14:00"]},
        "pblProfile": {
            "interests": ["art", "design", "craft"],
            "currentLevel": "beginner",
            "learningGoals": ["creative expression", "technical skills"],
            "preferredArtifactTypes": ["visual", "multimedia"],
        },
        "experientialProfile": {
            "preferredFieldExperiences": ["galleries", "workshops", "studios"],
            "reflectionStyle": "artistic",
            "inquiryApproach": "guided",
        },
    },
}


def get_learner_profile(profile_id: str) -> LearnerProfile:
    raw = DEMO_PROFILES.get(profile_id)
    if raw is None:
        raise NotFoundError(f"Unknown learner profile: {profile_id}")
    return LearnerProfile.model_validate(raw)
