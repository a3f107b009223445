"""
Area suggestions shown while the user is still filling in the assessment.

Unlike full recommendations these never fail: the questionnaire must be able
to continue, so any problem (missing key, provider error, unusable output)
returns the generic suggestions below.
"""
from __future__ import annotations

import copy
import logging
from typing import Any

from ..llm.groq_client import complete
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .extractor import extract
from .models import UserProfile
from .prompt import format_priorities, resolve_location

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 4

FALLBACK_SUGGESTIONS: tuple[dict[str, Any], ...] = (
    {
        "name": "Central Business District",
        "description": "A vibrant urban area with excellent connectivity and modern amenities.",
        "matchScore": 85,
        "highlights": ["Excellent public transportation", "Modern amenities", "Business connectivity"],
        "considerations": ["Higher cost of living", "Can be crowded"],
    },
    {
        "name": "Residential Suburbs",
        "description": "A peaceful area perfect for families with good schools and community feel.",
        "matchScore": 80,
        "highlights": ["Family-friendly", "Good schools", "Safe environment"],
        "considerations": ["Longer commute", "Limited nightlife"],
    },
)


def fallback_suggestions() -> list[dict[str, Any]]:
    return copy.deepcopy(list(FALLBACK_SUGGESTIONS))


def build_suggestions_prompt(
    profile: UserProfile,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> str:
    city, state = resolve_location(profile, config)
    lifestyle = profile.lifestyle_factors
    areas = [*profile.location_preferences.preferred_areas, *profile.location_preferences.custom_areas]
    amenities = [*profile.essential_amenities, *profile.custom_amenities]

    lines = [
        f"Suggest {SUGGESTION_COUNT} REAL areas in {city}, {state}, India for this person.",
        "",
        f"TOP PRIORITIES: {format_priorities(profile)}",
        f"WORK LOCATION: {lifestyle.work_location or 'not specified'}",
        f"COMMUTE: {lifestyle.commute_preference or 'not specified'}",
        f"ACTIVITY LEVEL: {lifestyle.activity_level[0] if lifestyle.activity_level else 5}/10",
        f"NOISE TOLERANCE: {lifestyle.noise_preference[0] if lifestyle.noise_preference else 5}/10",
    ]
    if areas:
        lines.append(f"AREAS OF INTEREST: {', '.join(areas)}")
    if amenities:
        lines.append(f"MUST-HAVE AMENITIES: {', '.join(amenities)}")
    lines += [
        "",
        "Return a JSON array where each element looks like:",
        '{"name": "Area name", "description": "One sentence", "matchScore": 80-95, '
        '"highlights": ["3 highlights"], "considerations": ["2 considerations"]}',
        "",
        "Return the JSON array only.",
    ]
    return "\n".join(lines)


async def generate_suggestions(profile: UserProfile) -> list[dict[str, Any]]:
    prompt = build_suggestions_prompt(profile)
    try:
        raw_text = await complete(prompt)
        return extract(raw_text, required=("name", "matchScore"))
    except Exception:
        logger.warning("Suggestion generation failed, using generic suggestions", exc_info=True)
        return fallback_suggestions()
