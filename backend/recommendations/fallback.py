from __future__ import annotations

import logging
from typing import Any

from .data_store import get_catalog
from .models import UserProfile
from .priorities import top_priority_names

logger = logging.getLogger(__name__)

FAMILY_STRENGTH = "Good schools and family amenities"
SAFETY_STRENGTH = "Safe environment"
MAX_BOOSTED_SCORE = 95
SAFETY_BOOST = 3
SCHOOL_RATING_BOOST = 0.5
MAX_SCHOOL_RATING = 10


def _adjust_for_children(record: dict[str, Any]) -> None:
    record["strengths"] = [*record.get("strengths", [])[:3], FAMILY_STRENGTH]
    lifestyle = record.get("lifestyle")
    if lifestyle and lifestyle.get("schoolRating") is not None:
        lifestyle["schoolRating"] = min(
            MAX_SCHOOL_RATING, lifestyle["schoolRating"] + SCHOOL_RATING_BOOST
        )


def _adjust_for_safety(record: dict[str, Any]) -> None:
    record["matchScore"] = min(MAX_BOOSTED_SCORE, record["matchScore"] + SAFETY_BOOST)
    strengths = record.setdefault("strengths", [])
    if SAFETY_STRENGTH not in strengths:
        strengths.append(SAFETY_STRENGTH)


def synthesize(city: str, state: str, profile: UserProfile) -> list[dict[str, Any]]:
    """
    Build recommendations for ``city`` from the static catalog.

    Unlisted cities get a single generic record named after the city. The
    children adjustment runs before the safety adjustment, so the safety
    strength is checked against the already-extended strengths list.
    Deterministic for a given input and never raises.
    """
    catalog = get_catalog()
    records = catalog.records_for(city)
    if not records:
        logger.info("No catalog entry for %r, using generic template", city)
        records = [catalog.generic_record(city, state)]

    if profile.personal_profile.has_children:
        for record in records:
            _adjust_for_children(record)

    if "safety" in top_priority_names(profile):
        for record in records:
            _adjust_for_safety(record)

    return records
