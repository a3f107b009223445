from __future__ import annotations

from pydantic.alias_generators import to_camel

from .models import PRIORITY_DIMENSIONS, UserProfile


def top_priorities(profile: UserProfile, count: int = 3) -> list[tuple[str, int]]:
    """
    Return the ``count`` highest-rated priority dimensions as ``(name, rating)``.

    Names use the client's camelCase spelling. Ties keep declaration order
    (safety, schools, nightlife, outdoorAccess, publicTransit, walkability,
    costOfLiving, diversity); unrated dimensions are left out.
    """
    priorities = profile.neighborhood_priorities
    rated: list[tuple[str, int]] = []
    for field_name in PRIORITY_DIMENSIONS:
        values = getattr(priorities, field_name)
        if values:
            rated.append((to_camel(field_name), values[0]))

    # sorted() is stable, so equal ratings stay in declaration order
    ranked = sorted(rated, key=lambda item: item[1], reverse=True)
    return ranked[:count]


def top_priority_names(profile: UserProfile, count: int = 3) -> list[str]:
    return [name for name, _ in top_priorities(profile, count)]
