from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from ..analytics.store import record_event
from ..llm.errors import ConfigurationError, ProviderError
from ..llm.groq_client import complete
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .extractor import ValidationError, extract
from .fallback import synthesize
from .models import UserProfile
from .priorities import top_priority_names
from .prompt import build_prompt, resolve_location

logger = logging.getLogger(__name__)

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class GenerationResult:
    neighborhoods: list[dict[str, Any]]
    source: str
    fallback_reason: str | None = None


async def generate_recommendations(
    profile: UserProfile,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> GenerationResult:
    """
    Ask the model for neighborhoods, falling back to the static catalog.

    Falls back when the provider reports an exhausted quota or when its output
    does not contain a usable JSON array. Raises ConfigurationError when no
    API key is set and ProviderError for any other provider failure.
    """
    start_time = time.time()
    city, state = resolve_location(profile, config)
    prompt = build_prompt(profile, config)

    fallback_reason: str | None = None
    try:
        raw_text = await complete(prompt)
    except ConfigurationError:
        logger.error("Recommendation pipeline is not configured: GROQ_API_KEY missing")
        raise
    except ProviderError as exc:
        if not exc.quota_exhausted:
            logger.error("Groq call failed for %s, %s", city, state, exc_info=True)
            raise
        fallback_reason = "quota"
        logger.warning("Groq quota exhausted, using catalog fallback for %s", city)
    except Exception as exc:
        logger.error("Unexpected error calling Groq for %s, %s", city, state, exc_info=True)
        raise ProviderError(str(exc) or exc.__class__.__name__) from exc

    neighborhoods: list[dict[str, Any]] | None = None
    if fallback_reason is None:
        try:
            neighborhoods = extract(raw_text)
        except ValidationError as exc:
            fallback_reason = exc.reason
            logger.warning(
                "Unusable model output (%s), using catalog fallback for %s. Raw: %.500s",
                exc.reason,
                city,
                raw_text,
            )

    if neighborhoods is None:
        neighborhoods = synthesize(city, state, profile)
        source = SOURCE_FALLBACK
    else:
        source = SOURCE_AI

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("generation", {
        "city": city,
        "state": state,
        "source": source,
        "fallback_reason": fallback_reason,
        "has_children": profile.personal_profile.has_children,
        "top_priorities": top_priority_names(profile),
        "results_returned": len(neighborhoods),
        "response_time_ms": elapsed_ms,
    })

    return GenerationResult(
        neighborhoods=neighborhoods,
        source=source,
        fallback_reason=fallback_reason,
    )
