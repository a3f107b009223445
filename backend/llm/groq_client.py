from __future__ import annotations

import logging

import groq
from groq import AsyncGroq

from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a neighborhood research assistant for people relocating within India. "
    "Answer only with the JSON requested by the user, without markdown fences or commentary."
)

_QUOTA_MARKERS = ("quota", "rate limit", "rate_limit")


def _is_quota_signal(status_code: int | None, message: str) -> bool:
    if status_code == 429:
        return True
    lower = message.lower()
    return any(marker in lower for marker in _QUOTA_MARKERS)


def _to_provider_error(exc: groq.APIError) -> ProviderError:
    status_code = exc.status_code if isinstance(exc, groq.APIStatusError) else None
    message = exc.message or str(exc)
    return ProviderError(
        message,
        status_code=status_code,
        quota_exhausted=_is_quota_signal(status_code, message),
    )


async def complete(
    prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    system_prompt: str = SYSTEM_PROMPT,
) -> str:
    """
    Send ``prompt`` to Groq once and return the completion text verbatim.

    Raises ConfigurationError when no API key is configured and ProviderError
    when the call fails. The returned text is not guaranteed to be JSON.
    """
    if not config.api_key:
        raise ConfigurationError("GROQ_API_KEY is not set")

    async with AsyncGroq(api_key=config.api_key, timeout=config.timeout, max_retries=0) as client:
        try:
            response = await client.chat.completions.create(
                model=config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=config.max_tokens,
                temperature=config.temperature,
            )
        except groq.APIError as exc:
            error = _to_provider_error(exc)
            logger.warning(
                "Groq completion failed (status=%s, quota_exhausted=%s): %s",
                error.status_code,
                error.quota_exhausted,
                error.message,
            )
            raise error from exc

    content = response.choices[0].message.content or ""
    logger.info("Groq completion received (%d chars)", len(content))
    return content
