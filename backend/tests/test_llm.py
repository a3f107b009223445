from unittest.mock import AsyncMock, MagicMock, patch

import groq
import httpx
import pytest

from backend.llm.config import LLMConfig
from backend.llm.errors import ConfigurationError, ProviderError
from backend.llm.groq_client import complete

ENABLED_CONFIG = LLMConfig(api_key="test-key")
MISSING_KEY_CONFIG = LLMConfig(api_key="")

_REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _entered_client(mock_groq_cls) -> MagicMock:
    client = mock_groq_cls.return_value
    client.__aenter__.return_value = client
    return client


def _status_error(cls, status: int, message: str) -> groq.APIStatusError:
    return cls(message, response=httpx.Response(status, request=_REQUEST), body=None)


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_returns_text_verbatim(mock_groq_cls):
    raw = 'Sure! Here you go:\n[{"name": "Powai"}]\nEnjoy.'
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        return_value=_mock_groq_response(raw)
    )

    result = await complete("prompt", config=ENABLED_CONFIG)

    assert result == raw
    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["messages"][-1] == {"role": "user", "content": "prompt"}
    assert kwargs["model"] == ENABLED_CONFIG.model


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_uses_timeout_without_retries(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        return_value=_mock_groq_response("[]")
    )

    await complete("prompt", config=LLMConfig(api_key="k", timeout=12.5))

    mock_groq_cls.assert_called_once_with(api_key="k", timeout=12.5, max_retries=0)


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_empty_content_returns_empty_string(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        return_value=_mock_groq_response(None)
    )

    assert await complete("prompt", config=ENABLED_CONFIG) == ""


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_missing_key_raises_configuration_error(mock_groq_cls):
    with pytest.raises(ConfigurationError):
        await complete("prompt", config=MISSING_KEY_CONFIG)

    mock_groq_cls.assert_not_called()


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_rate_limit_is_quota_error(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        side_effect=_status_error(groq.RateLimitError, 429, "Too many requests")
    )

    with pytest.raises(ProviderError) as exc_info:
        await complete("prompt", config=ENABLED_CONFIG)

    assert exc_info.value.status_code == 429
    assert exc_info.value.quota_exhausted is True


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_quota_message_is_quota_error(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        side_effect=_status_error(groq.APIStatusError, 403, "Monthly quota exceeded for org")
    )

    with pytest.raises(ProviderError) as exc_info:
        await complete("prompt", config=ENABLED_CONFIG)

    assert exc_info.value.status_code == 403
    assert exc_info.value.quota_exhausted is True


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_server_error_is_not_quota_error(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        side_effect=_status_error(groq.InternalServerError, 500, "Internal error")
    )

    with pytest.raises(ProviderError) as exc_info:
        await complete("prompt", config=ENABLED_CONFIG)

    assert exc_info.value.status_code == 500
    assert exc_info.value.quota_exhausted is False
    assert "Internal error" in exc_info.value.message


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_timeout_is_not_quota_error(mock_groq_cls):
    _entered_client(mock_groq_cls).chat.completions.create = AsyncMock(
        side_effect=groq.APITimeoutError(request=_REQUEST)
    )

    with pytest.raises(ProviderError) as exc_info:
        await complete("prompt", config=ENABLED_CONFIG)

    assert exc_info.value.status_code is None
    assert exc_info.value.quota_exhausted is False


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_closes_client(mock_groq_cls):
    client = _entered_client(mock_groq_cls)
    client.chat.completions.create = AsyncMock(return_value=_mock_groq_response("[]"))

    await complete("prompt", config=ENABLED_CONFIG)

    client.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
@patch("backend.llm.groq_client.AsyncGroq")
async def test_complete_closes_client_on_error(mock_groq_cls):
    client = _entered_client(mock_groq_cls)
    client.chat.completions.create = AsyncMock(
        side_effect=_status_error(groq.InternalServerError, 500, "Internal error")
    )

    with pytest.raises(ProviderError):
        await complete("prompt", config=ENABLED_CONFIG)

    client.__aexit__.assert_awaited_once()
