import json
from unittest.mock import AsyncMock, patch

import pytest

from backend.analytics.store import clear_events, get_events
from backend.llm.errors import ConfigurationError, ProviderError
from backend.recommendations.fallback import SAFETY_STRENGTH
from backend.recommendations.models import UserProfile
from backend.recommendations.pipeline import SOURCE_AI, SOURCE_FALLBACK, generate_recommendations

AI_RECORDS = [
    {"id": "1", "name": "Baner", "city": "Pune", "state": "Maharashtra", "matchScore": 91},
    {"id": "2", "name": "Aundh", "city": "Pune", "state": "Maharashtra", "matchScore": 88},
]


def _profile(city: str = "Pune", has_children: bool = False, safety: int = 3) -> UserProfile:
    return UserProfile.model_validate({
        "personalProfile": {"hasChildren": has_children},
        "locationPreferences": {"city": city, "state": "Maharashtra"},
        "neighborhoodPriorities": {"safety": [safety], "schools": [6], "nightlife": [5], "walkability": [7]},
    })


def _patch_complete(**kwargs):
    return patch("backend.recommendations.pipeline.complete", new=AsyncMock(**kwargs))


@pytest.mark.asyncio
async def test_returns_extracted_records_from_model():
    with _patch_complete(return_value="Here:\n" + json.dumps(AI_RECORDS)):
        result = await generate_recommendations(_profile())

    assert result.source == SOURCE_AI
    assert result.neighborhoods == AI_RECORDS
    assert result.fallback_reason is None


@pytest.mark.asyncio
async def test_model_records_are_not_adjusted():
    with _patch_complete(return_value=json.dumps(AI_RECORDS)):
        result = await generate_recommendations(_profile(has_children=True, safety=10))

    assert [r["matchScore"] for r in result.neighborhoods] == [91, 88]


@pytest.mark.asyncio
async def test_unusable_output_falls_back():
    with _patch_complete(return_value="I cannot help with that."):
        result = await generate_recommendations(_profile())

    assert result.source == SOURCE_FALLBACK
    assert result.fallback_reason == "no array found"
    assert [r["name"] for r in result.neighborhoods] == ["Koregaon Park", "Baner"]


@pytest.mark.asyncio
async def test_filtered_out_output_falls_back():
    with _patch_complete(return_value='[{"name": "Baner", "city": "Pune"}]'):
        result = await generate_recommendations(_profile())

    assert result.source == SOURCE_FALLBACK
    assert result.fallback_reason == "empty after filtering"


@pytest.mark.asyncio
async def test_quota_error_falls_back():
    error = ProviderError("Rate limit reached", status_code=429, quota_exhausted=True)
    with _patch_complete(side_effect=error):
        result = await generate_recommendations(_profile(city="Bangalore", safety=9))

    assert result.source == SOURCE_FALLBACK
    assert result.fallback_reason == "quota"
    assert [r["matchScore"] for r in result.neighborhoods] == [94, 90, 87]
    assert all(r["strengths"][-1] == SAFETY_STRENGTH for r in result.neighborhoods)


@pytest.mark.asyncio
async def test_other_provider_error_propagates():
    error = ProviderError("Service unavailable", status_code=503)
    with _patch_complete(side_effect=error):
        with pytest.raises(ProviderError) as exc_info:
            await generate_recommendations(_profile())

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_configuration_error_propagates():
    with _patch_complete(side_effect=ConfigurationError("GROQ_API_KEY is not set")):
        with pytest.raises(ConfigurationError):
            await generate_recommendations(_profile())


@pytest.mark.asyncio
async def test_unexpected_error_becomes_provider_error():
    with _patch_complete(side_effect=RuntimeError("socket closed")):
        with pytest.raises(ProviderError) as exc_info:
            await generate_recommendations(_profile())

    assert exc_info.value.message == "socket closed"
    assert exc_info.value.quota_exhausted is False


@pytest.mark.asyncio
async def test_prompt_is_sent_once():
    mock = AsyncMock(return_value=json.dumps(AI_RECORDS))
    with patch("backend.recommendations.pipeline.complete", new=mock):
        await generate_recommendations(_profile())

    mock.assert_awaited_once()
    assert "Pune, Maharashtra" in mock.await_args.args[0]


@pytest.mark.asyncio
async def test_generation_event_recorded():
    clear_events()
    with _patch_complete(return_value="nothing"):
        await generate_recommendations(_profile(city="Atlantis"))

    events = get_events("generation")
    assert len(events) == 1
    assert events[0]["city"] == "Atlantis"
    assert events[0]["source"] == SOURCE_FALLBACK
    assert events[0]["results_returned"] == 1


@pytest.mark.asyncio
async def test_unparseable_number_falls_back():
    with _patch_complete(return_value="[" + "9" * 5000 + "]"):
        result = await generate_recommendations(_profile())

    assert result.source == SOURCE_FALLBACK
    assert result.fallback_reason == "malformed json"
