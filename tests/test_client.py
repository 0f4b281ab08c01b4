"""Tests for review_core/client.py."""

from unittest.mock import AsyncMock

from review_core.client import TextGenerationClient
from review_core.models import GenerationParams
from review_core.providers.base import ProviderError
from review_core.result import ErrorKind
from tests.conftest import MockProvider, make_response


async def test_unconfigured_client_is_unavailable():
    client = TextGenerationClient(None)
    result = await client.generate("hello")
    assert not client.is_configured
    assert result.error is ErrorKind.SERVICE_UNAVAILABLE


async def test_success_returns_content():
    provider = MockProvider(response_content="Line 3: error here")
    client = TextGenerationClient(provider)
    result = await client.generate("prompt", GenerationParams(max_tokens=50, temperature=0.1))

    assert result.value == "Line 3: error here"
    provider.generate.assert_awaited_once_with("prompt", GenerationParams(max_tokens=50, temperature=0.1))


async def test_default_params_used_when_none():
    provider = MockProvider()
    await TextGenerationClient(provider).generate("prompt")
    assert provider.generate.await_args.args[1] == GenerationParams()


async def test_provider_error_maps_to_service_error():
    provider = MockProvider()
    provider.generate = AsyncMock(side_effect=ProviderError("mock", "500 Internal"))
    result = await TextGenerationClient(provider).generate("prompt")
    assert result.error is ErrorKind.SERVICE_ERROR
    assert "500" in result.message


async def test_provider_timeout_maps_to_timeout():
    provider = MockProvider()
    provider.generate = AsyncMock(side_effect=ProviderError("mock", "timed out", timed_out=True))
    result = await TextGenerationClient(provider).generate("prompt")
    assert result.error is ErrorKind.TIMEOUT


async def test_unexpected_exception_is_captured():
    provider = MockProvider()
    provider.generate = AsyncMock(side_effect=ValueError("weird"))
    result = await TextGenerationClient(provider).generate("prompt")
    assert result.error is ErrorKind.SERVICE_ERROR
    assert "weird" in result.message


async def test_blank_content_is_parse_error():
    provider = MockProvider()
    provider.generate = AsyncMock(return_value=make_response("   \n"))
    result = await TextGenerationClient(provider).generate("prompt")
    assert result.error is ErrorKind.PARSE_ERROR
