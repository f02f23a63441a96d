import asyncio
import pytest
import httpx
from unittest.mock import AsyncMock, Mock, patch

from openai import APIConnectionError, APIStatusError, APITimeoutError

from cascade.models.providers.openai_sdk import OpenAIProvider
from cascade.models.providers.base import ChatRequest, ModelError, ModelTimeout, UpstreamError


def _completion(content="Deep analysis", finish_reason="stop"):
    choice = Mock()
    choice.message.content = content
    choice.finish_reason = finish_reason
    response = Mock()
    response.choices = [choice]
    response.model = "accounts/fireworks/models/deepseek-v3-0324"
    response.usage = None
    response.id = "cmpl-123"
    return response


def _request(**kwargs):
    return ChatRequest(
        model="accounts/fireworks/models/deepseek-v3-0324",
        messages=[
            {"role": "system", "content": "You are an analyst."},
            {"role": "user", "content": "Write a sort function"},
        ],
        params={"temperature": 0.7, "max_tokens": 1200},
        **kwargs,
    )


class TestOpenAIProvider:
    """Test suite for the OpenAI-compatible provider"""

    @pytest.fixture
    def provider(self):
        with patch('cascade.models.providers.openai_sdk.AsyncOpenAI'):
            provider = OpenAIProvider(
                base_url="https://fireworks.test/inference/v1",
                api_key="fw-key",
                name="fireworks",
                timeout=30,
            )
        provider.client.chat.completions.create = AsyncMock()
        return provider

    @pytest.fixture
    def create(self, provider):
        return provider.client.chat.completions.create

    def test_client_built_without_retries(self):
        """
        Test: Client construction
        How: Patch AsyncOpenAI and inspect constructor kwargs
        Ensures: Bearer key, base URL and timeout are passed and SDK retries are off
        """
        with patch('cascade.models.providers.openai_sdk.AsyncOpenAI') as mock_cls:
            OpenAIProvider(base_url="https://fireworks.test/inference/v1", api_key="fw-key", timeout=12)

        kwargs = mock_cls.call_args.kwargs
        assert kwargs["base_url"] == "https://fireworks.test/inference/v1"
        assert kwargs["api_key"] == "fw-key"
        assert kwargs["timeout"] == 12
        assert kwargs["max_retries"] == 0

    def test_basic_chat_completion(self, provider, create):
        """
        Test: Successful chat completion
        How: Return a canned completion from the mocked SDK
        Ensures: First choice content is extracted and params are forwarded verbatim
        """
        create.return_value = _completion("Deep analysis")

        response = asyncio.run(provider.chat(_request()))

        assert response.content == "Deep analysis"
        assert response.meta["provider"] == "fireworks"
        assert response.meta["finish_reason"] == "stop"
        assert "latency" in response.meta

        call_kwargs = create.call_args.kwargs
        assert call_kwargs["model"] == "accounts/fireworks/models/deepseek-v3-0324"
        assert call_kwargs["messages"][0]["role"] == "system"
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 1200
        assert call_kwargs["stream"] is False
        assert "timeout" not in call_kwargs

    def test_request_timeout_forwarded(self, provider, create):
        create.return_value = _completion()

        asyncio.run(provider.chat(_request(timeout=5)))

        assert create.call_args.kwargs["timeout"] == 5

    def test_empty_content_becomes_empty_string(self, provider, create):
        create.return_value = _completion(content=None)

        response = asyncio.run(provider.chat(_request()))

        assert response.content == ""

    def test_status_error_carries_code_and_body(self, provider, create):
        """
        Test: Non-success HTTP status
        How: Raise APIStatusError with a 401 response body
        Ensures: UpstreamError names the status code and keeps the raw body
        """
        http_request = httpx.Request("POST", "https://fireworks.test/inference/v1/chat/completions")
        http_response = httpx.Response(401, text='{"error": "invalid api key"}', request=http_request)
        create.side_effect = APIStatusError("Unauthorized", response=http_response, body=None)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(provider.chat(_request()))

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == '{"error": "invalid api key"}'
        assert "fireworks API error (401)" in str(exc_info.value)

    def test_timeout_handling(self, provider, create):
        create.side_effect = APITimeoutError(request=httpx.Request("POST", "https://fireworks.test"))

        with pytest.raises(ModelTimeout) as exc_info:
            asyncio.run(provider.chat(_request()))

        assert "fireworks timeout" in str(exc_info.value)

    def test_connection_error(self, provider, create):
        create.side_effect = APIConnectionError(request=httpx.Request("POST", "https://fireworks.test"))

        with pytest.raises(ModelError) as exc_info:
            asyncio.run(provider.chat(_request()))

        assert not isinstance(exc_info.value, UpstreamError)
        assert "connection error" in str(exc_info.value)

    def test_missing_choices_is_model_error(self, provider, create):
        response = _completion()
        response.choices = []
        create.return_value = response

        with pytest.raises(ModelError, match="Invalid response structure"):
            asyncio.run(provider.chat(_request()))

    def test_health_check(self, provider):
        provider.client.models.list = AsyncMock(return_value=[])
        assert asyncio.run(provider.health_check()) is True

        provider.client.models.list = AsyncMock(side_effect=RuntimeError("down"))
        assert asyncio.run(provider.health_check()) is False

    def test_cleanup_closes_client(self, provider):
        provider.client.close = AsyncMock()

        asyncio.run(provider.cleanup())

        provider.client.close.assert_awaited_once()
