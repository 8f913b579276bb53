"""Tests for the chat completion provider clients."""

import asyncio
import json
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from moodfi.config import LLMConfig
from moodfi.services.llm_client import (
    GeminiChatClient,
    LLMClientError,
    OpenAIChatClient,
    create_llm_client,
)


CONVERSATION = [
    {"role": "system", "content": "You are Elwa."},
    {"role": "system", "content": "Detailed emotion analysis (last 3 seconds): []"},
    {"role": "user", "content": "Hello"},
    {"role": "assistant", "content": "Hi! How are you?"},
    {"role": "user", "content": "Fine"},
]


def openai_response(content):
    return Mock(choices=[Mock(message=Mock(content=content))])


class TestOpenAIChatClient:
    @pytest.fixture
    def client(self):
        client = OpenAIChatClient(LLMConfig(api_key="test-key"))
        client._client = Mock()
        client._client.chat.completions.create = AsyncMock(return_value=openai_response("Hello!"))
        return client

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            OpenAIChatClient(LLMConfig(api_key=None))

    @pytest.mark.asyncio
    async def test_generate_returns_first_choice(self, client):
        reply = await client.generate(CONVERSATION)

        assert reply == "Hello!"

    @pytest.mark.asyncio
    async def test_fixed_parameters_are_sent(self, client):
        await client.generate(CONVERSATION)

        client._client.chat.completions.create.assert_awaited_once_with(
            model="gpt-3.5-turbo",
            messages=CONVERSATION,
            max_tokens=500,
            temperature=0.7,
        )

    @pytest.mark.asyncio
    async def test_empty_content_uses_fallback(self, client):
        client._client.chat.completions.create.return_value = openai_response(None)

        assert await client.generate(CONVERSATION) == "No response."

    @pytest.mark.asyncio
    async def test_no_choices_raises(self, client):
        client._client.chat.completions.create.return_value = Mock(choices=[])

        with pytest.raises(LLMClientError):
            await client.generate(CONVERSATION)

    @pytest.mark.asyncio
    async def test_network_error_raises(self, client):
        client._client.chat.completions.create.side_effect = ConnectionError("connection reset")

        with pytest.raises(LLMClientError):
            await client.generate(CONVERSATION)

    @pytest.mark.asyncio
    async def test_timeout_raises(self, client):
        async def slow_create(**kwargs):
            await asyncio.sleep(1)
            return openai_response("too late")

        client.config = LLMConfig(api_key="test-key", timeout_seconds=0.01)
        client._client.chat.completions.create = slow_create

        with pytest.raises(LLMClientError, match="timed out"):
            await client.generate(CONVERSATION)


class TestOpenAIOverHTTP:
    """Runs the real SDK against an in-memory provider."""

    def make_client(self, handler):
        requests = []

        def record(request):
            requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        config = LLMConfig(api_key="test-key", base_url="http://provider.test/v1")
        return OpenAIChatClient(config, http_client=http_client), requests

    @pytest.mark.asyncio
    async def test_server_error_is_sent_once(self):
        client, requests = self.make_client(
            lambda request: httpx.Response(500, json={"error": {"message": "upstream failure"}})
        )

        with pytest.raises(LLMClientError):
            await client.generate(CONVERSATION)

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_sent_once(self):
        client, requests = self.make_client(
            lambda request: httpx.Response(429, json={"error": {"message": "slow down"}})
        )

        with pytest.raises(LLMClientError):
            await client.generate(CONVERSATION)

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_completion_body_and_reply(self):
        completion = {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 0,
            "model": "gpt-3.5-turbo",
            "choices": [{
                "index": 0,
                "message": {"role": "assistant", "content": "Hello!"},
                "finish_reason": "stop",
            }],
        }
        client, requests = self.make_client(lambda request: httpx.Response(200, json=completion))

        assert await client.generate(CONVERSATION) == "Hello!"

        assert len(requests) == 1
        assert requests[0].url.path == "/v1/chat/completions"
        sent = json.loads(requests[0].content)
        assert sent["max_tokens"] == 500
        assert sent["temperature"] == 0.7
        assert sent["messages"] == CONVERSATION


class TestGeminiChatClient:
    @pytest.fixture
    def genai(self):
        with patch("moodfi.services.llm_client.genai") as mock_genai:
            yield mock_genai

    @pytest.fixture
    def client(self, genai):
        return GeminiChatClient(LLMConfig(provider="gemini", model="gemini-2.5-flash", api_key="test-key"))

    def gemini_response(self, genai, texts):
        candidate = Mock()
        candidate.content.parts = [Mock(text=t) for t in texts]
        response = Mock(candidates=[candidate])
        genai.GenerativeModel.return_value.generate_content_async = AsyncMock(return_value=response)
        return response

    def test_configures_api_key(self, client, genai):
        genai.configure.assert_called_once_with(api_key="test-key")

    def test_convert_messages(self, client):
        converted = client._convert_messages_to_gemini(CONVERSATION)

        assert converted["system_instruction"] == (
            "You are Elwa.\n\nDetailed emotion analysis (last 3 seconds): []"
        )
        assert [c["role"] for c in converted["contents"]] == ["user", "model", "user"]
        assert converted["contents"][1]["parts"] == [{"text": "Hi! How are you?"}]

    @pytest.mark.asyncio
    async def test_generate_joins_parts(self, client, genai):
        self.gemini_response(genai, ["Hello ", "there."])

        assert await client.generate(CONVERSATION) == "Hello there."
        genai.GenerativeModel.assert_called_once_with(
            model_name="gemini-2.5-flash",
            system_instruction="You are Elwa.\n\nDetailed emotion analysis (last 3 seconds): []",
        )

    @pytest.mark.asyncio
    async def test_no_candidates_raises(self, client, genai):
        genai.GenerativeModel.return_value.generate_content_async = AsyncMock(
            return_value=Mock(candidates=[])
        )

        with pytest.raises(LLMClientError):
            await client.generate(CONVERSATION)

    @pytest.mark.asyncio
    async def test_empty_parts_use_fallback(self, client, genai):
        self.gemini_response(genai, [])

        assert await client.generate(CONVERSATION) == "No response."


class TestCreateLLMClient:
    def test_openai_is_default(self):
        client = create_llm_client(LLMConfig(api_key="test-key"))

        assert isinstance(client, OpenAIChatClient)

    def test_gemini_provider(self):
        with patch("moodfi.services.llm_client.genai"):
            client = create_llm_client(LLMConfig(provider="Gemini", api_key="test-key"))

        assert isinstance(client, GeminiChatClient)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm_client(LLMConfig(provider="llama", api_key="test-key"))
