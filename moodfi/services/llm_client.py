"""Chat completion clients for the MoodFi relay.

Both clients take an explicit LLMConfig and expose the same async
``generate(messages)`` call over OpenAI-style role/content messages.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import google.generativeai as genai
import httpx
from openai import AsyncOpenAI, OpenAIError

from moodfi.config import LLMConfig
from moodfi.utils.logger import get_logger


logger = get_logger(__name__)


class LLMClientError(Exception):
    """Raised when the provider call fails or returns no completion."""


class BaseLLMClient(ABC):
    """Common interface for chat completion providers."""

    name = "base"

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    async def _complete(self, messages: List[Dict[str, str]]) -> Optional[str]:
        """Call the provider and return the raw completion text (may be empty)."""

    async def generate(self, messages: List[Dict[str, str]]) -> str:
        """Generate a reply for the conversation.

        Args:
            messages: List of message dicts with 'role' and 'content'

        Returns:
            Completion text, or the configured fallback reply when the
            provider answered with empty content.

        Raises:
            LLMClientError: On network errors, timeouts, or a response
                without any completion.
        """
        try:
            text = await asyncio.wait_for(
                self._complete(messages),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"{self.name} request timed out after {self.config.timeout_seconds}s")
            raise LLMClientError(f"{self.name} request timed out") from e
        except LLMClientError:
            raise
        except Exception as e:
            logger.error(f"{self.name} chat completion failed: {type(e).__name__}: {str(e)}")
            raise LLMClientError(f"{self.name} chat completion failed: {e}") from e

        return text or self.config.fallback_reply


class OpenAIChatClient(BaseLLMClient):
    """OpenAI chat completions provider."""

    name = "openai"

    def __init__(self, config: LLMConfig, http_client: httpx.AsyncClient = None):
        super().__init__(config)

        if not config.api_key:
            raise ValueError("No OpenAI API key found. Set OPENAI_API_KEY in environment.")

        # One attempt per request; failures surface to the caller
        self._client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )
        logger.info(f"Initialized OpenAIChatClient with model: {config.model}")

    async def _complete(self, messages: List[Dict[str, str]]) -> Optional[str]:
        try:
            response = await self._client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except OpenAIError as e:
            raise LLMClientError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise LLMClientError("OpenAI returned no choices")

        message = response.choices[0].message
        return message.content if message else None


class GeminiChatClient(BaseLLMClient):
    """Google Gemini provider.

    System messages become the model's system instruction and the
    ``assistant`` role is mapped to Gemini's ``model`` role.
    """

    name = "gemini"

    def __init__(self, config: LLMConfig):
        super().__init__(config)

        if not config.api_key:
            raise ValueError("No Gemini API key found. Set GEMINI_API_KEY in environment.")

        genai.configure(api_key=config.api_key)
        logger.info(f"Initialized GeminiChatClient with model: {config.model}")

    def _convert_messages_to_gemini(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Convert OpenAI-style messages to Gemini format.

        Returns:
            Dict with ``system_instruction`` (or None) and ``contents``
        """
        system_parts = []
        contents = []

        for msg in messages:
            role = msg.get("role")
            content = msg.get("content", "")

            if role == "system":
                system_parts.append(content)
            elif role == "user":
                contents.append({"role": "user", "parts": [{"text": content}]})
            elif role == "assistant":
                contents.append({"role": "model", "parts": [{"text": content}]})

        return {
            "system_instruction": "\n\n".join(system_parts) or None,
            "contents": contents,
        }

    async def _complete(self, messages: List[Dict[str, str]]) -> Optional[str]:
        converted = self._convert_messages_to_gemini(messages)

        model = genai.GenerativeModel(
            model_name=self.config.model,
            system_instruction=converted["system_instruction"],
        )
        response = await model.generate_content_async(
            contents=converted["contents"],
            generation_config=genai.types.GenerationConfig(
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_tokens,
                candidate_count=1,
            ),
        )

        if not getattr(response, "candidates", None):
            raise LLMClientError("Gemini API returned no candidates")

        candidate = response.candidates[0]
        if not candidate.content or not candidate.content.parts:
            return None

        return "".join(part.text for part in candidate.content.parts)


PROVIDERS = {
    "openai": OpenAIChatClient,
    "gemini": GeminiChatClient,
}


def create_llm_client(config: LLMConfig) -> BaseLLMClient:
    """Create the provider client named by ``config.provider``."""
    try:
        client_cls = PROVIDERS[config.provider.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown LLM provider '{config.provider}'. Expected one of: {', '.join(PROVIDERS)}"
        )
    return client_cls(config)
