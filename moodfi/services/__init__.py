"""Model provider clients."""

from moodfi.services.llm_client import (
    BaseLLMClient,
    GeminiChatClient,
    LLMClientError,
    OpenAIChatClient,
    create_llm_client,
)

__all__ = [
    "BaseLLMClient",
    "GeminiChatClient",
    "LLMClientError",
    "OpenAIChatClient",
    "create_llm_client",
]
