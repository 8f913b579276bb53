"""Shared pytest fixtures."""

from typing import Dict, List, Optional

import pytest

from moodfi.config import Config, LLMConfig
from moodfi.schemas import EmotionObservation
from moodfi.services.llm_client import BaseLLMClient


class FakeLLMClient(BaseLLMClient):
    """Provider stand-in that records every conversation it receives."""

    name = "fake"

    def __init__(self, reply: Optional[str] = "Hi there!", error: Exception = None):
        super().__init__(LLMConfig(api_key="test-key", timeout_seconds=5))
        self.reply = reply
        self.error = error
        self.calls = 0
        self.conversations: List[List[Dict[str, str]]] = []

    async def _complete(self, messages):
        self.calls += 1
        self.conversations.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


def observation(label: str, confidence: float = 80.0, **scores) -> EmotionObservation:
    return EmotionObservation(
        dominantEmotion=label,
        confidence=confidence,
        emotionScores=scores or {label.lower(): 0.9},
    )


@pytest.fixture
def make_observation():
    return observation


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def config():
    return Config(llm=LLMConfig(api_key="test-key"))


@pytest.fixture
def make_client():
    return FakeLLMClient
