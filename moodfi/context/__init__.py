"""Prompt and conversation building."""

from moodfi.context.conversation import build_conversation, format_emotion_details
from moodfi.context.prompt_composer import compose_system_prompt

__all__ = ["build_conversation", "compose_system_prompt", "format_emotion_details"]
