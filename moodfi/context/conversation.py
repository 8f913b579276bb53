"""Assembles the message list sent to the model provider."""

import json
from typing import Dict, List, Optional, Sequence

from moodfi.context.prompt_templates import EMOTION_PROMPTS
from moodfi.schemas import ConversationMessage, EmotionObservation

PASSTHROUGH_ROLES = ("user", "assistant")


def format_emotion_details(
    window: Sequence[EmotionObservation],
    window_seconds: int = 3,
) -> str:
    """Render the detailed emotion data block."""
    data = json.dumps([obs.to_wire() for obs in window], indent=2)
    return EMOTION_PROMPTS["detailed_data"].format(seconds=window_seconds, data=data)


def build_conversation(
    system_prompt: str,
    messages: Sequence[ConversationMessage],
    window: Optional[Sequence[EmotionObservation]] = None,
    window_seconds: int = 3,
) -> List[Dict[str, str]]:
    """Build the provider conversation.

    The composed system prompt comes first, followed by the detailed emotion
    data when a window is present. Caller system messages are dropped; user
    and assistant turns keep their order and content.
    """
    conversation = [{"role": "system", "content": system_prompt}]

    # An empty window is treated like no window: no "[]" details message
    if window:
        conversation.append({
            "role": "system",
            "content": format_emotion_details(window, window_seconds),
        })

    for msg in messages:
        if msg.role in PASSTHROUGH_ROLES:
            conversation.append({"role": msg.role, "content": msg.content})

    return conversation
