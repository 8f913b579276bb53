"""Builds the emotion-aware system prompt sent ahead of each conversation."""

from typing import List, Optional, Sequence

from moodfi.context.prompt_templates import (
    BASE_SYSTEM_PROMPT,
    EMOTION_PROMPTS,
    format_guidance,
)
from moodfi.schemas import EmotionObservation


def distinct_emotions(window: Sequence[EmotionObservation]) -> List[str]:
    """Dominant emotion labels in first-seen order, duplicates removed."""
    return list(dict.fromkeys(obs.dominant_emotion for obs in window))


def describe_trend(window: Sequence[EmotionObservation]) -> str:
    """Sentence describing how the user's emotions moved over the window."""
    current = window[-1].dominant_emotion
    labels = distinct_emotions(window)

    if len(labels) == 1:
        trend = EMOTION_PROMPTS["consistent"].format(emotion=current)
    else:
        trend = EMOTION_PROMPTS["shifting"].format(
            emotions=", ".join(labels), emotion=current
        )
    return EMOTION_PROMPTS["analysis_intro"] + trend


def compose_system_prompt(window: Optional[Sequence[EmotionObservation]] = None) -> str:
    """Create the system prompt for a conversation.

    Without emotion data the base persona prompt is returned as is. With a
    window, a trend sentence, guidance for the latest dominant emotion and a
    closing directive about the detailed data are appended.

    Args:
        window: Recent emotion observations, oldest first.

    Returns:
        System prompt text.
    """
    if not window:
        return BASE_SYSTEM_PROMPT

    current = window[-1].dominant_emotion

    sections = [
        BASE_SYSTEM_PROMPT,
        describe_trend(window),
        EMOTION_PROMPTS["guidance_header"].format(emotion=current)
        + "\n"
        + format_guidance(current),
        EMOTION_PROMPTS["closing"],
    ]
    return "\n\n".join(sections)
