"""Request/response and emotion data models for the MoodFi relay."""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Float drift allowed at the ends of the score range; such values are clamped
SCORE_TOLERANCE = 1e-6


class EmotionObservation(BaseModel):
    """One sample of facial emotion analysis sent by the client."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    dominant_emotion: str = Field(
        ..., alias="dominantEmotion", description="Primary emotion detected"
    )
    confidence: Optional[float] = Field(
        None, ge=0.0, le=100.0, description="Overall detection confidence (0-100)"
    )
    emotion_scores: Dict[str, float] = Field(
        default_factory=dict,
        alias="emotionScores",
        description="Breakdown of all detected emotions (0.0-1.0)",
    )

    @field_validator("emotion_scores")
    @classmethod
    def check_score_range(cls, scores: Dict[str, float]) -> Dict[str, float]:
        clamped = {}
        for label, value in scores.items():
            if not -SCORE_TOLERANCE <= value <= 1.0 + SCORE_TOLERANCE:
                raise ValueError(f"score for '{label}' must be between 0.0 and 1.0")
            clamped[label] = min(max(value, 0.0), 1.0)
        return clamped

    def to_wire(self) -> Dict:
        """Dump with the client's camelCase field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ConversationMessage(BaseModel):
    """Single conversation turn."""

    role: Literal["system", "user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message content")


class ChatRequest(BaseModel):
    """Request to relay a conversation to the model provider."""

    model_config = ConfigDict(populate_by_name=True)

    messages: List[ConversationMessage] = Field(..., description="Conversation so far")
    # Validated by the emotion stage so a bad payload degrades instead of failing
    emotion_data: Optional[Any] = Field(
        None,
        alias="emotionData",
        description="Recent emotion observations, oldest first",
    )


class ChatResponse(BaseModel):
    """Generated reply."""

    message: str = Field(..., description="Assistant reply text")


class ErrorResponse(BaseModel):
    """Error payload."""

    error: str = Field(..., description="Error description")


class EmotionContext(str, Enum):
    """How emotion data was used for a request."""
    ABSENT = "absent"
    APPLIED = "applied"
    DEGRADED = "degraded"
