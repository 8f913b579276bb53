import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from moodfi.config import EmotionConfig
from moodfi.schemas import ChatRequest, ConversationMessage, EmotionContext, EmotionObservation
from moodfi.utils.logger import get_logger


logger = get_logger(__name__)

_WINDOW_ADAPTER = TypeAdapter(List[EmotionObservation])
_JSON_ARRAY = re.compile(r"(\[.*\])", re.DOTALL)


@dataclass(frozen=True)
class EmotionExtraction:
    window: Optional[List[EmotionObservation]]
    context: EmotionContext


class EmotionStage:
    """
    Pulls the emotion window out of a chat request.

    The structured `emotionData` field wins. Older clients embed the data as
    a JSON array inside a system message that contains the marker phrase;
    that form is still accepted. Unparseable data never fails the request.
    """

    def __init__(self, config: EmotionConfig = None):
        self.config = config or EmotionConfig()

    def process(self, request: ChatRequest) -> EmotionExtraction:
        if request.emotion_data is not None:
            return self._validate(request.emotion_data, source="emotionData field")

        payload = self.find_marker_payload(request.messages)
        if payload is None:
            return EmotionExtraction(window=None, context=EmotionContext.ABSENT)

        try:
            raw = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse emotion data: {e}")
            return EmotionExtraction(window=None, context=EmotionContext.DEGRADED)

        return self._validate(raw, source="system message")

    def find_marker_payload(self, messages: Sequence[ConversationMessage]) -> Optional[str]:
        """
        Returns the JSON array text from the first marked system message,
        an empty string when the marker is present without an array,
        or None when no message carries the marker.
        """
        for msg in messages:
            if msg.role == "system" and self.config.marker in msg.content:
                match = _JSON_ARRAY.search(msg.content)
                return match.group(1) if match else ""
        return None

    def _validate(self, raw: Any, source: str) -> EmotionExtraction:
        try:
            window = _WINDOW_ADAPTER.validate_python(raw)
        except ValidationError as e:
            logger.warning(
                f"Could not parse emotion data from {source}: {e.error_count()} error(s)"
            )
            return EmotionExtraction(window=None, context=EmotionContext.DEGRADED)

        if not window:
            return EmotionExtraction(window=None, context=EmotionContext.ABSENT)

        preview = json.dumps([obs.to_wire() for obs in window])[:100]
        logger.info(f"Extracted emotion data from {source}: {preview}...")
        return EmotionExtraction(window=window, context=EmotionContext.APPLIED)
