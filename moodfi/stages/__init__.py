"""Request processing stages."""

from moodfi.stages.emotion_stage import EmotionExtraction, EmotionStage
from moodfi.stages.relay_stage import RelayResult, RelayStage

__all__ = ["EmotionExtraction", "EmotionStage", "RelayResult", "RelayStage"]
