from dataclasses import dataclass

from moodfi.config import EmotionConfig
from moodfi.context.conversation import build_conversation
from moodfi.context.prompt_composer import compose_system_prompt
from moodfi.schemas import ChatRequest, EmotionContext
from moodfi.services.llm_client import BaseLLMClient
from moodfi.stages.emotion_stage import EmotionStage
from moodfi.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class RelayResult:
    message: str
    emotion_context: EmotionContext


class RelayStage:
    """
    One chat turn: extract emotions, compose the system prompt,
    assemble the conversation and ask the provider for a reply.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        emotion_config: EmotionConfig = None,
    ):
        self.client = llm_client
        self.emotion_config = emotion_config or EmotionConfig()
        self.emotion_stage = EmotionStage(self.emotion_config)

    async def process(self, request: ChatRequest) -> RelayResult:
        extraction = self.emotion_stage.process(request)

        system_prompt = compose_system_prompt(extraction.window)
        conversation = build_conversation(
            system_prompt,
            request.messages,
            window=extraction.window,
            window_seconds=self.emotion_config.window_seconds,
        )

        logger.info(
            f"Sending conversation to {self.client.name} with {len(conversation)} messages "
            f"(emotion context: {extraction.context.value})"
        )
        reply = await self.client.generate(conversation)
        logger.info(f"Response from {self.client.name} received")

        return RelayResult(message=reply, emotion_context=extraction.context)
