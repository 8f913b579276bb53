"""REST API server for the MoodFi relay.

This module exposes the emotion-aware chat relay as a FastAPI service.
Clients post a conversation (optionally with recent facial emotion
readings) and receive the model's reply.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from moodfi import __version__
from moodfi.config import Config, get_config
from moodfi.schemas import ChatRequest, ChatResponse, ErrorResponse
from moodfi.services.llm_client import BaseLLMClient, LLMClientError, create_llm_client
from moodfi.stages.relay_stage import RelayStage
from moodfi.utils.logger import get_logger, setup_logging

# Initialize logger
logger = get_logger(__name__)

EMOTION_CONTEXT_HEADER = "X-Emotion-Context"

MESSAGES_NOT_ARRAY = "Messages must be an array"
INVALID_MESSAGE = "Invalid message format"
PROCESSING_ERROR = "Error processing request"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


# ===========================
# API Routes
# ===========================

router = APIRouter()


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Relay a conversation to the language model",
)
async def chat(request: ChatRequest, http_request: Request, response: Response):
    """Relay a conversation with emotion-aware system instructions.

    Args:
        request: Conversation messages and optional emotion data

    Returns:
        ChatResponse with the model's reply
    """
    logger.info("Received chat request")
    relay: RelayStage = http_request.app.state.relay

    try:
        result = await relay.process(request)
    except LLMClientError as e:
        logger.error(f"Chat error: {e}")
        return error_response(500, PROCESSING_ERROR)
    except Exception as e:
        logger.exception(f"Chat error: {type(e).__name__}: {e}")
        return error_response(500, PROCESSING_ERROR)

    response.headers[EMOTION_CONTEXT_HEADER] = result.emotion_context.value
    return ChatResponse(message=result.message)


@router.get("/health", summary="Health check")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "OK"}


@router.get("/api/test", summary="Test endpoint")
async def test_endpoint() -> Dict[str, str]:
    """Static readiness payload."""
    return {"message": "Server is working!"}


# ===========================
# Error Handlers
# ===========================


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies become 400 {error} instead of FastAPI's 422 {detail}."""
    # ("body",) or ("body", "messages") means the list itself is missing or not a list
    if any(len(err.get("loc", ())) <= 2 for err in exc.errors()):
        message = MESSAGES_NOT_ARRAY
    else:
        message = INVALID_MESSAGE
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(400, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, PROCESSING_ERROR)


# ===========================
# FastAPI Application
# ===========================


def create_app(config: Optional[Config] = None, llm_client: Optional[BaseLLMClient] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration. If None, loads the global config.
        llm_client: Provider client. If None, one is created from
            ``config.llm`` at startup.

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """FastAPI lifespan context manager for startup/shutdown."""
        logger.info("Starting MoodFi relay...")
        if app.state.relay is None:
            client = create_llm_client(config.llm)
            app.state.relay = RelayStage(client, emotion_config=config.emotion)
        yield
        logger.info("Shutting down MoodFi relay...")

    app = FastAPI(
        title="MoodFi Relay API",
        description="Emotion-aware relay between the MoodFi client and a chat completion API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.relay = (
        RelayStage(llm_client, emotion_config=config.emotion) if llm_client is not None else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=[EMOTION_CONTEXT_HEADER],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router)

    return app


# ===========================
# Main
# ===========================


def main() -> None:
    """Run the relay with uvicorn, over HTTPS when certificates are configured."""
    config = get_config()
    setup_logging(config.logging)

    server = config.server
    use_tls = bool(server.ssl_keyfile and server.ssl_certfile)
    scheme = "https" if use_tls else "http"

    logger.info(f"MoodFi relay running at {scheme}://{server.host}:{server.port}")
    logger.info(f"Health check: {scheme}://localhost:{server.port}/health")
    logger.info(f"Test endpoint: {scheme}://localhost:{server.port}/api/test")

    kwargs: Dict[str, Any] = {}
    if use_tls:
        kwargs.update(ssl_keyfile=server.ssl_keyfile, ssl_certfile=server.ssl_certfile)

    uvicorn.run(
        create_app(config),
        host=server.host,
        port=server.port,
        log_level=config.logging.level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    main()
