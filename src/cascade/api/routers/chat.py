"""
Multi-model chat endpoint.

POST runs the DeepSeek -> Qwen -> Gemini pipeline; OPTIONS answers CORS
preflight; every other method is rejected with 405.
"""

import logging
from fastapi import APIRouter, Depends, Request, Response

from ..models.chat import ChatRequest, ChatResponse, PipelineResultData
from ..models.common import ErrorResponse
from ..dependencies.rate_limit import RateLimiter, client_identifier, get_rate_limiter
from ..dependencies.state import get_app_settings, get_model_manager
from ..responses import error_response, utc_timestamp
from cascade.models.manager import ModelManager
from cascade.pipeline.chat.chat import ChatPipeline
from cascade.pipeline.chat.types import ChatInput, ChatSettings
from cascade.settings import AppSettings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.options("/chat", include_in_schema=False)
async def chat_preflight():
    return Response(status_code=200)


@router.api_route("/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def chat_method_not_allowed():
    return error_response(405, "Method not allowed", "Only POST requests are supported")


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    request: Request,
    chat_request: ChatRequest,
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    model_manager: ModelManager = Depends(get_model_manager),
    settings: AppSettings = Depends(get_app_settings),
):
    """
    Run a message through the model pipeline.

    Requests are counted against the caller's rate window only after the
    body has validated.
    """
    client_id = client_identifier(request)
    if rate_limiter.is_rate_limited(client_id):
        logger.warning(f"Rate limit exceeded for client {client_id}")
        return error_response(429, "Rate limit exceeded", "Please wait before sending another message")

    chat_input = ChatInput(
        message=chat_request.message,
        stage=chat_request.stage,
        settings=ChatSettings(
            temperature=chat_request.settings.temperature if chat_request.settings else None
        ),
    )

    try:
        result = await ChatPipeline(model_manager).process(chat_input)
    except Exception as e:
        logger.exception(f"API error at {utc_timestamp()}: {e}")
        return error_response(
            500,
            "Internal server error",
            str(e) if settings.is_development else "Processing failed",
        )

    return ChatResponse(
        success=True,
        data=PipelineResultData(**vars(result)),
        timestamp=utc_timestamp(),
        processing_time=result.processing_time,
    )
