from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from .config import Settings, get_settings
from .resolver import IntentResolver, Resolution
from .schemas import (
    ChatCompletionResponse,
    ConversationMessage,
    ErrorResponse,
    HealthResponse,
    HelloResponse,
    ToolResultEnvelope,
)

router = APIRouter()

logger = logging.getLogger(__name__)

_MESSAGES = TypeAdapter(list[ConversationMessage])


async def get_resolver(settings: Settings = Depends(get_settings)) -> AsyncIterator[IntentResolver]:
    """One resolver per request, sharing an HTTP client across its creation calls."""
    async with httpx.AsyncClient(timeout=settings.creation_timeout_seconds) as client:
        yield IntentResolver(settings, http_client=client)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _as_response(resolution: Resolution) -> ChatCompletionResponse:
    tool_results = None
    if resolution.tool_results is not None:
        tool_results = [
            ToolResultEnvelope(
                tool_call_id=result.tool_call_id,
                tool_name=result.tool_name,
                result=result.outcome.text if result.outcome.ok else None,
                error=None if result.outcome.ok else result.outcome.text,
            )
            for result in resolution.tool_results
        ]
    return ChatCompletionResponse(
        id=str(int(time.time() * 1000)),
        content=resolution.content,
        tool_results=tool_results,
        created_at=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/healthz", response_model=HealthResponse)
def healthcheck() -> HealthResponse:
    return HealthResponse()


@router.get("/api/hello", response_model=HelloResponse)
def hello() -> HelloResponse:
    return HelloResponse()


@router.post(
    "/api/chat/completion",
    response_model=ChatCompletionResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_completion(
    request: Request,
    resolver: IntentResolver = Depends(get_resolver),
):
    """Answer one chat turn, creating a constellation when the user has confirmed one."""
    logger.info("[CHAT] Received chat completion request: %s", request.method)

    try:
        body = await request.json()
    except ValueError:
        return _error(status.HTTP_400_BAD_REQUEST, "Request body must be JSON")

    raw_messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(raw_messages, list):
        logger.info("[CHAT] Rejected request: messages is not an array")
        return _error(status.HTTP_400_BAD_REQUEST, "messages must be an array")

    try:
        messages = _MESSAGES.validate_python(raw_messages)
    except ValidationError as exc:
        logger.info("[CHAT] Rejected request: invalid messages (%d errors)", exc.error_count())
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Each message needs a role of 'user' or 'assistant' and string content",
        )

    logger.info("[CHAT] Processing messages: %d messages received", len(messages))
    try:
        resolution = await resolver.resolve(messages)
    except Exception:
        logger.exception("[CHAT] Error processing chat completion")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    logger.info("[CHAT] Response generated (%s)", resolution.outcome.kind)
    return _as_response(resolution)
