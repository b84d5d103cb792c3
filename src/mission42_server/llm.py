"""Adapter around the chat model used by the resolver.

The model is a black box: a prompt (and optionally tool declarations) goes in,
reply text and tool calls come out.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx
from langchain_core.messages import HumanMessage
from langchain_core.tools import BaseTool
from langchain_google_genai import ChatGoogleGenerativeAI

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

# The client deadline sits past the asyncio one so the turn-level timeout fires first.
CLIENT_TIMEOUT_MARGIN_SECONDS = 5.0


class ModelTimeoutError(TimeoutError):
    """Raised when the model does not answer within the configured timeout."""


@dataclass
class ModelOutput:
    text: str
    tool_calls: list[dict[str, Any]] = field(default_factory=list)


def build_model(settings: Settings, max_output_tokens: int | None = None) -> ChatGoogleGenerativeAI:
    """Instantiate the Gemini chat model for one request."""
    if not settings.google_api_key:
        raise RuntimeError("No Gemini API key configured (GOOGLE_API_KEY)")
    kwargs: dict[str, Any] = {}
    if settings.model_base_url:
        kwargs["client_options"] = {"api_endpoint": settings.model_base_url}
    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        api_key=settings.google_api_key,
        max_output_tokens=max_output_tokens or settings.max_output_tokens,
        timeout=settings.model_timeout_seconds + CLIENT_TIMEOUT_MARGIN_SECONDS,
        max_retries=0,
        **kwargs,
    )


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content) if content else ""


async def generate(
    prompt: str,
    *,
    tools: Sequence[BaseTool] | None = None,
    max_output_tokens: int | None = None,
    settings: Settings | None = None,
) -> ModelOutput:
    """Run one model call; tools are only declared when given."""
    resolved = settings or get_settings()
    model = build_model(resolved, max_output_tokens=max_output_tokens)
    runnable = model.bind_tools(list(tools)) if tools else model

    logger.info(
        "[MODEL] Calling %s (tools=%s, prompt_chars=%d)",
        resolved.gemini_model,
        [tool.name for tool in tools] if tools else [],
        len(prompt),
    )
    try:
        response = await asyncio.wait_for(
            runnable.ainvoke([HumanMessage(content=prompt)]),
            timeout=resolved.model_timeout_seconds,
        )
    except (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException) as exc:
        raise ModelTimeoutError(
            f"Model did not respond within {resolved.model_timeout_seconds:g}s"
        ) from exc

    text = _content_text(getattr(response, "content", "")).strip()
    tool_calls = list(getattr(response, "tool_calls", None) or [])
    logger.info("[MODEL] Response: %d chars, %d tool call(s)", len(text), len(tool_calls))
    return ModelOutput(text=text, tool_calls=tool_calls)
