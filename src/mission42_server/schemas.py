from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ConversationMessage(BaseModel):
    """One chat turn as sent by the front-end."""

    role: Literal["user", "assistant"]
    content: str


class ToolResultEnvelope(BaseModel):
    """Outcome of a single model tool call."""

    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    result: str | None = None
    error: str | None = None

    model_config = {"populate_by_name": True}


class ChatCompletionResponse(BaseModel):
    id: str
    role: Literal["assistant"] = "assistant"
    content: str
    tool_results: list[ToolResultEnvelope] | None = Field(default=None, alias="toolResults")
    created_at: str = Field(alias="createdAt")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str


class HelloResponse(BaseModel):
    msg: str = "Mission42 is Online"


class HealthResponse(BaseModel):
    status: str = "ok"
