"""Constellation intent resolver.

One call handles one chat turn: build the prompt, ask the readiness gate
whether creation may be offered, call the model, recover and validate any
constellation request, and dispatch it. Nothing is kept between turns.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import httpx

from .config import Settings, get_settings
from .constellation import CandidateRequest
from .extraction import RequestExtractor, get_extractor
from .llm import ModelOutput, ModelTimeoutError, generate
from .outcomes import ResolverOutcome
from .prompts import assemble_prompt, get_system_prompt
from .readiness import is_ready
from .schemas import ConversationMessage
from .tools import CREATE_CONSTELLATION_TOOL, get_tools_by_name

logger = logging.getLogger(__name__)

RESTATE_PARAMETERS = (
    "I couldn't read the constellation parameters from that. Could you restate them as "
    "the number of satellites, the number of orbital planes and the altitude in km?"
)
CONFIRM_FIRST = (
    "Before I create anything, please confirm the number of satellites, orbital planes "
    "and altitude you want."
)
MODEL_TIMEOUT = "The assistant took too long to respond. Please try again."


@dataclass(frozen=True)
class ToolResult:
    tool_call_id: str | None
    tool_name: str
    outcome: ResolverOutcome


@dataclass
class Resolution:
    """What the endpoint sends back for one turn."""

    outcome: ResolverOutcome
    tool_results: list[ToolResult] | None = None
    prompt: str = field(default="", repr=False)

    @property
    def content(self) -> str:
        return self.outcome.text


class IntentResolver:
    def __init__(
        self,
        settings: Settings | None = None,
        extractor: RequestExtractor | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.extractor = extractor or get_extractor(self.settings.extraction_strategy)
        self.http_client = http_client
        self.system_prompt = get_system_prompt(
            self.extractor.strategy, override=self.settings.system_prompt
        )

    async def resolve(self, messages: Sequence[ConversationMessage]) -> Resolution:
        prompt = assemble_prompt(self.system_prompt, messages)
        logger.info("[RESOLVER] Prompt tail: ...%s", prompt[-100:].replace("\n", " | "))

        ready = is_ready(messages, window=self.settings.readiness_window)
        tools = self.extractor.tools_for_turn(ready)
        logger.info(
            "[RESOLVER] strategy=%s ready=%s tools=%s",
            self.extractor.strategy, ready, [t.name for t in tools] if tools else [],
        )

        try:
            output = await generate(
                prompt,
                tools=tools,
                max_output_tokens=self.settings.max_output_tokens,
                settings=self.settings,
            )
        except ModelTimeoutError as exc:
            logger.warning("[RESOLVER] %s", exc)
            return Resolution(outcome=ResolverOutcome.rejected(MODEL_TIMEOUT), prompt=prompt)

        if not self.extractor.triggered(output):
            return Resolution(outcome=ResolverOutcome.reply(self.extractor.reply_text(output)), prompt=prompt)

        if self.extractor.strategy == "structured":
            return await self._resolve_tool_calls(output, ready, prompt)
        return await self._resolve_text_trigger(output, ready, prompt)

    async def _resolve_text_trigger(self, output: ModelOutput, ready: bool, prompt: str) -> Resolution:
        if not ready:
            logger.info("[RESOLVER] Trigger emitted before confirmation; not dispatching")
            return Resolution(outcome=ResolverOutcome.reply(CONFIRM_FIRST), prompt=prompt)

        candidates = self.extractor.extract(output)
        if not candidates:
            return Resolution(outcome=ResolverOutcome.reply(RESTATE_PARAMETERS), prompt=prompt)

        outcome = await self._call_tool(CREATE_CONSTELLATION_TOOL, candidates[0])
        return Resolution(outcome=outcome, prompt=prompt)

    async def _resolve_tool_calls(self, output: ModelOutput, ready: bool, prompt: str) -> Resolution:
        candidates = iter(self.extractor.extract(output))
        pending: list[tuple[dict, CandidateRequest | None]] = []
        for tool_call in output.tool_calls:
            if tool_call.get("name") == CREATE_CONSTELLATION_TOOL:
                pending.append((tool_call, next(candidates)))
            else:
                pending.append((tool_call, None))

        async def run(tool_call: dict, candidate: CandidateRequest | None) -> ResolverOutcome:
            tool_name = tool_call.get("name")
            if candidate is None:
                logger.warning("[RESOLVER] Tool not found: %s", tool_name)
                return ResolverOutcome.rejected(f"Requested tool '{tool_name}' is not available.")
            if not ready:
                logger.info("[RESOLVER] Tool call %s before confirmation; not dispatching", tool_name)
                return ResolverOutcome.rejected(CONFIRM_FIRST)
            return await self._call_tool(tool_name, candidate)

        results = await asyncio.gather(
            *(run(tool_call, candidate) for tool_call, candidate in pending),
            return_exceptions=True,
        )

        tool_results: list[ToolResult] = []
        for (tool_call, _), result in zip(pending, results):
            tool_name = tool_call.get("name") or "unknown"
            if isinstance(result, BaseException):
                logger.error("[RESOLVER] Tool execution failed: %s", tool_name, exc_info=result)
                result = ResolverOutcome.rejected(f"Tool '{tool_name}' failed. Please try again.")
            tool_results.append(ToolResult(tool_call_id=tool_call.get("id"), tool_name=tool_name, outcome=result))

        return Resolution(
            outcome=_summarize(output.text, tool_results),
            tool_results=tool_results,
            prompt=prompt,
        )

    async def _call_tool(self, tool_name: str, candidate: CandidateRequest) -> ResolverOutcome:
        """Run a registered tool with the candidate's raw arguments.

        The tool coroutine is called directly so the request context (settings and
        the shared HTTP client) reaches it; ``ainvoke`` would drop keys outside the
        args schema. Range checks happen inside the tool, not in the schema.
        """
        tool = get_tools_by_name()[tool_name]
        args = {
            "num_satellites": candidate.num_satellites,
            "num_planes": candidate.num_planes,
            "altitudes_km": candidate.altitudes,
            "_agent_context": {"settings": self.settings, "http_client": self.http_client},
        }
        allowed = inspect.signature(tool.coroutine).parameters
        result = await tool.coroutine(**{k: v for k, v in args.items() if k in allowed})
        logger.info("[RESOLVER] Tool result: %s", result)
        if result.get("status") == "success":
            return ResolverOutcome.created(result["message"])
        return ResolverOutcome.rejected(result["message"])


def _summarize(model_text: str, tool_results: list[ToolResult]) -> ResolverOutcome:
    texts = [model_text] if model_text else []
    texts.extend(r.outcome.text for r in tool_results)
    content = " ".join(texts)
    if any(r.outcome.kind == "created" for r in tool_results):
        return ResolverOutcome.created(content)
    return ResolverOutcome.rejected(content)
