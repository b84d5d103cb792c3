"""Recover constellation candidates from model output.

Two interchangeable strategies, one per deployment:

* ``StructuredExtractor`` declares the createConstellation tool to the model
  and reads the tool-call arguments.
* ``PatternExtractor`` asks the model for a trigger marker in the reply and
  parses the three numbers out of the text.

Both return an empty list when nothing usable was found.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any, Protocol

from langchain_core.tools import BaseTool

from .constellation import CandidateRequest
from .llm import ModelOutput
from .tools import CREATE_CONSTELLATION_TOOL, get_registered_tools

logger = logging.getLogger(__name__)

TRIGGER_MARKER = "[[CREATE_CONSTELLATION]]"

_PRIMARY_PATTERN = re.compile(
    r"(\d+)\s+satellites?\s+across\s+(\d+)\s+orbital\s+planes?\s+"
    r"at\s+(?:an?\s+)?altitude\s+(?:of\s+)?(\d+(?:\.\d+)?)\s*km",
    re.IGNORECASE,
)
# Same order (satellites, planes, altitude) with short digit-free gaps between.
# Each value may come before its keyword ("20 satellites") or after it
# ("satellites: 20"); an altitude keyword makes the km unit optional.
_FALLBACK_PATTERN = re.compile(
    r"(?:(\d+)\s*(?:leo\s+)?satellites?\b|\bsatellites?\s*[:=]?\s*(\d+))[^\d]{0,60}?"
    r"(?:(\d+)\s*(?:orbital\s+)?planes?\b|\b(?:orbital\s+)?planes?\s*[:=]?\s*(\d+))[^\d]{0,60}?"
    r"(?:(\d+(?:\.\d+)?)\s*(?:km|kilomet)|\b(?:altitude|height)\s*(?:of\s+)?[:=]?\s*(\d+(?:\.\d+)?))",
    re.IGNORECASE,
)

_SATELLITE_KEYS = ("num_satellites", "numSatellites", "satellites")
_PLANE_KEYS = ("num_planes", "numPlanes", "planes")
_ALTITUDE_KEYS = ("altitudes_km", "altitudesPerPlane", "altitudes", "altitude_km", "altitude")


class RequestExtractor(Protocol):
    strategy: str

    def tools_for_turn(self, ready: bool) -> Sequence[BaseTool] | None:
        """Tools to declare to the model on this turn, if any."""

    def triggered(self, output: ModelOutput) -> bool:
        """Whether the model asked for a constellation to be created."""

    def reply_text(self, output: ModelOutput) -> str:
        """Reply text with any strategy-specific markup removed."""

    def extract(self, output: ModelOutput) -> list[CandidateRequest]:
        ...


def _first_present(arguments: dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in arguments:
            return arguments[key]
    return None


class StructuredExtractor:
    strategy = "structured"

    def tools_for_turn(self, ready: bool) -> Sequence[BaseTool] | None:
        return get_registered_tools() if ready else None

    def triggered(self, output: ModelOutput) -> bool:
        return bool(output.tool_calls)

    def reply_text(self, output: ModelOutput) -> str:
        return output.text

    def extract(self, output: ModelOutput) -> list[CandidateRequest]:
        candidates = []
        for tool_call in output.tool_calls:
            if tool_call.get("name") != CREATE_CONSTELLATION_TOOL:
                continue
            arguments = tool_call.get("args")
            if not isinstance(arguments, dict):
                arguments = {}
            candidates.append(
                CandidateRequest(
                    num_satellites=_first_present(arguments, _SATELLITE_KEYS),
                    num_planes=_first_present(arguments, _PLANE_KEYS),
                    altitudes=_first_present(arguments, _ALTITUDE_KEYS),
                    call_id=tool_call.get("id"),
                )
            )
        return candidates


def parse_constellation_text(text: str) -> CandidateRequest | None:
    """Pull satellites, planes and altitude out of free text, or None if absent."""
    match = _PRIMARY_PATTERN.search(text)
    if match is not None:
        satellites, planes, altitude = match.groups()
    else:
        match = _FALLBACK_PATTERN.search(text)
        if match is None:
            return None
        groups = match.groups()
        satellites, planes, altitude = (groups[i] or groups[i + 1] for i in (0, 2, 4))
    return CandidateRequest(
        num_satellites=int(satellites),
        num_planes=int(planes),
        altitudes=float(altitude),
    )


class PatternExtractor:
    strategy = "pattern"

    def __init__(self, marker: str = TRIGGER_MARKER) -> None:
        self.marker = marker

    def tools_for_turn(self, ready: bool) -> Sequence[BaseTool] | None:
        return None

    def triggered(self, output: ModelOutput) -> bool:
        return self.marker.lower() in output.text.lower()

    def reply_text(self, output: ModelOutput) -> str:
        return re.sub(re.escape(self.marker), "", output.text, flags=re.IGNORECASE).strip()

    def extract(self, output: ModelOutput) -> list[CandidateRequest]:
        candidate = parse_constellation_text(self.reply_text(output))
        if candidate is None:
            logger.info("[EXTRACT] No constellation parameters found in reply text")
            return []
        return [candidate]


def get_extractor(strategy: str) -> RequestExtractor:
    if strategy == "structured":
        return StructuredExtractor()
    if strategy == "pattern":
        return PatternExtractor()
    raise ValueError(f"Unknown extraction strategy: {strategy!r}")
