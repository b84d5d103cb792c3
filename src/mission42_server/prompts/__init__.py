"""System prompts for the Mission42 assistant.

Prompt sections are stored as separate .txt files and composed in order. The
last section depends on the extraction strategy of the deployment: the
structured strategy explains the createConstellation tool, the pattern
strategy asks for a trigger marker plus a fixed sentence in the reply text.
Set SYSTEM_PROMPT in env to override with a single custom prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..schemas import ConversationMessage

logger = logging.getLogger(__name__)

BASE_SECTION_ORDER = (
    "base",
    "constraints",
)

STRATEGY_SECTIONS = {
    "structured": "structured",
    "pattern": "pattern",
}


def _prompts_dir() -> Path:
    """Directory containing prompt .txt files (next to this __init__.py)."""
    return Path(__file__).resolve().parent


def _load_section(name: str) -> str:
    """Load a single prompt section by name (without .txt)."""
    path = _prompts_dir() / f"{name}.txt"
    if not path.exists():
        logger.warning("Prompt section not found: %s", path)
        return ""
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.warning("Failed to read prompt section %s: %s", name, e)
        return ""


def build_system_prompt(strategy: str = "structured", *, separator: str = "\n\n") -> str:
    """Build the system prompt from the base sections plus the strategy section."""
    order = list(BASE_SECTION_ORDER)
    section = STRATEGY_SECTIONS.get(strategy)
    if section is None:
        raise ValueError(f"Unknown extraction strategy: {strategy!r}")
    order.append(section)
    parts = [content for content in (_load_section(name) for name in order) if content]
    return separator.join(parts)


def get_system_prompt(strategy: str = "structured", override: str | None = None) -> str:
    """Return the system prompt to use for this deployment.

    Args:
        strategy: Extraction strategy ("structured" or "pattern").
        override: If set (e.g. from SYSTEM_PROMPT env), use this instead of the prompt files.
    """
    if override and override.strip():
        return override.strip()
    return build_system_prompt(strategy)


def assemble_prompt(system_prompt: str, messages: Iterable[ConversationMessage]) -> str:
    """Fold the system instructions and the transcript into a single prompt.

    Each message is rendered as ``"<role>: <content>"`` in original order, one per line.
    """
    lines = [f"{message.role}: {message.content}" for message in messages]
    if system_prompt:
        lines.insert(0, system_prompt)
    return "\n".join(lines)


__all__ = [
    "BASE_SECTION_ORDER",
    "assemble_prompt",
    "build_system_prompt",
    "get_system_prompt",
]
