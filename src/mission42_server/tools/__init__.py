"""Tool registry for the Mission42 server."""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.tools import BaseTool

from .create_constellation_tool import CREATE_CONSTELLATION_TOOL, createConstellation


def get_registered_tools() -> Sequence[BaseTool]:
    """Return all tools the model may be offered."""

    return (createConstellation,)


def get_tools_by_name() -> dict[str, BaseTool]:
    return {tool.name: tool for tool in get_registered_tools()}


__all__ = [
    "CREATE_CONSTELLATION_TOOL",
    "createConstellation",
    "get_registered_tools",
    "get_tools_by_name",
]
