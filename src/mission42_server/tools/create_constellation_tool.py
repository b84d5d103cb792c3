"""Tool the model can call to create a satellite constellation."""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.tools import tool
from pydantic import BaseModel, Field

from ..config import get_settings
from ..constellation import CandidateRequest
from ..dispatcher import create_constellation

logger = logging.getLogger(__name__)

CREATE_CONSTELLATION_TOOL = "createConstellation"


class CreateConstellationArgs(BaseModel):
    """Parameters of a LEO constellation."""

    num_satellites: int = Field(description="Total number of satellites, between 1 and 60")
    num_planes: int = Field(
        description="Number of orbital planes, between 1 and 10 and not more than num_satellites"
    )
    altitudes_km: list[float] = Field(
        description=(
            "Orbital altitude in kilometers (160-2000). Give one value to use the same "
            "altitude for every plane, or exactly one value per plane"
        )
    )


@tool(args_schema=CreateConstellationArgs)
async def createConstellation(
    num_satellites: int,
    num_planes: int,
    altitudes_km: list[float],
    _agent_context: dict[str, Any] | None = None,
) -> dict:
    """Create a satellite constellation once the user has confirmed its parameters.

    Only call this after the user supplied the satellite count, the orbital plane
    count and the altitude, and explicitly confirmed the summary.

    Returns:
        Status dict with a confirmation message or the reason creation was refused.
    """
    context = _agent_context or {}
    logger.info(
        "[CREATE_CONSTELLATION] Called with: num_satellites=%s, num_planes=%s, altitudes_km=%s",
        num_satellites, num_planes, altitudes_km,
    )
    outcome = await create_constellation(
        CandidateRequest(
            num_satellites=num_satellites,
            num_planes=num_planes,
            altitudes=altitudes_km,
        ),
        context.get("settings") or get_settings(),
        client=context.get("http_client"),
    )
    if outcome.ok:
        return {"status": "success", "message": outcome.text}
    return {"status": "error", "message": outcome.text}
