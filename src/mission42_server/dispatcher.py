"""Send validated constellation requests to the creation API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings, get_settings
from .constellation import (
    CandidateRequest,
    ConstellationRequest,
    ConstellationValidationError,
    validate_request,
)
from .outcomes import ResolverOutcome

logger = logging.getLogger(__name__)

RETRY_GUIDANCE = (
    "Sorry, I couldn't create the constellation right now. "
    "Please try again in a moment by sending your confirmation again."
)


class DispatchError(RuntimeError):
    """The creation API could not be reached or answered with an error."""


def build_payload(request: ConstellationRequest, settings: Settings) -> dict[str, Any]:
    """Build the creation API body; altitudesPerPlane shape depends on the deployment."""
    if settings.altitude_payload == "single":
        altitudes: float | list[float] = request.altitudes[0]
    else:
        altitudes = list(request.altitudes)
    return {
        "numSatellites": request.num_satellites,
        "numPlanes": request.num_planes,
        "altitudesPerPlane": altitudes,
    }


async def dispatch(
    request: ConstellationRequest,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """POST the request once. Raises DispatchError on transport errors or non-2xx."""
    resolved = settings or get_settings()
    payload = build_payload(request, resolved)
    endpoint = resolved.constellation_api_url

    logger.info("[DISPATCH] POST %s %s", endpoint, payload)
    try:
        if client is not None:
            response = await client.post(endpoint, json=payload, timeout=resolved.creation_timeout_seconds)
        else:
            async with httpx.AsyncClient(timeout=resolved.creation_timeout_seconds) as own_client:
                response = await own_client.post(endpoint, json=payload)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DispatchError(
            f"Creation API returned {exc.response.status_code}: {exc.response.text[:200]}"
        ) from exc
    except httpx.HTTPError as exc:
        raise DispatchError(f"Failed to contact creation API: {exc!r}") from exc

    try:
        body = response.json()
    except ValueError:
        body = None
    return body if isinstance(body, dict) else {}


def _confirmation(request: ConstellationRequest, body: dict[str, Any]) -> str:
    text = f"Constellation created: {request.describe()}."
    constellation_id = body.get("id") or body.get("constellationId")
    if constellation_id:
        text += f" Reference: {constellation_id}."
    return text


async def create_constellation(
    candidate: CandidateRequest,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> ResolverOutcome:
    """Validate a candidate and, if it passes, create the constellation.

    Never raises for expected failures: validation problems and downstream
    errors both come back as a rejected outcome.
    """
    resolved = settings or get_settings()
    try:
        request = validate_request(candidate)
    except ConstellationValidationError as exc:
        logger.info("[DISPATCH] Rejected candidate %s: %s", candidate, exc.reason)
        return ResolverOutcome.rejected(exc.reason)

    if resolved.altitude_payload == "single" and len(set(request.altitudes)) > 1:
        reason = "This deployment supports a single altitude shared by all orbital planes."
        logger.info("[DISPATCH] Rejected candidate %s: %s", candidate, reason)
        return ResolverOutcome.rejected(reason)

    try:
        body = await dispatch(request, resolved, client=client)
    except DispatchError as exc:
        logger.warning("[DISPATCH] Creation failed: %s", exc)
        return ResolverOutcome.rejected(RETRY_GUIDANCE)

    logger.info("[DISPATCH] SUCCESS: %s", request.describe())
    return ResolverOutcome.created(_confirmation(request, body))
