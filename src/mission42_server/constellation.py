"""Constellation parameters and the domain validator.

Candidates come from model output (tool-call arguments or parsed reply text)
and are untrusted: every value is coerced and range-checked here before a
creation request is allowed to leave the server.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


MIN_SATELLITES = 1
MAX_SATELLITES = 60
MIN_PLANES = 1
MAX_PLANES = 10
# LEO band, kilometers
MIN_ALTITUDE_KM = 160.0
MAX_ALTITUDE_KM = 2000.0


class ConstellationValidationError(ValueError):
    """Raised when a candidate violates a constellation constraint."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ConstellationRequest:
    """Validated parameters, safe to send to the creation API."""

    num_satellites: int
    num_planes: int
    altitudes: tuple[float, ...]

    def describe(self) -> str:
        distinct = sorted(set(self.altitudes))
        if len(distinct) == 1:
            altitude_text = f"{_format_km(distinct[0])} km"
        else:
            altitude_text = "altitudes " + ", ".join(f"{_format_km(a)}" for a in self.altitudes) + " km"
        return (
            f"{self.num_satellites} satellites across {self.num_planes} orbital planes "
            f"at {altitude_text}"
        )


@dataclass(frozen=True)
class CandidateRequest:
    """Unvalidated parameters as recovered from model output."""

    num_satellites: Any
    num_planes: Any
    altitudes: Any
    call_id: str | None = None


def _format_km(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _coerce_count(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ConstellationValidationError(f"The number of {label} must be a whole number.")
    if isinstance(value, str):
        value = value.strip()
        try:
            value = float(value)
        except ValueError:
            raise ConstellationValidationError(
                f"The number of {label} must be a whole number."
            ) from None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ConstellationValidationError(f"The number of {label} must be a whole number.")
        value = int(value)
    if not isinstance(value, int):
        raise ConstellationValidationError(f"The number of {label} must be a whole number.")
    # Sub-1 counts are raised to 1 rather than rejected.
    return max(value, 1)


def _coerce_altitude(value: Any) -> float:
    if isinstance(value, bool):
        raise ConstellationValidationError("Each altitude must be a number of kilometers.")
    if isinstance(value, str):
        value = value.strip().lower().removesuffix("km").strip()
    try:
        altitude = float(value)
    except (TypeError, ValueError):
        raise ConstellationValidationError(
            "Each altitude must be a number of kilometers."
        ) from None
    if not math.isfinite(altitude):
        raise ConstellationValidationError("Each altitude must be a number of kilometers.")
    return altitude


def _coerce_altitudes(value: Any, num_planes: int) -> tuple[float, ...]:
    if value is None:
        raise ConstellationValidationError("An altitude in kilometers is required.")
    if isinstance(value, (list, tuple)):
        raw = list(value)
    else:
        raw = [value]
    if not raw:
        raise ConstellationValidationError("An altitude in kilometers is required.")

    altitudes = [_coerce_altitude(item) for item in raw]
    if len(altitudes) == 1:
        return tuple(altitudes * num_planes)
    if len(altitudes) != num_planes:
        raise ConstellationValidationError(
            f"Provide one altitude for all planes or exactly one per plane "
            f"({num_planes} expected, {len(altitudes)} given)."
        )
    return tuple(altitudes)


def validate_request(candidate: CandidateRequest) -> ConstellationRequest:
    """Clamp and range-check a candidate.

    Checks run in a fixed order (satellites, planes, altitudes) and the first
    violation raises ``ConstellationValidationError`` naming that constraint.
    A single altitude is broadcast to every plane before range-checking.
    """

    num_satellites = _coerce_count(candidate.num_satellites, "satellites")
    if num_satellites > MAX_SATELLITES:
        raise ConstellationValidationError(
            f"Number of satellites must be between {MIN_SATELLITES} and {MAX_SATELLITES} "
            f"(got {num_satellites})."
        )

    num_planes = _coerce_count(candidate.num_planes, "orbital planes")
    if num_planes > MAX_PLANES:
        raise ConstellationValidationError(
            f"Number of orbital planes must be between {MIN_PLANES} and {MAX_PLANES} "
            f"(got {num_planes})."
        )
    if num_planes > num_satellites:
        raise ConstellationValidationError(
            f"Number of orbital planes ({num_planes}) cannot exceed the number of "
            f"satellites ({num_satellites})."
        )

    altitudes = _coerce_altitudes(candidate.altitudes, num_planes)
    for altitude in altitudes:
        if not MIN_ALTITUDE_KM <= altitude <= MAX_ALTITUDE_KM:
            raise ConstellationValidationError(
                f"Altitude must be between {_format_km(MIN_ALTITUDE_KM)} and "
                f"{_format_km(MAX_ALTITUDE_KM)} km (got {_format_km(altitude)} km)."
            )

    return ConstellationRequest(
        num_satellites=num_satellites,
        num_planes=num_planes,
        altitudes=altitudes,
    )
