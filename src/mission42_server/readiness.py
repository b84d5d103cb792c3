"""Decide whether the conversation is ready for constellation creation.

The gate re-derives readiness from the transcript on every turn; no session
state is kept. It only looks at a bounded window of recent messages.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from .schemas import ConversationMessage

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 6

CONFIRMATION_TERMS = (
    "yes",
    "generate",
    "proceed",
    "create",
    "go ahead",
    "make it",
    "do it",
    "start",
    "confirm",
    "build",
)

_DIGIT = re.compile(r"\d")
_SATELLITES = re.compile(r"satellite")
_PLANES = re.compile(r"plane|orbital")
_ALTITUDE = re.compile(r"altitude|km|height")
# Whole words only, with plain -s/-d/-ed endings: "confirmed" and "generated"
# count, "eyes", "restart", "yesterday" and "starting" do not.
_CONFIRMATION = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in CONFIRMATION_TERMS) + r")(?:s|d|ed)?\b"
)


@dataclass(frozen=True)
class ReadinessSignals:
    has_digit: bool
    mentions_satellites: bool
    mentions_planes: bool
    mentions_altitude: bool
    confirmed: bool

    @property
    def has_parameters(self) -> bool:
        return self.has_digit and (
            self.mentions_satellites or self.mentions_planes or self.mentions_altitude
        )

    @property
    def ready(self) -> bool:
        return self.has_parameters and self.confirmed


def collect_signals(messages: Sequence[ConversationMessage], window: int = DEFAULT_WINDOW) -> ReadinessSignals:
    recent = messages[-window:] if window > 0 else []
    text = " ".join(message.content for message in recent).lower()
    return ReadinessSignals(
        has_digit=bool(_DIGIT.search(text)),
        mentions_satellites=bool(_SATELLITES.search(text)),
        mentions_planes=bool(_PLANES.search(text)),
        mentions_altitude=bool(_ALTITUDE.search(text)),
        confirmed=bool(_CONFIRMATION.search(text)),
    )


def is_ready(messages: Sequence[ConversationMessage], window: int = DEFAULT_WINDOW) -> bool:
    """Return True when recent messages carry parameters and a confirmation."""

    signals = collect_signals(messages, window)
    logger.debug(
        "[READINESS] digit=%s satellites=%s planes=%s altitude=%s confirmed=%s -> ready=%s",
        signals.has_digit,
        signals.mentions_satellites,
        signals.mentions_planes,
        signals.mentions_altitude,
        signals.confirmed,
        signals.ready,
    )
    return signals.ready
