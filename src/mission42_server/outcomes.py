from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

OutcomeKind = Literal["reply", "created", "rejected"]


@dataclass(frozen=True)
class ResolverOutcome:
    """Result of one resolver turn (or of one tool call within it)."""

    kind: OutcomeKind
    text: str

    @classmethod
    def reply(cls, text: str) -> "ResolverOutcome":
        return cls(kind="reply", text=text)

    @classmethod
    def created(cls, confirmation_text: str) -> "ResolverOutcome":
        return cls(kind="created", text=confirmation_text)

    @classmethod
    def rejected(cls, reason: str) -> "ResolverOutcome":
        return cls(kind="rejected", text=reason)

    @property
    def ok(self) -> bool:
        return self.kind != "rejected"
