"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from mission42_server.config import Settings
from mission42_server.schemas import ConversationMessage
from tests.helpers import make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def pattern_settings() -> Settings:
    return make_settings(EXTRACTION_STRATEGY="pattern")


@pytest.fixture
def confirmed_transcript() -> list[ConversationMessage]:
    """A conversation where the user supplied everything and confirmed."""
    return [
        ConversationMessage(role="user", content="I want 20 satellites"),
        ConversationMessage(role="assistant", content="How many orbital planes, and at what altitude?"),
        ConversationMessage(role="user", content="across 5 planes at 500 km"),
        ConversationMessage(
            role="assistant",
            content="20 satellites across 5 orbital planes at 500 km. Shall I create it?",
        ),
        ConversationMessage(role="user", content="yes, generate it"),
    ]


@pytest.fixture
def unconfirmed_transcript() -> list[ConversationMessage]:
    return [ConversationMessage(role="user", content="I want 20 satellites and 5 planes at 500km")]
