"""Shared test helpers (settings and transcript builders)."""

from __future__ import annotations

from mission42_server.config import Settings
from mission42_server.schemas import ConversationMessage

CONSTELLATION_API_URL = "http://constellation.test/api/constellations"


def make_settings(**overrides) -> Settings:
    """Build settings from explicit values so the local .env never leaks into tests."""
    values = {
        "GOOGLE_API_KEY": "test-key",
        "GEMINI_MODEL": "gemini-test",
        "CONSTELLATION_API_URL": CONSTELLATION_API_URL,
        "EXTRACTION_STRATEGY": "structured",
        "ALTITUDE_PAYLOAD": "per_plane",
        "MODEL_TIMEOUT_SECONDS": 5,
        "CREATION_TIMEOUT_SECONDS": 5,
        "SYSTEM_PROMPT": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def conversation(*contents: str) -> list[ConversationMessage]:
    """Alternate user/assistant turns, starting with the user."""
    return [
        ConversationMessage(role="user" if i % 2 == 0 else "assistant", content=content)
        for i, content in enumerate(contents)
    ]
