"""Tests for system prompt composition and prompt assembly."""

from __future__ import annotations

import pytest

from mission42_server.prompts import assemble_prompt, build_system_prompt, get_system_prompt
from tests.helpers import conversation


class TestAssemblePrompt:
    """Tests for assemble_prompt."""

    def test_prefixes_system_and_renders_roles(self):
        messages = conversation("Hi", "Hello! How many satellites?", "20")

        prompt = assemble_prompt("SYSTEM", messages)

        assert prompt == "SYSTEM\nuser: Hi\nassistant: Hello! How many satellites?\nuser: 20"

    def test_same_transcript_same_prompt(self):
        messages = conversation("20 satellites", "Planes?", "5 at 500 km")

        assert assemble_prompt("SYSTEM", messages) == assemble_prompt("SYSTEM", messages)

    def test_preserves_order(self):
        prompt = assemble_prompt("S", conversation("first", "second", "third"))

        assert prompt.index("first") < prompt.index("second") < prompt.index("third")

    def test_empty_system_prompt_is_omitted(self):
        assert assemble_prompt("", conversation("Hi")) == "user: Hi"

    def test_no_messages(self):
        assert assemble_prompt("SYSTEM", []) == "SYSTEM"


class TestSystemPrompt:
    """Tests for the composed system prompt."""

    def test_structured_prompt_mentions_tool(self):
        prompt = build_system_prompt("structured")

        assert "Mission42" in prompt
        assert "createConstellation" in prompt
        assert "[[CREATE_CONSTELLATION]]" not in prompt

    def test_pattern_prompt_mentions_marker(self):
        prompt = build_system_prompt("pattern")

        assert "[[CREATE_CONSTELLATION]]" in prompt
        assert "orbital planes at altitude" in prompt
        assert "createConstellation" not in prompt

    def test_prompt_states_limits(self):
        prompt = build_system_prompt("structured")

        assert "60" in prompt
        assert "10" in prompt
        assert "160 km" in prompt and "2000 km" in prompt

    def test_override_wins(self):
        assert get_system_prompt("pattern", override="  Custom prompt  ") == "Custom prompt"

    def test_blank_override_is_ignored(self):
        assert get_system_prompt("structured", override="   ") == build_system_prompt("structured")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            build_system_prompt("telepathy")
