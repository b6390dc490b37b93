"""Tests for provider reply parsing, provider factories and the tier chain."""

import asyncio

import pytest

from famtrack.ai.factories import create_providers
from famtrack.ai.fallback import Tier, run_tiers
from famtrack.ai.providers import GeminiProvider, OpenAIProvider, parse_json_reply
from famtrack.domain.errors import ProviderError


class TestParseJsonReply:
    """Test extracting the JSON object from a model reply."""

    def test_plain_object(self):
        assert parse_json_reply('{"categories": ["a"]}', "gemini") == {"categories": ["a"]}

    def test_markdown_fenced(self):
        """Test a reply wrapped in a code fence."""
        reply = 'Aqui está:\n```json\n{"transactions": []}\n```'
        assert parse_json_reply(reply, "openai") == {"transactions": []}

    @pytest.mark.parametrize("reply", [None, "", "sem json aqui", "{not json}"])
    def test_unusable_reply(self, reply):
        """Test empty, missing and malformed JSON."""
        with pytest.raises(ProviderError):
            parse_json_reply(reply, "gemini")


class TestCreateProviders:
    """Test provider construction from the environment."""

    def test_no_keys(self):
        """Test tiers without keys are left out."""
        assert create_providers({}) == []

    def test_both_keys_in_order(self):
        """Test Gemini comes before OpenAI."""
        providers = create_providers(
            {"GOOGLE_GEMINI_API_KEY": "g-key", "OPENAI_API_KEY": "o-key"}
        )
        assert [type(p) for p in providers] == [GeminiProvider, OpenAIProvider]
        assert providers[0].model == "gemini-2.5-flash"
        assert providers[1].model == "gpt-4o-mini"

    def test_model_override(self):
        """Test model names come from the environment."""
        providers = create_providers(
            {"OPENAI_API_KEY": "o-key", "FAMTRACK_OPENAI_MODEL": "gpt-4.1"}
        )
        assert len(providers) == 1
        assert providers[0].model == "gpt-4.1"

    def test_invalid_timeout(self):
        """Test a non-numeric timeout is rejected."""
        with pytest.raises(ValueError, match="FAMTRACK_AI_TIMEOUT"):
            create_providers({"FAMTRACK_AI_TIMEOUT": "soon"})


class TestRunTiers:
    """Test the tiered fallback chain."""

    def test_first_success_wins(self):
        """Test later tiers are not attempted after a success."""
        calls = []

        async def first():
            calls.append("first")
            return "a"

        async def second():
            calls.append("second")
            return "b"

        result = asyncio.run(run_tiers([Tier("one", first), Tier("two", second)], lambda: "z"))
        assert result == "a"
        assert calls == ["first"]

    def test_failure_moves_to_next_tier(self):
        """Test a ProviderError escalates to the next tier."""

        async def failing():
            raise ProviderError("timeout")

        async def working():
            return "b"

        result = asyncio.run(run_tiers([Tier("one", failing), Tier("two", working)], lambda: "z"))
        assert result == "b"

    def test_all_fail_uses_fallback(self):
        """Test the fallback runs once every tier failed."""

        async def failing():
            raise ProviderError("bad json")

        result = asyncio.run(run_tiers([Tier("one", failing), Tier("two", failing)], lambda: "z"))
        assert result == "z"

    def test_no_tiers(self):
        """Test an empty chain goes straight to the fallback."""
        assert asyncio.run(run_tiers([], lambda: [])) == []

    def test_other_errors_propagate(self):
        """Test errors other than ProviderError are not swallowed."""

        async def broken():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            asyncio.run(run_tiers([Tier("one", broken)], lambda: "z"))
