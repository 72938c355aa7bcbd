"""Tests for the provider roster and generation requests."""

import pytest

from launchpact.llm import (
    DEFAULT_ROSTER,
    GenerationRequest,
    ModelDescriptor,
    ProviderRoster,
    build_wire_request,
)
from launchpact.llm.request import (
    DEFAULT_STRUCTURED_MAX_TOKENS,
    DEFAULT_TEXT_MAX_TOKENS,
    JSON_ONLY_INSTRUCTION,
    ChatMessage,
)


class TestProviderRoster:
    def test_sorted_by_tier_with_stable_ties(self):
        roster = ProviderRoster(
            [
                ModelDescriptor("c", tier=3),
                ModelDescriptor("a1", tier=1),
                ModelDescriptor("b1", tier=2),
                ModelDescriptor("a2", tier=1),
                ModelDescriptor("b2", tier=2),
            ]
        )
        assert roster.model_ids == ["a1", "a2", "b1", "b2", "c"]

    def test_from_model_ids_uses_position_as_tier(self):
        roster = ProviderRoster.from_model_ids(["x/one:free", "y/two"])
        assert [d.tier for d in roster] == [1, 2]
        assert roster[0].supports_strict_json_mode is False
        assert roster[1].supports_strict_json_mode is True

    def test_default_roster_puts_paid_models_last(self):
        assert DEFAULT_ROSTER.primary.model_id == "openrouter/auto:free"
        tiers = [d.tier for d in DEFAULT_ROSTER]
        assert tiers == sorted(tiers)
        assert all(d.supports_strict_json_mode for d in DEFAULT_ROSTER if d.tier == 4)

    def test_empty_roster_has_no_primary(self):
        assert ProviderRoster([]).primary is None


class TestGenerationRequest:
    def test_structured_request_gets_instruction_in_new_system_turn(self):
        request = GenerationRequest.create(
            [{"role": "user", "content": "Plan it"}], wants_structured_output=True
        )
        assert request.messages[0] == ChatMessage("system", JSON_ONLY_INSTRUCTION)
        assert request.max_output_tokens == DEFAULT_STRUCTURED_MAX_TOKENS

    def test_structured_request_extends_existing_system_turn(self):
        request = GenerationRequest.create(
            [
                {"role": "system", "content": "You are a planner."},
                {"role": "user", "content": "Plan it"},
            ],
            wants_structured_output=True,
        )
        system = request.messages[0]
        assert system.content.startswith("You are a planner.")
        assert JSON_ONLY_INSTRUCTION in system.content
        assert len(request.messages) == 2

    def test_text_request_left_untouched(self):
        request = GenerationRequest.create([{"role": "user", "content": "hi"}])
        assert request.wire_messages() == [{"role": "user", "content": "hi"}]
        assert request.max_output_tokens == DEFAULT_TEXT_MAX_TOKENS

    def test_structured_request_without_instruction_rejected(self):
        with pytest.raises(ValueError):
            GenerationRequest(
                messages=(ChatMessage("user", "hi"),), wants_structured_output=True
            )

    def test_empty_request_rejected(self):
        with pytest.raises(ValueError):
            GenerationRequest.create([])

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            GenerationRequest.create([{"role": "tool", "content": "x"}])


class TestWireRequest:
    def test_json_flag_only_for_strict_providers(self):
        request = GenerationRequest.create(
            [{"role": "user", "content": "x"}], wants_structured_output=True
        )
        strict = build_wire_request(ModelDescriptor("paid", 1, True), request)
        lenient = build_wire_request(ModelDescriptor("free", 1, False), request)

        assert strict["response_format"] == {"type": "json_object"}
        assert "response_format" not in lenient
        assert strict["messages"] == lenient["messages"]

    def test_no_json_flag_for_text_requests(self):
        request = GenerationRequest.create([{"role": "user", "content": "x"}])
        wire = build_wire_request(ModelDescriptor("paid", 1, True), request)
        assert "response_format" not in wire
        assert wire["max_tokens"] == DEFAULT_TEXT_MAX_TOKENS
