"""Tests for MockLLMProvider."""

from __future__ import annotations

import pytest

from kovocab.core.errors import RateLimitedError
from kovocab.llm import LLMProvider, Message, MockLLMProvider, ResponseFormat


class TestMockLLMProvider:
    def test_satisfies_protocol(self):
        assert isinstance(MockLLMProvider(), LLMProvider)

    def test_default_response(self):
        assert MockLLMProvider(default_response='{"a": []}').complete([Message.user("x")]).content == '{"a": []}'

    def test_sequence_raises_exceptions_in_order(self):
        provider = MockLLMProvider(sequence=[RateLimitedError("x"), "second"])
        with pytest.raises(RateLimitedError):
            provider.complete([Message.user("x")])
        assert provider.complete([Message.user("x")]).content == "second"
        assert provider.complete([Message.user("x")]).content == "{}"

    def test_handler_sees_metadata(self):
        provider = MockLLMProvider(handler=lambda msgs, meta: meta["defRequestId"])
        result = provider.complete([Message.user("x")], metadata={"defRequestId": "r1"})
        assert result.content == "r1"

    def test_call_tracking(self):
        provider = MockLLMProvider()
        provider.complete(
            [Message.user("prompt")],
            "gpt-5",
            response_format=ResponseFormat("patrol_concerns", {}),
            metadata={"patrolRequestId": "r2"},
        )
        call = provider.calls[0]
        assert call["model"] == "gpt-5"
        assert call["response_format"] == "patrol_concerns"
        assert call["metadata"] == {"patrolRequestId": "r2"}
        assert provider.last_prompt == "prompt"

        provider.reset()
        assert provider.call_count == 0
