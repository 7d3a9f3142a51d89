"""Mock LLM Provider: deterministic provider for testing.

Manifesto:
Testing the batch pipelines requires a provider that returns predictable
JSON bodies without network calls, can fail on demand (to exercise retry and
abort paths), and records what it was asked.

ARCHITECTURE
────────────
::

    MockLLMProvider
      ├── .complete(messages) → LLMResponse (handler, sequence or default)
      ├── .calls              → list of all calls made
      └── .call_count         → total calls

    Configuration (checked in order):
      handler  - callable(messages, metadata) → str
      sequence  - list of str / Exception, consumed per call
      default_response  - text returned otherwise

Example::

    provider = MockLLMProvider(sequence=[
        RateLimitedError("slow down"),
        '{"definitions": [{"rank": 1, "def": "..."}]}',
    ])
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from kovocab.llm.protocol import LLMResponse, Message, ResponseFormat, TokenUsage


@dataclass
class MockLLMProvider:
    """Deterministic LLM provider for testing.

    Attributes:
        default_response: Text returned when nothing else applies.
        sequence: Ordered responses; an ``Exception`` entry is raised instead.
        handler: Callable computing the response from the call.
        model_name: Fake model name for responses.
    """

    default_response: str = "{}"
    sequence: list[str | Exception] = field(default_factory=list)
    handler: Callable[[list[Message], dict[str, str]], str] | None = None
    model_name: str = "mock-model-v1"

    calls: list[dict[str, Any]] = field(default_factory=list, repr=False)
    _sequence_index: int = field(default=0, repr=False)

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        response_format: ResponseFormat | None = None,
        metadata: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        effective_model = model or self.model_name
        self.calls.append({
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "model": effective_model,
            "response_format": response_format.name if response_format else None,
            "metadata": dict(metadata or {}),
            "kwargs": kwargs,
        })

        content = self._resolve_content(messages, metadata or {})
        prompt_tokens = max(1, sum(len(m.content) for m in messages) // 4)
        completion_tokens = max(1, len(content) // 4)
        return LLMResponse(
            content=content,
            model=effective_model,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            metadata={"provider": "mock"},
        )

    def models(self) -> list[str]:
        return [self.model_name]

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_prompt(self) -> str:
        """Content of the last user message of the latest call."""
        if not self.calls:
            return ""
        return self.calls[-1]["messages"][-1]["content"]

    def reset(self) -> None:
        self.calls.clear()
        self._sequence_index = 0

    def _resolve_content(self, messages: list[Message], metadata: dict[str, str]) -> str:
        if self.handler is not None:
            return self.handler(messages, metadata)

        if self._sequence_index < len(self.sequence):
            item = self.sequence[self._sequence_index]
            self._sequence_index += 1
            if isinstance(item, Exception):
                raise item
            return item

        return self.default_response
