"""LLM Provider Protocol: the boundary every LLM-backed pipeline calls through.

Manifesto:
Definition generation, audit, correction and translation all send one
structured prompt per batch and expect one JSON object back.  This module
defines the ``LLMProvider`` protocol, message types, the structured-output
``ResponseFormat`` and the response model, so the OpenAI backend and the
test mock are interchangeable.

ARCHITECTURE
────────────
::

    LLMProvider (Protocol)
      ├── .complete(messages, model, *, response_format, metadata) → LLMResponse
      └── .models() → list[str]

    Message(role, content)  - chat message
    Role  - system | user | assistant
    ResponseFormat(name, schema)  - strict JSON-schema output contract
    TokenUsage(prompt, completion, total)
    LLMResponse(content, model, usage, metadata)

Related modules:
    openai_provider.py  - OpenAI Responses API backend
    mock.py  - MockLLMProvider for tests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message in a conversation."""

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.USER, content=content)


@dataclass(frozen=True)
class ResponseFormat:
    """Strict JSON-schema contract for the response body.

    Attributes:
        name: Schema name reported to the provider (``patrol_concerns``, ...)
        schema: JSON Schema of the top-level object
    """

    name: str
    schema: dict[str, Any]


@dataclass(frozen=True)
class TokenUsage:
    """Token usage statistics for an LLM call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class LLMResponse:
    """Response from an LLM provider.

    Attributes:
        content: Generated text (the raw JSON body for structured calls).
        model: Model identifier used.
        usage: Token usage statistics.
        metadata: Provider-specific metadata (response id, request id, ...).
    """

    content: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the response."""
        return {
            "content": self.content,
            "model": self.model,
            "usage": {
                "prompt_tokens": self.usage.prompt_tokens,
                "completion_tokens": self.usage.completion_tokens,
                "total_tokens": self.usage.total_tokens,
            },
            "metadata": self.metadata,
        }


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM backends.

    Implementations translate quota failures into
    :class:`~kovocab.core.errors.RateLimitedError` so that the retry policy
    can recognise them, and any other transport/API failure into
    :class:`~kovocab.core.errors.ExternalServiceError`.
    """

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        response_format: ResponseFormat | None = None,
        metadata: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion from messages.

        Parameters
        ----------
        messages
            Conversation history.
        model
            Model identifier (provider-specific).
        response_format
            Strict JSON-schema the output must follow.
        metadata
            Correlation tags stored with the request (e.g. ``patrolRequestId``).
        """
        ...

    def models(self) -> list[str]:
        """List available model identifiers."""
        ...
