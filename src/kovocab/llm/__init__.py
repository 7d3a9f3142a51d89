"""kovocab LLM: provider protocol, OpenAI backend and test mock."""

from kovocab.llm.mock import MockLLMProvider
from kovocab.llm.protocol import (
    LLMProvider,
    LLMResponse,
    Message,
    ResponseFormat,
    Role,
    TokenUsage,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Message",
    "ResponseFormat",
    "Role",
    "TokenUsage",
    "MockLLMProvider",
]
