"""OpenAI backend for :class:`~kovocab.llm.protocol.LLMProvider`.

Uses the Responses API with a strict ``json_schema`` text format, so the
output text is the JSON body the validator parses.  The SDK's own retries are
disabled; backoff is owned by :class:`~kovocab.execution.retry.RetryPolicy`.
"""

from __future__ import annotations

from typing import Any

import openai

from kovocab.core.errors import ExternalServiceError, MalformedResponseError, RateLimitedError
from kovocab.core.logging import get_logger
from kovocab.llm.protocol import LLMResponse, Message, ResponseFormat, TokenUsage

logger = get_logger(__name__)


class OpenAIProvider:
    """LLM provider backed by ``openai.OpenAI``.

    Parameters
    ----------
    api_key
        OpenAI API key.
    default_model
        Model used when ``complete`` is called without one.
    client
        Pre-built client (tests inject a stub here).
    """

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "gpt-5.1",
        *,
        client: Any | None = None,
        timeout: float = 600.0,
    ) -> None:
        self._client = client or openai.OpenAI(api_key=api_key, max_retries=0, timeout=timeout)
        self.default_model = default_model

    def complete(
        self,
        messages: list[Message],
        model: str | None = None,
        *,
        response_format: ResponseFormat | None = None,
        metadata: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        effective_model = model or self.default_model
        request: dict[str, Any] = {
            "model": effective_model,
            "input": [{"role": m.role.value, "content": m.content} for m in messages],
        }
        if metadata:
            request["metadata"] = metadata
        if response_format is not None:
            request["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": response_format.name,
                    "strict": True,
                    "schema": response_format.schema,
                },
                "verbosity": "low",
            }
        request.update(kwargs)

        try:
            response = self._client.responses.create(**request)
        except openai.RateLimitError as e:
            raise RateLimitedError(f"OpenAI rate limit: {e}", cause=e) from e
        except openai.APIError as e:
            raise ExternalServiceError(f"OpenAI request failed: {e}", cause=e) from e

        content = getattr(response, "output_text", None)
        if not content:
            raise MalformedResponseError(
                f"No output_text in response {getattr(response, 'id', '?')}"
            ).with_context(**(metadata or {}))

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            model=getattr(response, "model", effective_model),
            usage=TokenUsage(
                prompt_tokens=getattr(usage, "input_tokens", 0) or 0,
                completion_tokens=getattr(usage, "output_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            ),
            metadata={"provider": "openai", "response_id": getattr(response, "id", None)},
        )

    def models(self) -> list[str]:
        return [self.default_model]
