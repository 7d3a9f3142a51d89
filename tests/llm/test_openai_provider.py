"""Tests for OpenAIProvider against a stubbed client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from kovocab.core.errors import ExternalServiceError, MalformedResponseError, RateLimitedError
from kovocab.llm.openai_provider import OpenAIProvider
from kovocab.llm.protocol import Message, ResponseFormat

FORMAT = ResponseFormat(name="definitions", schema={"type": "object"})


def _response(text: str | None = '{"definitions": []}'):
    return SimpleNamespace(
        id="resp_1",
        model="gpt-5.1",
        output_text=text,
        usage=SimpleNamespace(input_tokens=12, output_tokens=3, total_tokens=15),
    )


def _http_response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", "https://api.openai.com/v1/responses"))


@pytest.fixture
def client():
    stub = MagicMock()
    stub.responses.create.return_value = _response()
    return stub


class TestOpenAIProvider:
    def test_request_shape(self, client):
        provider = OpenAIProvider(client=client)
        provider.complete(
            [Message.user("prompt")],
            "gpt-5",
            response_format=FORMAT,
            metadata={"patrolRequestId": "r1"},
        )

        kwargs = client.responses.create.call_args.kwargs
        assert kwargs["model"] == "gpt-5"
        assert kwargs["input"] == [{"role": "user", "content": "prompt"}]
        assert kwargs["metadata"] == {"patrolRequestId": "r1"}
        assert kwargs["text"]["format"] == {
            "type": "json_schema",
            "name": "definitions",
            "strict": True,
            "schema": {"type": "object"},
        }

    def test_default_model(self, client):
        OpenAIProvider(client=client, default_model="gpt-5.1").complete([Message.user("p")])
        assert client.responses.create.call_args.kwargs["model"] == "gpt-5.1"

    def test_response_mapping(self, client):
        result = OpenAIProvider(client=client).complete([Message.user("p")], response_format=FORMAT)
        assert result.content == '{"definitions": []}'
        assert result.usage.total_tokens == 15
        assert result.metadata["response_id"] == "resp_1"

    def test_rate_limit_translated(self, client):
        client.responses.create.side_effect = openai.RateLimitError(
            "slow down", response=_http_response(429), body=None
        )
        with pytest.raises(RateLimitedError):
            OpenAIProvider(client=client).complete([Message.user("p")])

    def test_other_api_errors(self, client):
        client.responses.create.side_effect = openai.BadRequestError(
            "bad schema", response=_http_response(400), body=None
        )
        with pytest.raises(ExternalServiceError):
            OpenAIProvider(client=client).complete([Message.user("p")])

    def test_empty_output_is_malformed(self, client):
        client.responses.create.return_value = _response(text="")
        with pytest.raises(MalformedResponseError) as exc:
            OpenAIProvider(client=client).complete(
                [Message.user("p")], metadata={"defRequestId": "r9"}
            )
        assert exc.value.context.metadata == {"defRequestId": "r9"}
