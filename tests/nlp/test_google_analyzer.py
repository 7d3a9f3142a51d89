"""Tests for GoogleSyntaxAnalyzer against a stubbed client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gexc
from google.cloud import language_v1

from kovocab.core.errors import ExternalServiceError, RateLimitedError
from kovocab.execution.retry import is_rate_limited
from kovocab.nlp.google import GoogleSyntaxAnalyzer
from kovocab.nlp.protocol import SyntaxToken


def _token(surface: str, lemma: str, tag: str):
    return SimpleNamespace(
        text=SimpleNamespace(content=surface),
        lemma=lemma,
        part_of_speech=SimpleNamespace(tag=language_v1.PartOfSpeech.Tag[tag]),
    )


@pytest.fixture
def client():
    stub = MagicMock()
    stub.analyze_syntax.return_value = SimpleNamespace(
        tokens=[_token("했다", "하다", "VERB"), _token("", "", "X"), _token(".", ".", "PUNCT")]
    )
    return stub


class TestGoogleSyntaxAnalyzer:
    def test_tokens_mapped(self, client):
        tokens = GoogleSyntaxAnalyzer(client=client).analyze("했다.")
        assert tokens == [
            SyntaxToken("했다", "하다", "VERB"),
            SyntaxToken(".", ".", "PUNCT"),
        ]

    def test_request_is_utf8_plain_text(self, client):
        GoogleSyntaxAnalyzer(client=client).analyze("뜻이다", language="ko")
        request = client.analyze_syntax.call_args.kwargs["request"]
        assert request["encoding_type"] == language_v1.EncodingType.UTF8
        assert request["document"].content == "뜻이다"
        assert request["document"].language == "ko"

    def test_resource_exhausted_is_rate_limited(self, client):
        client.analyze_syntax.side_effect = gexc.ResourceExhausted("quota")
        with pytest.raises(RateLimitedError) as exc:
            GoogleSyntaxAnalyzer(client=client).analyze("것")
        assert is_rate_limited(exc.value)

    def test_other_errors(self, client):
        client.analyze_syntax.side_effect = gexc.InvalidArgument("bad")
        with pytest.raises(ExternalServiceError):
            GoogleSyntaxAnalyzer(client=client).analyze("것")
