"""Google Cloud Natural Language backend for :class:`SyntaxAnalyzer`."""

from __future__ import annotations

from typing import Any

from google.api_core import exceptions as gexc
from google.cloud import language_v1
from google.oauth2 import service_account

from kovocab.core.errors import ExternalServiceError, RateLimitedError
from kovocab.nlp.protocol import SyntaxToken


class GoogleSyntaxAnalyzer:
    """``analyzeSyntax`` over UTF-8 plain text.

    Parameters
    ----------
    service_account_info
        Parsed service-account JSON (``client_email``, ``private_key``, ...).
    project_id
        Quota project; defaults to the service account's.
    client
        Pre-built ``LanguageServiceClient`` (tests inject a stub here).
    """

    def __init__(
        self,
        service_account_info: dict[str, Any] | None = None,
        project_id: str | None = None,
        *,
        client: Any | None = None,
    ) -> None:
        if client is None:
            credentials = service_account.Credentials.from_service_account_info(service_account_info)
            client_options = {"quota_project_id": project_id} if project_id else None
            client = language_v1.LanguageServiceClient(
                credentials=credentials, client_options=client_options
            )
        self._client = client

    def analyze(self, text: str, language: str | None = None) -> list[SyntaxToken]:
        document = language_v1.Document(
            content=text,
            type_=language_v1.Document.Type.PLAIN_TEXT,
            language=language or "",
        )
        try:
            response = self._client.analyze_syntax(
                request={"document": document, "encoding_type": language_v1.EncodingType.UTF8}
            )
        except gexc.ResourceExhausted as e:
            raise RateLimitedError(f"Google NLP quota exhausted: {e}", cause=e) from e
        except gexc.GoogleAPIError as e:
            raise ExternalServiceError(f"Google NLP request failed: {e}", cause=e) from e

        tokens = []
        for token in response.tokens:
            surface = token.text.content or ""
            if not surface:
                continue
            tag = token.part_of_speech.tag
            tokens.append(
                SyntaxToken(
                    surface=surface,
                    lemma=token.lemma or "",
                    pos=getattr(tag, "name", str(tag)),
                )
            )
        return tokens
