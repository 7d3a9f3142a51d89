"""One-time construction of credentialed service clients.

Clients are built once at startup from :class:`KovocabSettings` and passed
into the pipelines as explicit dependencies, together with the retry policy
and rate limiters the settings describe.  Credentials are validated here,
so a missing key fails with ``ConfigurationError`` before any batch runs.
Vendor SDKs are imported lazily so commands that need only one service do not
load the other.
"""

from __future__ import annotations

from kovocab.core.settings import KovocabSettings
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy
from kovocab.llm.protocol import LLMProvider
from kovocab.nlp.protocol import SyntaxAnalyzer


def build_llm_provider(settings: KovocabSettings) -> LLMProvider:
    """OpenAI provider for the LLM-backed pipelines."""
    api_key = settings.require_openai_key()

    from kovocab.llm.openai_provider import OpenAIProvider

    return OpenAIProvider(api_key=api_key, default_model=settings.definition_model)


def build_syntax_analyzer(settings: KovocabSettings) -> SyntaxAnalyzer:
    """Google Cloud NL analyzer for lemmatization."""
    info = settings.gcp_service_account()

    from kovocab.nlp.google import GoogleSyntaxAnalyzer

    return GoogleSyntaxAnalyzer(service_account_info=info, project_id=settings.gcp_project_id)


def build_retry_policy(settings: KovocabSettings) -> RetryPolicy:
    return RetryPolicy(
        max_retries=settings.max_retries, base_backoff=settings.base_backoff_seconds
    )


def build_nlp_limiter(settings: KovocabSettings) -> MinimumDurationLimiter:
    return MinimumDurationLimiter(settings.nlp_max_requests_per_minute)


def build_llm_limiter(settings: KovocabSettings) -> MinimumDurationLimiter | None:
    """``None`` unless an LLM request quota is configured."""
    if settings.llm_max_requests_per_minute is None:
        return None
    return MinimumDurationLimiter(settings.llm_max_requests_per_minute)
