"""Runtime settings for kovocab.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    Batch sizes, model names, quotas and file locations all live here so the
    pipelines never read ``os.environ`` themselves.

    - **Pydantic validation:** Type-checked at startup, not mid-run
    - **Environment-driven:** ``KOVOCAB_*`` variables and a ``.env`` file
    - **Conventional credential names:** ``OPENAI_API_KEY``,
      ``GCP_JSON_CREDS``, ``GOOGLE_CLOUD_PROJECT``
    - **Fail early:** missing credentials raise ``ConfigurationError``
      before the first batch

Examples:
    >>> settings = KovocabSettings(data_dir="/tmp/vocab")
    >>> settings.definitions_path.name
    '2-definitions.json'
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from kovocab.core.errors import ConfigurationError


class KovocabSettings(BaseSettings):
    """Settings shared by every pipeline and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="KOVOCAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Path("data")
    raw_dir: Path = Path("raw")
    terms_file: str = "0-terms.json"
    lemmas_file: str = "1-lemmas.json"
    definitions_file: str = "2-definitions.json"
    def_lemmas_file: str = "definition-lemmas.json"
    def_lemmas_filtered_file: str = "definition-lemmas-filtered.json"

    # ── Credentials ──────────────────────────────────────────────
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "KOVOCAB_OPENAI_API_KEY"),
    )
    gcp_json_creds: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GCP_JSON_CREDS", "KOVOCAB_GCP_JSON_CREDS"),
    )
    google_cloud_project: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_CLOUD_PROJECT", "KOVOCAB_GOOGLE_CLOUD_PROJECT"),
    )

    # ── Models ───────────────────────────────────────────────────
    definition_model: str = "gpt-5.1"
    audit_model: str = "gpt-5"
    correction_model: str = "gpt-5.1"
    translation_model: str = "gpt-5.1"

    # ── Batching & quotas ────────────────────────────────────────
    lemma_batch_size: int = Field(default=100, gt=0)
    definition_batch_size: int = Field(default=50, gt=0)
    audit_batch_size: int = Field(default=10, gt=0)
    correction_batch_size: int = Field(default=5, gt=0)
    translation_batch_size: int = Field(default=100, gt=0)
    def_lemmas_per_request: int = Field(default=100, gt=0)
    lemma_concurrency: int = Field(default=10, gt=0)
    nlp_max_requests_per_minute: int = Field(default=540, gt=0)  # 600 rpm quota minus headroom
    llm_max_requests_per_minute: int | None = Field(default=None, gt=0)
    max_retries: int = Field(default=5, ge=0)
    base_backoff_seconds: float = Field(default=1.0, ge=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "console"

    # ── Derived paths ────────────────────────────────────────────

    @property
    def terms_path(self) -> Path:
        return self.data_dir / self.terms_file

    @property
    def lemmas_path(self) -> Path:
        return self.data_dir / self.lemmas_file

    @property
    def definitions_path(self) -> Path:
        return self.data_dir / self.definitions_file

    @property
    def def_lemmas_path(self) -> Path:
        return self.data_dir / self.def_lemmas_file

    @property
    def def_lemmas_filtered_path(self) -> Path:
        return self.data_dir / self.def_lemmas_filtered_file

    # ── Credential accessors ─────────────────────────────────────

    def require_openai_key(self) -> str:
        """Return the OpenAI API key or raise ``ConfigurationError``."""
        if self.openai_api_key is None or not self.openai_api_key.get_secret_value():
            raise ConfigurationError(
                "Missing required environment variable: OPENAI_API_KEY",
                key="OPENAI_API_KEY",
            )
        return self.openai_api_key.get_secret_value()

    def gcp_service_account(self) -> dict[str, Any]:
        """Parse ``GCP_JSON_CREDS`` into a service-account mapping.

        Raises:
            ConfigurationError: variable unset, not JSON, or missing
                ``client_email`` / ``private_key``.
        """
        if self.gcp_json_creds is None or not self.gcp_json_creds.get_secret_value():
            raise ConfigurationError(
                "Set GCP_JSON_CREDS to a JSON-stringified service account to use Google NLP.",
                key="GCP_JSON_CREDS",
            )
        try:
            info = json.loads(self.gcp_json_creds.get_secret_value())
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                "GCP_JSON_CREDS is not valid JSON.", key="GCP_JSON_CREDS", cause=e
            ) from e
        if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
            raise ConfigurationError(
                "GCP_JSON_CREDS is present but missing client_email or private_key.",
                key="GCP_JSON_CREDS",
            )
        return info

    @property
    def gcp_project_id(self) -> str | None:
        """Project from the service account, else ``GOOGLE_CLOUD_PROJECT``."""
        if self.gcp_json_creds is not None:
            try:
                info = json.loads(self.gcp_json_creds.get_secret_value())
            except json.JSONDecodeError:
                info = {}
            if isinstance(info, dict) and info.get("project_id"):
                return info["project_id"]
        return self.google_cloud_project


def get_settings(**overrides: Any) -> KovocabSettings:
    """Build settings from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: a value fails validation.
    """
    clean = {k: v for k, v in overrides.items() if v is not None}
    try:
        return KovocabSettings(**clean)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}", cause=e) from e
