"""Tests for the kovocab error hierarchy."""

from __future__ import annotations

from kovocab.core.errors import (
    BatchFailedError,
    ConfigurationError,
    ErrorCategory,
    ExternalServiceError,
    ItemValidationError,
    KovocabError,
    MalformedResponseError,
    RateLimitedError,
    RetriesExhaustedError,
    StoreNotFoundError,
)


class TestKovocabError:
    def test_defaults(self):
        error = KovocabError("boom")
        assert error.message == "boom"
        assert error.category is ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_cause_is_chained(self):
        cause = ValueError("inner")
        error = KovocabError("outer", cause=cause)
        assert error.__cause__ is cause

    def test_with_context_known_and_unknown_keys(self):
        error = KovocabError("x").with_context(operation="audit", batch_index=3, line=7)
        assert error.context.operation == "audit"
        assert error.context.batch_index == 3
        assert error.context.metadata == {"line": 7}

    def test_to_dict(self):
        error = RateLimitedError("quota", cause=RuntimeError("429")).with_context(request_id="r1")
        data = error.to_dict()
        assert data["error_type"] == "RateLimitedError"
        assert data["category"] == "NETWORK"
        assert data["retryable"] is True
        assert data["context"] == {"request_id": "r1"}
        assert data["cause"] == "RuntimeError: 429"

    def test_override_retryable(self):
        assert ExternalServiceError("x", retryable=True).retryable is True


class TestSubclasses:
    def test_configuration_error_key(self):
        error = ConfigurationError("missing", key="OPENAI_API_KEY")
        assert error.key == "OPENAI_API_KEY"
        assert error.category is ErrorCategory.CONFIG

    def test_store_not_found_path(self):
        error = StoreNotFoundError("/tmp/x.json")
        assert "x.json" in error.message
        assert error.context.path == "/tmp/x.json"

    def test_retries_exhausted(self):
        last = RateLimitedError("still limited")
        error = RetriesExhaustedError(6, last)
        assert error.attempts == 6
        assert error.last_error is last
        assert error.__cause__ is last
        assert not error.retryable

    def test_malformed_keeps_raw(self):
        assert MalformedResponseError("bad", raw="<html>").raw == "<html>"

    def test_item_validation_fields(self):
        error = ItemValidationError("rank: missing", field_name="concerns", index=2, item={})
        assert (error.field_name, error.index, error.item) == ("concerns", 2, {})

    def test_batch_failed_message_names_batch_and_request(self):
        cause = MalformedResponseError("not JSON")
        error = BatchFailedError("audit", 3, 7, "req-9", cause)
        assert error.message == "audit: batch 3/7 (requestId: req-9) failed: not JSON"
        assert error.context.batch_index == 3
        assert error.context.request_id == "req-9"
        assert error.category is ErrorCategory.PIPELINE
        assert error.__cause__ is cause
