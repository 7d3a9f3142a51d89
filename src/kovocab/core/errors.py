"""
Structured error types for the kovocab enrichment pipelines.

Every failure raised by kovocab carries a category, a retryable flag and an
``ErrorContext`` so that the driver can decide between "back off and try
again" and "abort the run", and so that the operator gets enough context
(operation, request id, batch index) to replay or roll back a batch.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      KovocabError                            │
        │  (category, retryable, context, cause)                       │
        ├─────────────────────────────────────────────────────────────┤
        │  ConfigurationError    StoreNotFoundError   IngestionError   │
        │  (CONFIG)              (STORAGE)            (PARSE)          │
        │                                                              │
        │  RateLimitedError      ExternalServiceError                  │
        │  (NETWORK, retryable)  (NETWORK)                             │
        │                                                              │
        │  RetriesExhaustedError MalformedResponseError                │
        │  (NETWORK)             (PARSE)                               │
        │                                                              │
        │  ItemValidationError   InvalidTransitionError                │
        │  (VALIDATION)          (INTERNAL)                            │
        │                                                              │
        │  BatchFailedError  ─ wraps any fatal batch failure           │
        │  (PIPELINE)                                                  │
        └─────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Raise ItemValidationError out of the validator
    ✅ DO: Record it and drop the offending item

    ❌ DON'T: Swallow the original exception when translating vendor errors
    ✅ DO: Pass it as ``cause=``

Usage:
    from kovocab.core.errors import RateLimitedError

    try:
        client.analyze_syntax(request)
    except ResourceExhausted as e:
        raise RateLimitedError("NLP quota exhausted", cause=e)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    NETWORK = "NETWORK"           # External service, quota, transport
    STORAGE = "STORAGE"           # Store file missing or unwritable
    PARSE = "PARSE"               # Raw text or response body unparsable
    VALIDATION = "VALIDATION"     # Single item failed its schema
    CONFIG = "CONFIG"             # Missing credential or setting
    PIPELINE = "PIPELINE"         # Batch aborted
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        operation: Pipeline operation name (``define``, ``audit``, ...)
        request_id: Identifier of the external batch call
        batch_index: 1-based batch number within the run
        rank: Entry rank the error concerns
        path: File path involved
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    request_id: str | None = None
    batch_index: int | None = None
    rank: int | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "request_id", "batch_index", "rank", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class KovocabError(Exception):
    """
    Base exception for all kovocab errors.

    Subclasses set ``default_category`` and ``default_retryable``; callers may
    override either per instance.

    Examples:
        >>> error = KovocabError("Something went wrong")
        >>> error.retryable
        False
        >>> error.with_context(operation="audit", batch_index=3).context.batch_index
        3
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> KovocabError:
        """Add context fields fluently; unknown keys land in ``metadata``."""
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# =============================================================================
# CONFIGURATION / STORAGE / INGESTION
# =============================================================================


class ConfigurationError(KovocabError):
    """Required credential or setting is missing or invalid.

    Never retryable; raised before any work starts.
    """

    default_category = ErrorCategory.CONFIG

    def __init__(self, message: str, *, key: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.key = key


class StoreNotFoundError(KovocabError):
    """A durable store file does not exist."""

    default_category = ErrorCategory.STORAGE

    def __init__(self, path: str, message: str | None = None, **kwargs: Any):
        super().__init__(message or f"Store file not found: {path}", **kwargs)
        self.path = path
        self.context.path = path


class StoreCorruptError(KovocabError):
    """A store file exists but does not hold the expected JSON layout."""

    default_category = ErrorCategory.STORAGE


class IngestionError(KovocabError):
    """A raw frequency-list line does not match ``<rank>. <term>``."""

    default_category = ErrorCategory.PARSE


# =============================================================================
# EXTERNAL SERVICE ERRORS
# =============================================================================


class RateLimitedError(KovocabError):
    """The external service signalled quota / resource exhaustion."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class ExternalServiceError(KovocabError):
    """Any other external service failure; fatal for the batch."""

    default_category = ErrorCategory.NETWORK


class RetriesExhaustedError(KovocabError):
    """A retryable failure persisted past the retry budget.

    Distinct from the underlying error so callers can tell "gave up after N
    tries" from "failed immediately". The last error is chained.
    """

    default_category = ErrorCategory.NETWORK

    def __init__(self, attempts: int, last_error: Exception, **kwargs: Any):
        super().__init__(
            f"Gave up after {attempts} attempt(s): {last_error}",
            cause=last_error,
            **kwargs,
        )
        self.attempts = attempts
        self.last_error = last_error


class MalformedResponseError(KovocabError):
    """A response body is not JSON or lacks a required top-level field."""

    default_category = ErrorCategory.PARSE

    def __init__(self, message: str, *, raw: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.raw = raw


# =============================================================================
# VALIDATION / STATE
# =============================================================================


class ItemValidationError(KovocabError):
    """A single response array element failed validation.

    Recorded and dropped by the validator; never aborts a batch.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field_name: str,
        index: int,
        item: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.index = index
        self.item = item


class InvalidTransitionError(KovocabError):
    """A merge would move an entry along an edge the audit table forbids."""

    default_category = ErrorCategory.INTERNAL


# =============================================================================
# PIPELINE
# =============================================================================


class BatchFailedError(KovocabError):
    """A batch failed fatally; all earlier batches are already persisted."""

    default_category = ErrorCategory.PIPELINE

    def __init__(
        self,
        operation: str,
        batch_index: int,
        batch_count: int,
        request_id: str,
        cause: Exception,
    ):
        super().__init__(
            f"{operation}: batch {batch_index}/{batch_count} "
            f"(requestId: {request_id}) failed: {cause}",
            cause=cause,
            context=ErrorContext(
                operation=operation,
                request_id=request_id,
                batch_index=batch_index,
                metadata={"batch_count": batch_count},
            ),
        )
        self.operation = operation
        self.batch_index = batch_index
        self.batch_count = batch_count
        self.request_id = request_id
