"""Retry with exponential backoff for external-service calls.

Only failures the ``is_retryable`` hook accepts are retried; everything else
propagates on the first attempt. When the retry budget runs out the caller
gets a :class:`~kovocab.core.errors.RetriesExhaustedError` chaining the last
failure, never the bare underlying error.

Example:
    >>> policy = RetryPolicy(max_retries=5, base_backoff=1.0)
    >>> [policy.next_delay(a) for a in range(4)]
    [1.0, 2.0, 4.0, 8.0]
    >>> tokens = policy.invoke(lambda: analyzer.analyze("가다"))
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from kovocab.core.errors import RateLimitedError, RetriesExhaustedError
from kovocab.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

GRPC_RESOURCE_EXHAUSTED = 8
HTTP_TOO_MANY_REQUESTS = 429


def is_rate_limited(error: BaseException) -> bool:
    """Default retry classifier: quota / resource-exhausted failures only.

    Adapters translate vendor errors into :class:`RateLimitedError`; foreign
    errors that expose a gRPC or HTTP status code are recognised too.
    """
    if isinstance(error, RateLimitedError):
        return True
    if _status_number(getattr(error, "grpc_status_code", None)) == GRPC_RESOURCE_EXHAUSTED:
        return True
    code = getattr(error, "code", None)
    if callable(code):
        # grpc.RpcError exposes code() returning a StatusCode
        return _status_number(code()) == GRPC_RESOURCE_EXHAUSTED
    return code in (GRPC_RESOURCE_EXHAUSTED, HTTP_TOO_MANY_REQUESTS)


def _status_number(status: Any) -> int | None:
    """Numeric part of a grpc ``StatusCode`` (its value is ``(int, str)``)."""
    value = getattr(status, "value", None)
    if isinstance(value, tuple) and value:
        return value[0]
    return None


@dataclass
class RetryPolicy:
    """Exponential backoff wrapper around a single call site.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_backoff: Delay in seconds before the first retry
        multiplier: Growth factor per retry
        is_retryable: Classifier deciding whether a failure may be retried
        sleep: Blocking sleep used by :meth:`invoke`
        async_sleep: Awaitable sleep used by :meth:`invoke_async`
        on_retry: Optional callback ``(attempt, error, delay)`` before each wait
    """

    max_retries: int = 5
    base_backoff: float = 1.0
    multiplier: float = 2.0
    is_retryable: Callable[[BaseException], bool] = is_rate_limited
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    async_sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)
    on_retry: Callable[[int, BaseException, float], None] | None = field(default=None, repr=False)

    def next_delay(self, attempt: int) -> float:
        """Delay before retrying after zero-based ``attempt`` failed."""
        return self.base_backoff * (self.multiplier ** attempt)

    def _should_retry(self, attempt: int, error: Exception) -> bool:
        if not self.is_retryable(error):
            return False
        if attempt >= self.max_retries:
            raise RetriesExhaustedError(attempt + 1, error) from error
        return True

    def _announce(self, attempt: int, error: Exception, delay: float) -> None:
        logger.warning(
            "retry.backoff",
            attempt=attempt + 1,
            max_attempts=self.max_retries + 1,
            delay_seconds=delay,
            error=str(error),
        )
        if self.on_retry:
            self.on_retry(attempt + 1, error, delay)

    def invoke(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``operation`` with retries.

        Raises:
            RetriesExhaustedError: a retryable failure outlived the budget.
            Exception: any non-retryable failure, unchanged, on first sight.
        """
        attempt = 0
        while True:
            try:
                return operation(*args, **kwargs)
            except Exception as e:
                if not self._should_retry(attempt, e):
                    raise
                delay = self.next_delay(attempt)
                self._announce(attempt, e, delay)
                self.sleep(delay)
                attempt += 1

    async def invoke_async(
        self, operation: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Async variant of :meth:`invoke`."""
        attempt = 0
        while True:
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                if not self._should_retry(attempt, e):
                    raise
                delay = self.next_delay(attempt)
                self._announce(attempt, e, delay)
                await self.async_sleep(delay)
                attempt += 1


def invoke(
    operation: Callable[[], T],
    is_retryable: Callable[[BaseException], bool] = is_rate_limited,
    max_retries: int = 5,
    base_backoff: float = 1.0,
) -> T:
    """One-shot form of :meth:`RetryPolicy.invoke`."""
    return RetryPolicy(
        max_retries=max_retries, base_backoff=base_backoff, is_retryable=is_retryable
    ).invoke(operation)
