"""kovocab execution: batching and resilience around external calls.

ARCHITECTURE
────────────
::

    chunk(items, size)            ─ order-preserving fixed-size groups
    RetryPolicy                   ─ exponential backoff on rate-limited errors
    MinimumDurationLimiter        ─ pad work to the per-minute quota
    gather_in_groups              ─ width-bounded asyncio fan-out + limiter

Retry and rate limiting are independent wrappers; pipelines compose them
around a single call site.
"""

from kovocab.execution.batching import chunk
from kovocab.execution.fanout import gather_in_groups
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy, invoke, is_rate_limited

__all__ = [
    "chunk",
    "gather_in_groups",
    "MinimumDurationLimiter",
    "RetryPolicy",
    "invoke",
    "is_rate_limited",
]
