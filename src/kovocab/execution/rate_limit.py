"""Rate limiting by padding the wall-clock duration of a unit of work.

Manifesto:
External NLP/LLM endpoints enforce per-minute quotas.  Instead of a token
bucket shared across threads, kovocab caps aggregate throughput the simple
way: after a group of ``n`` calls that started at ``started_at``, wait until
the group has taken at least ``ceil(n / rpm * 60000)`` milliseconds.  If the
calls were slower than that, no wait happens.

ARCHITECTURE
────────────
::

    MinimumDurationLimiter(max_requests_per_minute)
      ├── .minimum_duration(n)       ─ seconds n calls must take
      ├── .enforce(n, started_at)    ─ blocking pad (time.sleep)
      └── .enforce_async(n, started_at) ─ asyncio pad (asyncio.sleep)

    ``started_at`` is a reading of the limiter's own clock
    (``time.monotonic`` unless injected).

Related modules:
    retry.py  - backoff on rate-limited failures
    fanout.py  - bounded-concurrency groups that call ``enforce_async``

Example::

    limiter = MinimumDurationLimiter(max_requests_per_minute=540)
    started = limiter.clock()
    results = [call(x) for x in group]
    limiter.enforce(len(group), started)
"""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from kovocab.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class MinimumDurationLimiter:
    """Pads each unit of work to the duration its call count allows.

    Attributes:
        max_requests_per_minute: Aggregate quota to stay under
        clock: Monotonic clock returning seconds
        sleep: Blocking sleep
        async_sleep: Awaitable sleep
    """

    max_requests_per_minute: int
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    async_sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_requests_per_minute <= 0:
            raise ValueError("max_requests_per_minute must be positive")

    def minimum_duration(self, n: int) -> float:
        """Seconds that ``n`` calls must span (whole milliseconds, rounded up)."""
        if n <= 0:
            return 0.0
        return math.ceil(n / self.max_requests_per_minute * 60_000) / 1000

    def remaining(self, n: int, started_at: float) -> float:
        """Seconds still to wait for ``n`` calls begun at ``started_at``."""
        elapsed = self.clock() - started_at
        return max(0.0, self.minimum_duration(n) - elapsed)

    def enforce(self, n: int, started_at: float) -> float:
        """Block until ``n`` calls' minimum duration has passed; return seconds slept."""
        wait = self.remaining(n, started_at)
        if wait > 0:
            logger.debug("rate_limit.pad", calls=n, wait_seconds=round(wait, 3))
            self.sleep(wait)
        return wait

    async def enforce_async(self, n: int, started_at: float) -> float:
        """Async variant of :meth:`enforce`."""
        wait = self.remaining(n, started_at)
        if wait > 0:
            logger.debug("rate_limit.pad", calls=n, wait_seconds=round(wait, 3))
            await self.async_sleep(wait)
        return wait
