"""Bounded asyncio fan-out in rate-limited sub-groups.

A batch of independent calls is issued ``width`` at a time with
``asyncio.gather``.  The whole sub-group must finish before the limiter pads
its duration and the next sub-group starts, so at most ``width`` calls are
ever in flight.  Results come back in input order.

Example::

    results = await gather_in_groups(
        terms,
        lambda t: policy.invoke_async(lemmatize_one, t),
        width=10,
        limiter=MinimumDurationLimiter(540),
    )
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from kovocab.core.logging import get_logger
from kovocab.execution.batching import chunk
from kovocab.execution.rate_limit import MinimumDurationLimiter

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger(__name__)


async def gather_in_groups(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    width: int,
    limiter: MinimumDurationLimiter | None = None,
) -> list[R]:
    """Run ``worker`` over ``items`` at most ``width`` at a time.

    The first failure in a sub-group propagates once that sub-group has
    settled; later sub-groups are not started.
    """
    results: list[R] = []
    for group in chunk(items, width):
        started = limiter.clock() if limiter else 0.0
        outcomes = await asyncio.gather(*(worker(item) for item in group), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        results.extend(outcomes)  # type: ignore[arg-type]
        if limiter:
            await limiter.enforce_async(len(group), started)
    return results
