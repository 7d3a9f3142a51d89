"""Tests for gather_in_groups (bounded asyncio fan-out)."""

from __future__ import annotations

import asyncio

import pytest

from kovocab.execution.fanout import gather_in_groups


class TestGatherInGroups:
    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        async def worker(x: int) -> int:
            # later items finish first
            await asyncio.sleep(0.001 * (5 - x))
            return x * 10

        assert await gather_in_groups([1, 2, 3, 4], worker, width=4) == [10, 20, 30, 40]

    @pytest.mark.asyncio
    async def test_at_most_width_in_flight(self):
        in_flight = 0
        peak = 0

        async def worker(x: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return x

        await gather_in_groups(list(range(25)), worker, width=10)
        assert peak == 10

    @pytest.mark.asyncio
    async def test_limiter_applied_per_group(self, limiter, sleeps):
        async def worker(x: int) -> int:
            return x

        await gather_in_groups(list(range(25)), worker, width=10, limiter=limiter)
        # groups of 10, 10, 5 at 540 rpm
        assert sleeps.calls == [
            pytest.approx(1.112),
            pytest.approx(1.112),
            pytest.approx(0.556),
        ]

    @pytest.mark.asyncio
    async def test_failure_stops_later_groups(self):
        seen = []

        async def worker(x: int) -> int:
            seen.append(x)
            if x == 2:
                raise RuntimeError("boom")
            return x

        with pytest.raises(RuntimeError, match="boom"):
            await gather_in_groups([0, 1, 2, 3, 4, 5], worker, width=3)
        assert sorted(seen) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_empty(self):
        async def worker(x):
            return x

        assert await gather_in_groups([], worker, width=3) == []
