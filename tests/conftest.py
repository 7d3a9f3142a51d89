"""
Shared pytest fixtures for kovocab tests.

This module provides:
- Settings rooted in a temporary data directory
- A fake monotonic clock and recorded (non-waiting) sleeps
- Sample lemma rows and definition entries in every audit state
- Store helpers that write fixtures to ``tmp_path``

Usage:
    def test_something(settings, record_store, sample_store):
        record_store.persist(sample_store)
        ...
"""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from kovocab.core.models import Concern, Entry, LemmaEntry, Store, TermEntry
from kovocab.core.settings import KovocabSettings
from kovocab.core.store import LemmaStore, RecordStore, TermStore
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy

STAMP = "2025-01-09T12:00:00.000Z"


# =============================================================================
# Time
# =============================================================================


class FakeClock:
    """Monotonic clock advanced only by recorded sleeps or ``advance``."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Records requested sleeps; advances ``clock`` instead of waiting."""

    def __init__(self, clock: FakeClock | None = None):
        self.calls: list[float] = []
        self.clock = clock

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.clock is not None:
            self.clock.advance(seconds)

    async def async_sleep(self, seconds: float) -> None:
        self(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps(clock: FakeClock) -> SleepRecorder:
    return SleepRecorder(clock)


@pytest.fixture
def retry_policy(sleeps: SleepRecorder) -> RetryPolicy:
    """Default budget (5 retries, 1s base) without real waiting."""
    return RetryPolicy(max_retries=5, base_backoff=1.0, sleep=sleeps, async_sleep=sleeps.async_sleep)


@pytest.fixture
def limiter(clock: FakeClock, sleeps: SleepRecorder) -> MinimumDurationLimiter:
    return MinimumDurationLimiter(540, clock=clock, sleep=sleeps, async_sleep=sleeps.async_sleep)


# =============================================================================
# Settings / stores
# =============================================================================


@pytest.fixture
def settings(tmp_path: Path) -> KovocabSettings:
    return KovocabSettings(
        data_dir=tmp_path / "data",
        raw_dir=tmp_path / "raw",
        openai_api_key="sk-test",
        gcp_json_creds=None,
    )


@pytest.fixture
def record_store(settings: KovocabSettings) -> RecordStore:
    return RecordStore(settings.definitions_path)


@pytest.fixture
def lemma_store(settings: KovocabSettings) -> LemmaStore:
    return LemmaStore(settings.lemmas_path)


@pytest.fixture
def term_store(settings: KovocabSettings) -> TermStore:
    return TermStore(settings.terms_path)


# =============================================================================
# Sample data
# =============================================================================


def make_entry(rank: int, term: str = "", pos: str = "NOUN", **fields) -> Entry:
    return Entry(rank=rank, term=term or f"단어{rank}", pos=pos, **fields)


def defined(rank: int, request_id: str = "req-a", **fields) -> Entry:
    """An entry with a definition, unaudited unless fields say otherwise."""
    fields.setdefault("definition", f"뜻 {rank}.")
    return make_entry(rank, def_request_id=request_id, created_at=STAMP, **fields)


def flagged(rank: int, why: str = "unrelated", **fields) -> Entry:
    return defined(
        rank,
        llm_check_on=STAMP,
        concerns=[Concern(rank=rank, key="def", why=why)],
        **fields,
    )


def clean(rank: int, **fields) -> Entry:
    return defined(rank, llm_check_on=STAMP, **fields)


@pytest.fixture
def terms() -> list[TermEntry]:
    return [
        TermEntry(1, "것"),
        TermEntry(2, "하다"),
        TermEntry(3, "있다"),
        TermEntry(4, "그"),
        TermEntry(5, "."),
    ]


@pytest.fixture
def lemma_rows() -> list[LemmaEntry]:
    return [
        LemmaEntry(1, "것", "NOUN"),
        LemmaEntry(2, "하다", "VERB"),
        LemmaEntry(3, "있다", "ADJ"),
        LemmaEntry(4, "그", "DET"),
        LemmaEntry(5, ".", "PUNCT"),
    ]


@pytest.fixture
def sample_store() -> Store:
    """One entry per audit status plus a non-definable placeholder."""
    return {
        1: make_entry(1, "것"),
        2: defined(2, term="하다", pos="VERB"),
        3: clean(3, term="있다", pos="ADJ"),
        4: flagged(4, term="그", pos="DET"),
        5: make_entry(5, ".", pos="PUNCT"),
    }


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep structlog defaults between tests (the CLI reconfigures it)."""
    yield
    structlog.reset_defaults()
