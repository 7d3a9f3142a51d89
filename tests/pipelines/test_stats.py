"""Tests for store progress counts."""

from __future__ import annotations

from conftest import clean
from kovocab.pipelines.stats import compute_stats, percent


def test_percent():
    assert percent(1, 3) == 33.3
    assert percent(0, 0) == 0.0


class TestComputeStats:
    def test_sample_store(self, sample_store):
        stats = compute_stats(sample_store)

        assert stats.total == 5
        assert stats.missing_def == 2
        assert stats.needs_corrections == 1
        assert stats.ok == 2
        assert stats.unchecked == 1
        assert stats.translated == 0
        assert stats.by_status == {"missing": 2, "unaudited": 1, "clean": 1, "flagged": 1}

    def test_to_dict(self, sample_store):
        sample_store[3] = clean(3, eng="There is.")
        data = compute_stats(sample_store).to_dict()

        assert data["translated"] == 1
        assert data["percent"] == {
            "missingDef": 40.0,
            "needsCorrections": 20.0,
            "ok": 40.0,
            "unchecked": 20.0,
        }
        assert set(data) == {
            "total", "missingDef", "needsCorrections", "ok", "unchecked",
            "translated", "percent", "byStatus",
        }

    def test_empty_store(self):
        data = compute_stats({}).to_dict()
        assert data["total"] == 0
        assert data["percent"]["ok"] == 0.0
