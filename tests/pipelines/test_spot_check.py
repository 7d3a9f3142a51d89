"""Tests for request-id sampling and rollback."""

from __future__ import annotations

import pytest

from conftest import clean, defined, flagged, make_entry
from kovocab.core.errors import StoreNotFoundError
from kovocab.pipelines.audit import AuditStatus, audit_status
from kovocab.pipelines.spot_check import delete_requests, group_by_request, sample_requests


@pytest.fixture
def batches():
    return {
        1: defined(1, term="라", request_id="req-b"),
        2: defined(2, term="가", request_id="req-b"),
        3: clean(3, term="다", request_id="req-b"),
        4: flagged(4, term="나", request_id="req-b"),
        5: defined(5, term="마", request_id="req-a"),
        6: make_entry(6),
    }


class TestSampling:
    def test_groups_only_defined_entries(self, batches):
        grouped = group_by_request(batches)
        assert set(grouped) == {"req-a", "req-b"}
        assert [e.rank for e in grouped["req-b"]] == [1, 2, 3, 4]

    def test_samples_first_three_by_term(self, batches):
        samples = sample_requests(batches)
        assert [s.request_id for s in samples] == ["req-a", "req-b"]
        b = samples[1]
        assert b.total == 4
        assert [e.term for e in b.entries] == ["가", "나", "다"]

    def test_filter_by_ids(self, batches):
        samples = sample_requests(batches, ["req-a", "unknown"])
        assert [s.request_id for s in samples] == ["req-a"]

    def test_to_dict(self, batches):
        data = sample_requests(batches, ["req-a"])[0].to_dict()
        assert data == {
            "requestId": "req-a",
            "total": 1,
            "samples": [{"rank": 5, "term": "마", "def": "뜻 5."}],
        }


class TestDelete:
    def test_rolls_back_and_persists(self, record_store, batches):
        record_store.persist(batches)

        cleared = delete_requests(record_store, ["req-b"])

        store = record_store.load()
        assert cleared == 4
        assert all(audit_status(store[r]) is AuditStatus.MISSING for r in (1, 2, 3, 4))
        assert store[5].definition == "뜻 5."

    def test_nothing_matched_leaves_file(self, record_store, batches):
        record_store.persist(batches)
        before = record_store.path.read_bytes()
        assert delete_requests(record_store, ["nope"]) == 0
        assert record_store.path.read_bytes() == before

    def test_missing_store(self, record_store):
        with pytest.raises(StoreNotFoundError):
            delete_requests(record_store, ["req-a"])
