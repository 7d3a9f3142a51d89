"""Tests for stamp and request-id helpers."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta, timezone

from kovocab.core.timestamps import from_iso8601, new_request_id, now_stamp, to_iso8601


class TestStamps:
    def test_millisecond_z_format(self):
        dt = datetime(2025, 1, 9, 12, 30, 0, 123456, tzinfo=UTC)
        assert to_iso8601(dt) == "2025-01-09T12:30:00.123Z"

    def test_naive_treated_as_utc(self):
        assert to_iso8601(datetime(2025, 1, 9)) == "2025-01-09T00:00:00.000Z"

    def test_converts_other_zones(self):
        kst = timezone(timedelta(hours=9))
        assert to_iso8601(datetime(2025, 1, 9, 9, tzinfo=kst)) == "2025-01-09T00:00:00.000Z"

    def test_parse_round_trip(self):
        stamp = "2025-01-09T12:30:00.123Z"
        assert to_iso8601(from_iso8601(stamp)) == stamp

    def test_now_stamp_shape(self):
        assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", now_stamp())


class TestRequestIds:
    def test_unique(self):
        assert len({new_request_id() for _ in range(100)}) == 100
