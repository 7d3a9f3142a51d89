"""
UTC timestamp and request-id helpers (stdlib-only).

Stamps written into the store (``createdAt``, ``llmCheckOn``) use
millisecond ISO-8601 with a ``Z`` suffix, e.g. ``2025-01-09T12:30:00.000Z``,
so that they sort lexicographically and stay stable across reruns.
"""

import uuid
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso8601(dt: datetime) -> str:
    """Format a datetime as millisecond ISO-8601 UTC with ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso8601(value: str) -> datetime:
    """Parse a stamp produced by :func:`to_iso8601`."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def now_stamp() -> str:
    """Current time as a store stamp."""
    return to_iso8601(utc_now())


def new_request_id() -> str:
    """Opaque identifier correlating one batch call with the entries it touched."""
    return str(uuid.uuid4())
