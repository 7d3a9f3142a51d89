"""Spot-checking definitions by the batch call that produced them.

Sampling groups defined entries by ``defRequestId`` so a reviewer can eyeball
a few definitions from each batch; deleting rolls back every definition a
bad batch produced, after which ``define`` regenerates them.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection
from dataclasses import dataclass, field

from kovocab.core.logging import get_logger
from kovocab.core.models import Entry, Store
from kovocab.core.store import RecordStore
from kovocab.core.timestamps import now_stamp
from kovocab.pipelines.merge import rollback_by_request_ids

logger = get_logger(__name__)

SAMPLE_SIZE = 3


@dataclass
class RequestSample:
    request_id: str
    entries: list[Entry] = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "requestId": self.request_id,
            "total": self.total,
            "samples": [{"rank": e.rank, "term": e.term, "def": e.definition} for e in self.entries],
        }


def group_by_request(store: Store) -> dict[str, list[Entry]]:
    grouped: dict[str, list[Entry]] = defaultdict(list)
    for _, entry in sorted(store.items()):
        if entry.definition and entry.def_request_id:
            grouped[entry.def_request_id].append(entry)
    return grouped


def sample_requests(
    store: Store, request_ids: Collection[str] | None = None, size: int = SAMPLE_SIZE
) -> list[RequestSample]:
    """First ``size`` entries by term for each request id, ids in sorted order."""
    grouped = group_by_request(store)
    wanted = set(request_ids or ())
    samples = []
    for request_id in sorted(grouped):
        if wanted and request_id not in wanted:
            continue
        entries = sorted(grouped[request_id], key=lambda e: e.term)
        samples.append(RequestSample(request_id, entries[:size], total=len(entries)))
    return samples


def delete_requests(record_store: RecordStore, request_ids: Collection[str]) -> int:
    """Clear every definition produced by ``request_ids`` and persist."""
    store = record_store.load()
    cleared = rollback_by_request_ids(store, request_ids, now_stamp())
    if cleared:
        record_store.persist(store)
    logger.info("spot_check.deleted", cleared=cleared, requests=len(set(request_ids)))
    return cleared
