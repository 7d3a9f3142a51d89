"""Progress counts over the definition store."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from kovocab.core.models import Store
from kovocab.pipelines.audit import AuditStatus, audit_status


def percent(part: int, total: int) -> float:
    """Share of ``total`` as a percentage rounded to one decimal."""
    if total == 0:
        return 0.0
    return round(part / total * 100, 1)


@dataclass
class StoreStats:
    """Headline counts.

    ``ok`` and ``needs_corrections`` split the defined entries by whether
    concerns are open; ``unchecked`` counts defined entries never audited and
    overlaps ``ok``.
    """

    total: int = 0
    missing_def: int = 0
    needs_corrections: int = 0
    ok: int = 0
    unchecked: int = 0
    translated: int = 0
    by_status: dict[str, int] = field(default_factory=dict)

    def percentages(self) -> dict[str, float]:
        return {
            "missingDef": percent(self.missing_def, self.total),
            "needsCorrections": percent(self.needs_corrections, self.total),
            "ok": percent(self.ok, self.total),
            "unchecked": percent(self.unchecked, self.total),
        }

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "missingDef": self.missing_def,
            "needsCorrections": self.needs_corrections,
            "ok": self.ok,
            "unchecked": self.unchecked,
            "translated": self.translated,
            "percent": self.percentages(),
            "byStatus": dict(self.by_status),
        }


def compute_stats(store: Store) -> StoreStats:
    stats = StoreStats(total=len(store))
    statuses: Counter[str] = Counter()
    for entry in store.values():
        status = audit_status(entry)
        statuses[status.value] += 1
        if status is AuditStatus.MISSING:
            stats.missing_def += 1
            continue
        if entry.llm_check_on is None:
            stats.unchecked += 1
        if entry.concerns:
            stats.needs_corrections += 1
        else:
            stats.ok += 1
        if entry.eng is not None:
            stats.translated += 1
    stats.by_status = {s.value: statuses.get(s.value, 0) for s in AuditStatus}
    return stats
