"""
Merging validated results into the definition store.

Each pass has its own merge rule; all of them mutate matching entries in
place, never remove an entry, and never touch ``rank`` or ``term``. Every
status change is checked against the audit transition table.

Rules
─────
definitions   Fill ``def`` on entries whose ``def`` is null; copy lemma/pos
              from the lemma source unless the entry was audited before;
              stamp ``defRequestId`` + ``createdAt``;
              reset audit state (new text has never been audited).
corrections   ``replace`` sets ``def`` (re-stamping provenance), ``null``
              clears ``def`` and ``defRequestId``, ``keep`` leaves ``def``.
              All three clear ``concerns`` and stamp ``llmCheckOn``.
audit         For *every* rank in the batch: stamp ``llmCheckOn`` and replace
              ``concerns`` with exactly that rank's findings (possibly none);
              apply any POS fix. Re-applying the same result is a no-op.
translations  Set ``eng`` only where it is absent.
rollback      Clear ``def`` / ``defRequestId`` / ``concerns`` for entries
              produced by the given request ids.

When ``def`` is replaced or cleared the English gloss of the old text is
dropped too.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import TypeVar

from kovocab.core.logging import get_logger
from kovocab.core.models import Concern, LemmaEntry, Store
from kovocab.pipelines.audit import AuditStatus, Pass, audit_status, check_transition
from kovocab.pipelines.schemas import (
    ConcernItem,
    CorrectionItem,
    DefinitionItem,
    PosFixItem,
    ResponseItem,
    TranslationItem,
)

logger = get_logger(__name__)

ItemT = TypeVar("ItemT", bound=ResponseItem)


def first_per_rank(items: Iterable[ItemT]) -> list[ItemT]:
    """Drop repeated ranks, keeping the first occurrence."""
    seen: set[int] = set()
    unique = []
    for item in items:
        if item.rank in seen:
            logger.warning("merge.duplicate_rank", rank=item.rank)
            continue
        seen.add(item.rank)
        unique.append(item)
    return unique


def apply_definitions(
    store: Store,
    items: Sequence[DefinitionItem],
    request_id: str,
    timestamp: str,
    sources: Mapping[int, LemmaEntry] | None = None,
) -> int:
    """Merge generated definitions; returns the number of entries filled."""
    applied = 0
    for item in first_per_rank(items):
        entry = store.get(item.rank)
        if entry is None or entry.definition is not None:
            continue
        before = audit_status(entry)

        # an audited entry keeps its pos; it may carry an audit POS fix
        source = (sources or {}).get(item.rank)
        if source is not None and entry.llm_check_on is None:
            entry.lemma = source.lemma
            entry.pos = source.pos
        entry.definition = item.definition
        entry.def_request_id = request_id
        entry.created_at = timestamp
        entry.llm_check_on = None
        entry.concerns = []
        entry.eng = None

        check_transition(before, audit_status(entry), Pass.DEFINE, rank=item.rank)
        applied += 1
    return applied


def apply_corrections(
    store: Store,
    items: Sequence[CorrectionItem],
    request_id: str,
    timestamp: str,
) -> int:
    """Merge correction actions; returns the number of entries resolved."""
    applied = 0
    for item in first_per_rank(items):
        entry = store.get(item.rank)
        if entry is None:
            continue
        before = audit_status(entry)
        if before is not AuditStatus.FLAGGED:
            logger.warning("merge.correction_not_flagged", rank=item.rank, status=before.value)
            continue

        if item.action == "replace":
            entry.definition = item.definition.strip()
            entry.def_request_id = request_id
            entry.created_at = timestamp
            entry.eng = None
        elif item.action == "null":
            entry.definition = None
            entry.def_request_id = ""
            entry.created_at = timestamp
            entry.eng = None
        # "keep": definition stays as it is

        entry.concerns = []
        entry.llm_check_on = timestamp

        check_transition(before, audit_status(entry), Pass.CORRECT, rank=item.rank)
        applied += 1
    return applied


def apply_audit(
    store: Store,
    batch_ranks: Sequence[int],
    concerns: Sequence[ConcernItem],
    pos_fixes: Sequence[PosFixItem],
    timestamp: str,
) -> int:
    """Stamp every audited rank and replace its concerns; returns entries stamped."""
    by_rank: dict[int, list[Concern]] = defaultdict(list)
    for c in concerns:
        by_rank[c.rank].append(Concern(rank=c.rank, key=c.key, why=c.why))
    pos_by_rank = {fix.rank: fix.new_pos for fix in first_per_rank(pos_fixes)}

    stamped = 0
    for rank in batch_ranks:
        entry = store.get(rank)
        if entry is None:
            continue
        before = audit_status(entry)

        entry.llm_check_on = timestamp
        entry.concerns = list(by_rank.get(rank, []))
        fixed_pos = pos_by_rank.get(rank)
        if fixed_pos:
            entry.pos = fixed_pos

        check_transition(before, audit_status(entry), Pass.AUDIT, rank=rank)
        stamped += 1
    return stamped


def apply_translations(store: Store, items: Sequence[TranslationItem]) -> int:
    """Set missing English glosses; returns the number set."""
    applied = 0
    for item in first_per_rank(items):
        entry = store.get(item.rank)
        if entry is None or entry.eng is not None:
            continue
        entry.eng = item.eng
        applied += 1
    return applied


def rollback_by_request_ids(store: Store, request_ids: Collection[str], timestamp: str) -> int:
    """Clear definitions produced by ``request_ids``; returns the number cleared."""
    targets = set(request_ids)
    cleared = 0
    for rank, entry in store.items():
        if entry.definition is None or entry.def_request_id not in targets:
            continue
        before = audit_status(entry)

        entry.definition = None
        entry.def_request_id = ""
        entry.created_at = timestamp
        entry.concerns = []
        entry.eng = None

        check_transition(before, audit_status(entry), Pass.ROLLBACK, rank=rank)
        cleared += 1
    return cleared
