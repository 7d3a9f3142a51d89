"""
Audit state machine.

Audit status is derived from an entry's fields rather than stored:

    MISSING     def is null
    UNAUDITED   def present, llmCheckOn absent
    CLEAN       def present, llmCheckOn present, no concerns
    FLAGGED     def present, llmCheckOn present, concerns open

Transitions by pass::

    MISSING   ──define──▶ UNAUDITED
    UNAUDITED ──audit───▶ CLEAN | FLAGGED
    CLEAN     ──audit───▶ CLEAN | FLAGGED      (operator re-run)
    FLAGGED   ──audit───▶ CLEAN | FLAGGED
    FLAGGED   ──correct─▶ CLEAN | MISSING
    UNAUDITED | CLEAN | FLAGGED ──rollback──▶ MISSING

Nothing ever returns to UNAUDITED except a fresh definition on a MISSING
entry. Every pass's pending-selection predicate is expressed in terms of
these statuses, so "what still needs doing" and "what a pass may change"
come from the same table.
"""

from __future__ import annotations

from enum import Enum

from kovocab.core.errors import InvalidTransitionError
from kovocab.core.models import DEFINABLE_POS, Entry


class AuditStatus(str, Enum):
    MISSING = "missing"
    UNAUDITED = "unaudited"
    CLEAN = "clean"
    FLAGGED = "flagged"


class Pass(str, Enum):
    """The passes allowed to change an entry's audit status."""

    DEFINE = "define"
    AUDIT = "audit"
    CORRECT = "correct"
    ROLLBACK = "rollback"


_S = AuditStatus

TRANSITIONS: dict[tuple[AuditStatus, Pass], frozenset[AuditStatus]] = {
    (_S.MISSING, Pass.DEFINE): frozenset({_S.UNAUDITED}),
    (_S.UNAUDITED, Pass.AUDIT): frozenset({_S.CLEAN, _S.FLAGGED}),
    (_S.CLEAN, Pass.AUDIT): frozenset({_S.CLEAN, _S.FLAGGED}),
    (_S.FLAGGED, Pass.AUDIT): frozenset({_S.CLEAN, _S.FLAGGED}),
    (_S.FLAGGED, Pass.CORRECT): frozenset({_S.CLEAN, _S.MISSING}),
    (_S.UNAUDITED, Pass.ROLLBACK): frozenset({_S.MISSING}),
    (_S.CLEAN, Pass.ROLLBACK): frozenset({_S.MISSING}),
    (_S.FLAGGED, Pass.ROLLBACK): frozenset({_S.MISSING}),
}


def audit_status(entry: Entry) -> AuditStatus:
    """Derive the audit status of ``entry``."""
    if entry.definition is None:
        return AuditStatus.MISSING
    if entry.llm_check_on is None:
        return AuditStatus.UNAUDITED
    if entry.concerns:
        return AuditStatus.FLAGGED
    return AuditStatus.CLEAN


def can_transition(before: AuditStatus, after: AuditStatus, via: Pass) -> bool:
    return after in TRANSITIONS.get((before, via), frozenset())


def check_transition(before: AuditStatus, after: AuditStatus, via: Pass, rank: int | None = None) -> None:
    """Raise ``InvalidTransitionError`` unless ``before -> after`` is allowed for ``via``."""
    if not can_transition(before, after, via):
        raise InvalidTransitionError(
            f"{via.value}: {before.value} -> {after.value} is not allowed"
        ).with_context(rank=rank, operation=via.value)


# ── Pending-selection predicates ─────────────────────────────────────────


def needs_definition(entry: Entry) -> bool:
    return entry.pos in DEFINABLE_POS and audit_status(entry) is AuditStatus.MISSING


def needs_audit(entry: Entry) -> bool:
    return audit_status(entry) is AuditStatus.UNAUDITED


def needs_correction(entry: Entry) -> bool:
    return audit_status(entry) is AuditStatus.FLAGGED


def needs_translation(entry: Entry) -> bool:
    """Checked by the audit but not yet translated.

    Flagged entries are translated too; a later ``replace`` or ``null``
    correction drops the gloss with the old text.
    """
    return audit_status(entry) in (AuditStatus.CLEAN, AuditStatus.FLAGGED) and entry.eng is None
