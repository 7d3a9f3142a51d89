"""
The LLM-backed batch operations.

An operation bundles what differs between passes; the
:class:`~kovocab.pipelines.driver.PipelineDriver` supplies everything else
(batching, retry, rate limit, validation, persistence, logging).

    operation      pending when                       shape             batch
    ─────────      ─────────────────────────────      ──────────────    ─────
    define         POS definable and def is null      definitions        50
    audit          def present, never audited         patrol_concerns    10
    correct        concerns open                      apply_corrections   5
    translate      audited, eng absent                eng_translations  100
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from kovocab.core.models import Concern, Entry, LemmaEntry, Store
from kovocab.core.store import ensure_all_keys_present
from kovocab.pipelines import audit, merge, prompts
from kovocab.pipelines.schemas import (
    AUDIT_SHAPE,
    CORRECTIONS_SHAPE,
    DEFINITIONS_SHAPE,
    TRANSLATIONS_SHAPE,
    ResponseShape,
)
from kovocab.pipelines.validation import ParsedResponse


class BatchOperation(ABC):
    """One pass over the definition store.

    Attributes:
        name: Operation name used in logs and errors
        shape: Expected response contract
        metadata_key: Request-metadata key carrying the batch request id
        allow_missing_store: Treat an absent store as empty (first run)
    """

    name: str
    shape: ResponseShape
    metadata_key: str
    allow_missing_store: bool = False

    def __init__(self, batch_size: int, model: str | None = None):
        if batch_size <= 0:
            raise ValueError(f"{self.name}: batch_size must be positive")
        self.batch_size = batch_size
        self.model = model

    def prepare(self, store: Store) -> bool:
        """Adjust the store before selection; return True if it changed."""
        return False

    @abstractmethod
    def is_pending(self, entry: Entry) -> bool:
        ...

    def select_pending(self, store: Store) -> list[Entry]:
        return [entry for _, entry in sorted(store.items()) if self.is_pending(entry)]

    @abstractmethod
    def render(self, batch: Sequence[Entry]) -> str:
        ...

    @abstractmethod
    def merge(
        self,
        store: Store,
        batch: Sequence[Entry],
        parsed: ParsedResponse,
        request_id: str,
        timestamp: str,
    ) -> int:
        ...

    def summarize(self, parsed: ParsedResponse) -> dict[str, int]:
        """Counts reported in the batch-complete log line."""
        return {field: len(items) for field, items in parsed.items.items()}


class GenerateDefinitions(BatchOperation):
    """Definition generation for definable terms without a definition.

    The lemma rows are the source of truth for which ranks exist: missing
    ranks are back-filled as placeholders before selection, and lemma/pos are
    copied from them when a definition lands.
    """

    name = "define"
    shape = DEFINITIONS_SHAPE
    metadata_key = "defRequestId"
    allow_missing_store = True

    def __init__(self, sources: Iterable[LemmaEntry], batch_size: int = 50, model: str | None = None):
        super().__init__(batch_size, model)
        self.sources = {s.rank: s for s in sources}

    def prepare(self, store: Store) -> bool:
        return ensure_all_keys_present(store, self.sources.values()) > 0

    def is_pending(self, entry: Entry) -> bool:
        return audit.needs_definition(entry)

    def render(self, batch: Sequence[Entry]) -> str:
        return prompts.render_definition_batch(batch)

    def merge(self, store, batch, parsed, request_id, timestamp) -> int:
        return merge.apply_definitions(
            store, parsed["definitions"], request_id, timestamp, sources=self.sources
        )


class AuditEntries(BatchOperation):
    """Automated audit ("patrol") of definitions never checked before."""

    name = "audit"
    shape = AUDIT_SHAPE
    metadata_key = "patrolRequestId"

    def __init__(self, batch_size: int = 10, model: str | None = None):
        super().__init__(batch_size, model)
        self.found: list[Concern] = []

    def is_pending(self, entry: Entry) -> bool:
        return audit.needs_audit(entry)

    def render(self, batch: Sequence[Entry]) -> str:
        return prompts.render_audit_batch(batch)

    def merge(self, store, batch, parsed, request_id, timestamp) -> int:
        stamped = merge.apply_audit(
            store,
            [e.rank for e in batch],
            parsed["concerns"],
            parsed["pos_fixes"],
            timestamp,
        )
        for rank in (e.rank for e in batch):
            self.found.extend(store[rank].concerns)
        return stamped


class CorrectEntries(BatchOperation):
    """Resolve open concerns: replace, keep, or null the definition."""

    name = "correct"
    shape = CORRECTIONS_SHAPE
    metadata_key = "applyRequestId"

    def __init__(self, batch_size: int = 5, model: str | None = None):
        super().__init__(batch_size, model)

    def is_pending(self, entry: Entry) -> bool:
        return audit.needs_correction(entry)

    def render(self, batch: Sequence[Entry]) -> str:
        return prompts.render_correction_batch(batch)

    def merge(self, store, batch, parsed, request_id, timestamp) -> int:
        return merge.apply_corrections(store, parsed["corrections"], request_id, timestamp)

    def summarize(self, parsed: ParsedResponse) -> dict[str, int]:
        counts = {"replace": 0, "keep": 0, "null": 0}
        for item in parsed["corrections"]:
            counts[item.action] += 1
        return counts


class TranslateEntries(BatchOperation):
    """English glosses for audited definitions."""

    name = "translate"
    shape = TRANSLATIONS_SHAPE
    metadata_key = "engRequestId"

    def __init__(self, batch_size: int = 100, model: str | None = None):
        super().__init__(batch_size, model)

    def is_pending(self, entry: Entry) -> bool:
        return audit.needs_translation(entry)

    def render(self, batch: Sequence[Entry]) -> str:
        return prompts.render_translation_batch(batch)

    def merge(self, store, batch, parsed, request_id, timestamp) -> int:
        return merge.apply_translations(store, parsed["translations"])
