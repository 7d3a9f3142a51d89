"""
Pipeline driver: the one loop every LLM-backed pass runs through.

Manifesto:
A run is a sequence of independent, individually committed batches.  The
store is rewritten after every batch, so killing the process at any point
loses at most the batch in flight, and re-running the same command picks up
exactly the entries that are still pending.

ARCHITECTURE
────────────
::

    PipelineDriver(record_store, provider, retry, limiter, validator)
      └── .run(operation) → PipelineRunResult
            │
            ├─ load store (empty on first run when the operation allows it)
            ├─ operation.prepare(store)          ─ back-fill, persist if changed
            ├─ pending = operation.select_pending(store)
            │     └─ none pending → log no-op, return
            └─ for each chunk(pending, batch_size):
                  request_id = new_request_id()
                  raw    = retry.invoke(provider.complete, ...)   ─ limiter pads
                  parsed = validator.parse(raw, shape, batch ranks)
                  operation.merge(store, batch, parsed, request_id, now)
                  record_store.persist(store)
                  log progress  completed / total

Failure semantics:
    - Retryable failures are retried by ``RetryPolicy``; if they outlive the
      budget, or a non-retryable ``KovocabError`` occurs (service error,
      malformed body), the run stops with :class:`BatchFailedError` naming
      the batch and its request id.  Earlier batches stay committed; the
      failed batch left no trace in the store.
    - Items the validator drops are logged and counted; the rest of the batch
      still applies.

Related modules:
    operations.py  - the define / audit / correct / translate passes
    validation.py  - ResponseValidator
    merge.py  - merge rules
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from kovocab.core.errors import BatchFailedError, KovocabError
from kovocab.core.logging import get_logger
from kovocab.core.models import Entry, Store
from kovocab.core.store import RecordStore
from kovocab.core.timestamps import new_request_id, now_stamp
from kovocab.execution.batching import chunk
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy
from kovocab.llm.protocol import LLMProvider, Message
from kovocab.pipelines.operations import BatchOperation
from kovocab.pipelines.validation import ParsedResponse, ResponseValidator

logger = get_logger(__name__)


@dataclass
class PipelineRunResult:
    """What one ``run`` did."""

    operation: str
    pending: int = 0
    batches: int = 0
    completed_batches: int = 0
    applied: int = 0
    dropped: int = 0
    request_ids: list[str] = field(default_factory=list)

    @property
    def noop(self) -> bool:
        return self.pending == 0

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "pending": self.pending,
            "batches": self.batches,
            "completed_batches": self.completed_batches,
            "applied": self.applied,
            "dropped": self.dropped,
            "request_ids": list(self.request_ids),
        }


class PipelineDriver:
    """Runs a :class:`BatchOperation` batch by batch against one store."""

    def __init__(
        self,
        record_store: RecordStore,
        provider: LLMProvider,
        *,
        retry: RetryPolicy | None = None,
        limiter: MinimumDurationLimiter | None = None,
        validator: ResponseValidator | None = None,
        stamp: Callable[[], str] = now_stamp,
        request_ids: Callable[[], str] = new_request_id,
    ):
        self.record_store = record_store
        self.provider = provider
        self.retry = retry or RetryPolicy()
        self.limiter = limiter
        self.validator = validator or ResponseValidator()
        self._stamp = stamp
        self._new_request_id = request_ids

    def load(self, operation: BatchOperation) -> Store:
        if operation.allow_missing_store:
            return self.record_store.load_or_empty()
        return self.record_store.load()

    def run(self, operation: BatchOperation) -> PipelineRunResult:
        """Process every pending entry for ``operation``.

        Raises:
            StoreNotFoundError: the store is absent and the operation needs it.
            BatchFailedError: a batch failed fatally; earlier batches are kept.
        """
        log = logger.bind(operation=operation.name)
        store = self.load(operation)
        if operation.prepare(store):
            self.record_store.persist(store)

        pending = operation.select_pending(store)
        result = PipelineRunResult(operation=operation.name, pending=len(pending))
        if not pending:
            log.info("pipeline.nothing_pending", entries=len(store))
            return result

        batches = chunk(pending, operation.batch_size)
        result.batches = len(batches)
        log.info(
            "pipeline.started",
            pending=len(pending),
            batches=len(batches),
            batch_size=operation.batch_size,
        )

        completed = 0
        for index, batch in enumerate(batches, start=1):
            request_id = self._new_request_id()
            blog = log.bind(batch=f"{index}/{len(batches)}", request_id=request_id)
            blog.info("pipeline.batch_start", size=len(batch))

            try:
                parsed = self._fetch(operation, batch, request_id)
            except KovocabError as e:
                blog.error("pipeline.batch_failed", error=str(e), error_type=type(e).__name__)
                raise BatchFailedError(operation.name, index, len(batches), request_id, e) from e

            applied = operation.merge(store, batch, parsed, request_id, self._stamp())
            self.record_store.persist(store)

            completed += len(batch)
            result.completed_batches += 1
            result.applied += applied
            result.dropped += len(parsed.dropped)
            result.request_ids.append(request_id)
            blog.info(
                "pipeline.batch_complete",
                applied=applied,
                dropped=len(parsed.dropped),
                progress=f"{completed}/{len(pending)}",
                **operation.summarize(parsed),
            )

        log.info(
            "pipeline.finished",
            batches=result.completed_batches,
            applied=result.applied,
            dropped=result.dropped,
        )
        return result

    def _fetch(self, operation: BatchOperation, batch: list[Entry], request_id: str) -> ParsedResponse:
        messages = [Message.user(operation.render(batch))]
        started = self.limiter.clock() if self.limiter else 0.0
        response = self.retry.invoke(
            self.provider.complete,
            messages,
            operation.model,
            response_format=operation.shape.response_format(),
            metadata={operation.metadata_key: request_id},
        )
        if self.limiter:
            self.limiter.enforce(1, started)
        return self.validator.parse(
            response.content, operation.shape, addressed_ranks={e.rank for e in batch}
        )
