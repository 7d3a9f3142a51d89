"""
Lemmatization of the ranked term list.

Each term is sent to the syntax analyzer on its own; the first token decides
the lemma and POS tag.  Terms are processed in batches of
``lemma_batch_size``; inside a batch, calls fan out ``concurrency`` wide with
the NLP rate limit applied per sub-group, and each call is retried on quota
errors.  The lemma file is rewritten after every batch, and rows already in
it are skipped on the next run, so an interrupted run resumes where it
stopped.

Example::

    lemmatizer = Lemmatizer(analyzer, LemmaStore(settings.lemmas_path))
    result = asyncio.run(lemmatizer.run(TermStore(settings.terms_path).load()))
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from kovocab.core.logging import get_logger
from kovocab.core.models import LemmaEntry, TermEntry, normalize_pos
from kovocab.core.store import LemmaStore
from kovocab.execution.batching import chunk
from kovocab.execution.fanout import gather_in_groups
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy
from kovocab.nlp.protocol import SyntaxAnalyzer, SyntaxToken

logger = get_logger(__name__)


def to_lemma_entry(term: TermEntry, tokens: Sequence[SyntaxToken]) -> LemmaEntry:
    """Build the lemma row for ``term`` from its analysed tokens."""
    token = tokens[0] if tokens else None
    lemma = (token.lemma or "").strip() if token else ""
    pos = normalize_pos(token.pos if token else None)
    if not lemma or lemma == term.term:
        return LemmaEntry(rank=term.rank, term=term.term, pos=pos)
    return LemmaEntry(rank=term.rank, term=term.term, pos=pos, lemma=lemma)


@dataclass
class LemmatizeResult:
    total: int
    skipped: int
    processed: int

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "skipped": self.skipped, "processed": self.processed}


class Lemmatizer:
    """Resumable term -> (lemma, pos) pass over the syntax analyzer."""

    def __init__(
        self,
        analyzer: SyntaxAnalyzer,
        lemma_store: LemmaStore,
        *,
        batch_size: int = 100,
        concurrency: int = 10,
        limiter: MinimumDurationLimiter | None = None,
        retry: RetryPolicy | None = None,
    ):
        self.analyzer = analyzer
        self.lemma_store = lemma_store
        self.batch_size = batch_size
        self.concurrency = concurrency
        self.limiter = limiter
        self.retry = retry or RetryPolicy()

    async def lemmatize_one(self, term: TermEntry) -> LemmaEntry:
        tokens = await self.retry.invoke_async(asyncio.to_thread, self.analyzer.analyze, term.term)
        return to_lemma_entry(term, tokens)

    async def run(self, terms: Sequence[TermEntry]) -> LemmatizeResult:
        done = {row.rank: row for row in self.lemma_store.load_or_empty()}
        pending = [t for t in terms if t.rank not in done]
        result = LemmatizeResult(total=len(terms), skipped=len(terms) - len(pending), processed=0)

        if not pending:
            logger.info("lemmatize.nothing_pending", total=len(terms))
            return result

        logger.info("lemmatize.started", pending=len(pending), already_done=len(done))
        batches = chunk(pending, self.batch_size)
        for index, batch in enumerate(batches, start=1):
            rows = await gather_in_groups(
                batch, self.lemmatize_one, width=self.concurrency, limiter=self.limiter
            )
            done.update((row.rank, row) for row in rows)
            self.lemma_store.persist(done.values())

            result.processed += len(rows)
            logger.info(
                "lemmatize.batch_committed",
                batch=f"{index}/{len(batches)}",
                progress=f"{result.skipped + result.processed}/{result.total}",
            )

        logger.info("lemmatize.finished", processed=result.processed, total=result.total)
        return result
