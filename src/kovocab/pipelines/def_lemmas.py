"""
Lemma frequencies over the generated definitions.

Definitions are joined with newlines, ``per_request`` at a time, and sent to
the syntax analyzer in Korean; punctuation tokens and empty lemmas are
dropped and the rest lower-cased and counted.  The filtered list keeps
lemmas that recur, are longer than one character, and are not already
ranked terms: candidates for extending the vocabulary.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from kovocab.core.errors import StoreCorruptError
from kovocab.core.logging import get_logger
from kovocab.core.models import Pos, Store, TermEntry
from kovocab.core.store import atomic_write_json, read_json
from kovocab.execution.batching import chunk
from kovocab.execution.rate_limit import MinimumDurationLimiter
from kovocab.execution.retry import RetryPolicy
from kovocab.nlp.protocol import SyntaxAnalyzer, SyntaxToken

logger = get_logger(__name__)

DEFINITION_LANGUAGE = "ko"


@dataclass(frozen=True)
class LemmaFrequency:
    lemma: str
    count: int

    def to_dict(self) -> dict:
        return {"lemma": self.lemma, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict) -> LemmaFrequency:
        return cls(lemma=str(data["lemma"]), count=int(data["count"]))


def token_lemmas(tokens: Iterable[SyntaxToken]) -> list[str]:
    lemmas = []
    for token in tokens:
        if not token.lemma or token.pos == Pos.PUNCT.value:
            continue
        lemma = token.lemma.strip().lower()
        if lemma:
            lemmas.append(lemma)
    return lemmas


def rank_frequencies(lemmas: Iterable[str]) -> list[LemmaFrequency]:
    """Count ``lemmas``; most frequent first, ties by lemma."""
    counts = Counter(lemmas)
    return [
        LemmaFrequency(lemma, count)
        for lemma, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def filter_frequencies(
    frequencies: Iterable[LemmaFrequency], terms: Iterable[TermEntry], min_count: int = 2
) -> list[LemmaFrequency]:
    known = {t.term for t in terms}
    return [
        f for f in frequencies
        if f.count >= min_count and len(f.lemma) > 1 and f.lemma not in known
    ]


def count_definition_lemmas(
    store: Store,
    analyzer: SyntaxAnalyzer,
    *,
    per_request: int = 100,
    limiter: MinimumDurationLimiter | None = None,
    retry: RetryPolicy | None = None,
) -> list[LemmaFrequency]:
    """Analyse every non-null definition and return ranked lemma counts."""
    retry = retry or RetryPolicy()
    definitions = [e.definition for _, e in sorted(store.items()) if e.definition is not None]
    if not definitions:
        logger.info("def_lemmas.nothing_to_analyze")
        return []

    lemmas: list[str] = []
    processed = 0
    for group in chunk(definitions, per_request):
        started = limiter.clock() if limiter else 0.0
        tokens = retry.invoke(analyzer.analyze, "\n".join(group), DEFINITION_LANGUAGE)
        lemmas.extend(token_lemmas(tokens))
        processed += len(group)
        logger.info(
            "def_lemmas.request_done",
            progress=f"{processed}/{len(definitions)}",
            lemmas=len(lemmas),
        )
        if limiter:
            limiter.enforce(1, started)

    return rank_frequencies(lemmas)


def save_frequencies(path: Path, frequencies: Iterable[LemmaFrequency]) -> None:
    atomic_write_json(path, [f.to_dict() for f in frequencies])


def load_frequencies(path: Path) -> list[LemmaFrequency]:
    data = read_json(path)
    if not isinstance(data, list):
        raise StoreCorruptError(f"{path} must hold a JSON array of lemma counts")
    return [LemmaFrequency.from_dict(item) for item in data]
