"""Syntax-analysis boundary: text in, per-token lemma and POS tag out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SyntaxToken:
    """One analysed token.

    Attributes:
        surface: Token text as it appears in the input
        lemma: Canonical base form (may be empty)
        pos: Part-of-speech tag name (``NOUN``, ``VERB``, ``UNKNOWN``, ...)
    """

    surface: str
    lemma: str
    pos: str


@runtime_checkable
class SyntaxAnalyzer(Protocol):
    """Protocol for lemmatization / tagging backends.

    Implementations raise :class:`~kovocab.core.errors.RateLimitedError` on
    quota exhaustion and :class:`~kovocab.core.errors.ExternalServiceError`
    on other service failures.
    """

    def analyze(self, text: str, language: str | None = None) -> list[SyntaxToken]:
        """Tokenize ``text`` and return its tokens in order."""
        ...
