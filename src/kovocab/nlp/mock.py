"""Mock syntax analyzer for tests.

Looks each whitespace-separated word up in a lexicon of
``surface -> (lemma, pos)``; unknown words come back with their own surface
as lemma and ``UNKNOWN`` as tag.  Queued exceptions are raised first, one per
call, so retry paths can be exercised.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kovocab.nlp.protocol import SyntaxToken


@dataclass
class MockSyntaxAnalyzer:
    lexicon: dict[str, tuple[str, str]] = field(default_factory=dict)
    failures: list[Exception] = field(default_factory=list)
    calls: list[str] = field(default_factory=list, repr=False)

    def analyze(self, text: str, language: str | None = None) -> list[SyntaxToken]:
        self.calls.append(text)
        if self.failures:
            raise self.failures.pop(0)
        tokens = []
        for word in text.split():
            lemma, pos = self.lexicon.get(word, (word, "UNKNOWN"))
            tokens.append(SyntaxToken(surface=word, lemma=lemma, pos=pos))
        return tokens

    @property
    def call_count(self) -> int:
        return len(self.calls)
