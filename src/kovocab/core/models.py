"""
Domain records: ranked terms, lemma rows, and definition entries.

The definition store is a mapping ``rank -> Entry``. Entries serialize to the
camelCase JSON layout of the store file::

    "12": {
      "def": "어떤 곳으로 움직여 가는 것이다.",
      "term": "가다",
      "pos": "VERB",
      "defRequestId": "5f0c...",
      "createdAt": "2025-01-09T12:30:00.000Z",
      "llmCheckOn": "2025-01-10T08:00:00.000Z",
      "concerns": [],
      "eng": "To move toward some place."
    }

Optional keys (``lemma``, ``llmCheckOn``, ``eng``) are omitted when unset so
that "absent" keeps its meaning ("not yet computed", "never audited",
"not yet translated").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Pos(str, Enum):
    """Part-of-speech tags (Google Cloud NL universal tag set)."""

    ADJ = "ADJ"
    ADV = "ADV"
    CONJ = "CONJ"
    NOUN = "NOUN"
    VERB = "VERB"
    AFFIX = "AFFIX"
    DET = "DET"
    NUM = "NUM"
    PRON = "PRON"
    PRT = "PRT"
    PUNCT = "PUNCT"
    X = "X"


POS_TAGS: tuple[str, ...] = tuple(p.value for p in Pos)

# Parts of speech that receive learner definitions
DEFINABLE_POS: frozenset[str] = frozenset({"ADJ", "ADV", "CONJ", "NOUN", "VERB"})

# Only definition-quality findings are kept as standing concerns
CONCERN_KEYS: tuple[str, ...] = ("def",)


def normalize_pos(tag: str | None) -> str:
    """Map a service tag onto the enumerated set; anything else becomes ``X``."""
    if tag and tag.upper() in POS_TAGS:
        return tag.upper()
    return Pos.X.value


@dataclass(frozen=True)
class TermEntry:
    """One ranked term from the frequency list."""

    rank: int
    term: str

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, "term": self.term}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TermEntry:
        return cls(rank=int(data["rank"]), term=str(data["term"]))


@dataclass(frozen=True)
class LemmaEntry:
    """A ranked term with its lemma and POS tag.

    ``lemma`` is ``None`` when it equals the surface term.
    """

    rank: int
    term: str
    pos: str
    lemma: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"rank": self.rank, "term": self.term}
        if self.lemma is not None:
            result["lemma"] = self.lemma
        result["pos"] = self.pos
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LemmaEntry:
        return cls(
            rank=int(data["rank"]),
            term=str(data["term"]),
            pos=str(data.get("pos", Pos.X.value)),
            lemma=data.get("lemma") or None,
        )


@dataclass(frozen=True)
class Concern:
    """An open audit finding: which field is wrong and why."""

    rank: int
    key: str
    why: str

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, "key": self.key, "why": self.why}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Concern:
        return cls(rank=int(data["rank"]), key=str(data["key"]), why=str(data["why"]))


@dataclass
class Entry:
    """One vocabulary item's enrichment record, keyed by rank.

    Attributes:
        rank: Stable key assigned at ingestion
        term: Surface word; immutable after ingestion
        pos: Part-of-speech tag (see :class:`Pos`)
        lemma: Canonical base form, ``None`` if equal to term / unknown
        definition: Learner definition (``def`` in JSON); ``None`` if missing
            or rejected
        def_request_id: Batch call that produced ``definition``; ``""`` when
            there is no definition
        created_at: Stamp of the latest ``definition`` assignment or clearing
        llm_check_on: Stamp of the latest audit / correction pass
        concerns: Open audit findings
        eng: English gloss of ``definition``
    """

    rank: int
    term: str
    pos: str
    lemma: str | None = None
    definition: str | None = None
    def_request_id: str = ""
    created_at: str = ""
    llm_check_on: str | None = None
    concerns: list[Concern] = field(default_factory=list)
    eng: str | None = None

    @classmethod
    def placeholder(cls, source: LemmaEntry) -> Entry:
        """Empty entry for a rank that has no definition record yet."""
        return cls(rank=source.rank, term=source.term, pos=source.pos, lemma=source.lemma)

    @property
    def has_definition(self) -> bool:
        return self.definition is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the store layout (rank is the mapping key)."""
        result: dict[str, Any] = {"def": self.definition, "term": self.term}
        if self.lemma is not None:
            result["lemma"] = self.lemma
        result["pos"] = self.pos
        result["defRequestId"] = self.def_request_id
        result["createdAt"] = self.created_at
        if self.llm_check_on is not None:
            result["llmCheckOn"] = self.llm_check_on
        result["concerns"] = [c.to_dict() for c in self.concerns]
        if self.eng is not None:
            result["eng"] = self.eng
        return result

    @classmethod
    def from_dict(cls, rank: int, data: dict[str, Any]) -> Entry:
        return cls(
            rank=rank,
            term=str(data["term"]),
            pos=str(data.get("pos", Pos.X.value)),
            lemma=data.get("lemma") or None,
            definition=data.get("def"),
            def_request_id=data.get("defRequestId") or "",
            created_at=data.get("createdAt") or "",
            llm_check_on=data.get("llmCheckOn") or None,
            concerns=[Concern.from_dict(c) for c in data.get("concerns") or []],
            eng=data.get("eng") or None,
        )


Store = dict[int, Entry]
