"""Prompt text and batch renderers for the LLM-backed passes.

Each renderer lists the batch entries after the instruction block, one entry
per line (corrections use a small multi-line block so concerns stay readable).
The JSON contract at the end of each instruction mirrors the shapes in
:mod:`kovocab.pipelines.schemas`.
"""

from __future__ import annotations

from collections.abc import Sequence

from kovocab.core.models import POS_TAGS, Entry

DEFINITION_PROMPT = """
You are writing a Korean learner's dictionary.
For each entry, write ONE short, simple Korean sentence defining the most
common meaning of the term for its part of speech. No English. End with a period.
Do not repeat the term itself as the whole definition.
If a term cannot be defined as a real, usable Korean word, leave it out.
Return JSON only:
{ "definitions": [ { "rank": number, "def": string } ] }
"""

AUDIT_PROMPT = f"""
You are auditing a Korean learner's dictionary entries for CATASTROPHIC errors only:
mistakes so bad that the entry must be rewritten or deleted.
Eg: POS tag says "NOUN" but the definition describes a verb.
Eg: Definition is completely unrelated to the term.
Eg: Definition violates Korean syntax.
Ignore nit picks such as spacing, level of detail, or alternative meanings.
Definitions should be simple, common-meaning, one-sentence Korean fit for learners.

If POS is wrong, do not explain; just propose the corrected POS. Valid POS values:
{list(POS_TAGS)}

Return JSON only:
{{
  "concerns": [{{ "rank": number, "key": "def", "why": string }}],
  "pos_fixes": [{{ "rank": number, "newPos": string }}]
}}
If nothing is wrong, both arrays should be empty.
"""

CORRECTION_PROMPT = """
You are a precise Korean learner dictionary editor.
For each entry with concerns, choose ONE action:
- "replace": supply a corrected one-sentence, learner-friendly Korean definition (no English).
- "keep": the concern does not hold; keep the current definition (def = null).
- "null": the term is not a real/usable Korean word; remove the definition (def = null).

POS values are already set; do not change POS.
Return JSON only:
{ "corrections": [ { "rank": number, "action": "replace" | "keep" | "null", "def": string | null } ] }

Rules:
- If action is "replace", you MUST provide a string in "def".
- If action is "keep" or "null", set "def" to null.
- Keep language simple, common-meaning, one sentence; end with a period.
"""

TRANSLATION_PROMPT = """
You are translating Korean learner dictionary entries to natural English.
For each item, translate the definition text into one clear, concise English sentence.
Ignore the term itself; keep the sense of the original; no surrounding quotes.
Return JSON only:
{ "translations": [ { "rank": number, "eng": string } ] }
"""


def _lemma_part(entry: Entry) -> str:
    return f', lemma: "{entry.lemma}"' if entry.lemma else ""


def render_definition_batch(batch: Sequence[Entry]) -> str:
    lines = "\n".join(
        f'- rank: {e.rank}, term: "{e.term}"{_lemma_part(e)}, pos: {e.pos}' for e in batch
    )
    return f"{DEFINITION_PROMPT.strip()}\nEntries:\n{lines}"


def render_audit_batch(batch: Sequence[Entry]) -> str:
    lines = "\n".join(
        f'- rank: {e.rank}, term: "{e.term}"{_lemma_part(e)}, pos: {e.pos}, '
        f'def: "{e.definition if e.definition is not None else "(null)"}"'
        for e in batch
    )
    return f"{AUDIT_PROMPT.strip()}\nEntries:\n{lines}"


def render_correction_batch(batch: Sequence[Entry]) -> str:
    blocks = []
    for e in batch:
        concerns = "\n".join(f"- {c.key}: {c.why}" for c in e.concerns) or "(none)"
        blocks.append(
            f'rank: {e.rank}, term: "{e.term}"{_lemma_part(e)}, pos: {e.pos}\n'
            f'def: "{e.definition if e.definition is not None else "(null)"}"\n'
            f"concerns:\n{concerns}\n"
        )
    return f"{CORRECTION_PROMPT.strip()}\nEntries:\n" + "\n".join(blocks)


def render_translation_batch(batch: Sequence[Entry]) -> str:
    lines = "\n".join(f'- rank: {e.rank}, def: "{e.definition}"' for e in batch)
    return f"{TRANSLATION_PROMPT.strip()}\nItems:\n{lines}"
