"""Ingestion of raw frequency lists into the ranked term list.

Every ``*.txt`` file in the raw directory is read in name order.  Each
non-blank line must look like ``<rank>. <term>``; anything else stops the
run with :class:`IngestionError`.
"""

from __future__ import annotations

import re
from pathlib import Path

from kovocab.core.errors import IngestionError
from kovocab.core.logging import get_logger
from kovocab.core.models import TermEntry
from kovocab.core.store import TermStore

logger = get_logger(__name__)

LINE_PATTERN = re.compile(r"^\s*(\d+)\.\s*(.+?)\s*$")


def parse_line(line: str, source: str, line_number: int | None = None) -> TermEntry | None:
    """Parse one raw line; blank lines yield ``None``."""
    if not line.strip():
        return None
    match = LINE_PATTERN.match(line)
    if match is None:
        where = f"{source}:{line_number}" if line_number is not None else source
        raise IngestionError(f'Unrecognized line in {where}: "{line}"').with_context(
            path=source, line=line_number
        )
    rank, term = match.groups()
    return TermEntry(rank=int(rank), term=term)


def read_terms(raw_dir: Path) -> list[TermEntry]:
    """Collect and rank-sort the terms of every ``*.txt`` file in ``raw_dir``.

    Raises:
        IngestionError: a malformed line, a duplicate rank, or no input files.
    """
    files = sorted(p for p in raw_dir.glob("*.txt") if p.is_file())
    if not files:
        raise IngestionError(f"No *.txt files found in {raw_dir}").with_context(path=str(raw_dir))

    entries: list[TermEntry] = []
    seen: dict[int, str] = {}
    for path in files:
        for number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            entry = parse_line(line, path.name, number)
            if entry is None:
                continue
            if entry.rank in seen:
                raise IngestionError(
                    f"Duplicate rank {entry.rank} in {path.name}:{number} "
                    f"(already seen in {seen[entry.rank]})"
                ).with_context(path=path.name, rank=entry.rank)
            seen[entry.rank] = path.name
            entries.append(entry)
        logger.debug("ingest.file_read", file=path.name)

    return sorted(entries, key=lambda e: e.rank)


def ingest(raw_dir: Path, term_store: TermStore) -> list[TermEntry]:
    """Read ``raw_dir`` and write the term list; returns the terms written."""
    terms = read_terms(raw_dir)
    term_store.persist(terms)
    logger.info("ingest.finished", terms=len(terms), path=str(term_store.path))
    return terms
