"""
Durable JSON stores.

``RecordStore`` holds the definition mapping (rank -> Entry) and is the single
source of truth every pipeline reads and mutates. ``TermStore`` and
``LemmaStore`` hold the ordered outputs of ingestion and lemmatization.

All writes go through :func:`atomic_write_json`: the payload is written to a
temporary file in the target directory, flushed and fsynced, then moved over
the destination with ``os.replace``. A crash mid-write leaves the previously
committed file intact.

Example::

    store = RecordStore(settings.definitions_path)
    try:
        records = store.load()
    except StoreNotFoundError:
        records = {}          # first run only
    ensure_all_keys_present(records, lemmas)
    store.persist(records)
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from kovocab.core.errors import StoreCorruptError, StoreNotFoundError
from kovocab.core.logging import get_logger
from kovocab.core.models import Entry, LemmaEntry, Store, TermEntry

logger = get_logger(__name__)


def read_json(path: Path) -> Any:
    """Read a JSON document, raising ``StoreNotFoundError`` if absent."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise StoreNotFoundError(str(path), cause=e) from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StoreCorruptError(f"{path} is not valid JSON: {e}", cause=e).with_context(
            path=str(path)
        ) from e


def atomic_write_json(path: Path, payload: Any) -> None:
    """Write ``payload`` as pretty JSON via write-temp-then-replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
            fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def ensure_all_keys_present(store: Store, keys: Iterable[LemmaEntry]) -> int:
    """Insert placeholder entries (``def=None``) for ranks missing from ``store``.

    Existing entries are never touched, so applying this twice is the same as
    applying it once. Returns the number of entries inserted.
    """
    inserted = 0
    for source in keys:
        if source.rank not in store:
            store[source.rank] = Entry.placeholder(source)
            inserted += 1
    if inserted:
        # keep the mapping in rank order so the file diff stays readable
        ordered = sorted(store.items())
        store.clear()
        store.update(ordered)
    return inserted


class RecordStore:
    """The rank -> Entry definition store backed by one JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Store:
        """Read the full mapping.

        Raises:
            StoreNotFoundError: the file does not exist.
            StoreCorruptError: the file is not a JSON object of entries.
        """
        data = read_json(self.path)
        if not isinstance(data, dict):
            raise StoreCorruptError(f"{self.path} must hold a JSON object keyed by rank")
        store: Store = {}
        for key, value in data.items():
            try:
                rank = int(key)
                store[rank] = Entry.from_dict(rank, value)
            except (ValueError, KeyError, TypeError) as e:
                raise StoreCorruptError(
                    f"{self.path}: bad entry for key {key!r}: {e}", cause=e
                ).with_context(path=str(self.path)) from e
        return dict(sorted(store.items()))

    def load_or_empty(self) -> Store:
        """Load, substituting an empty mapping on first run."""
        try:
            return self.load()
        except StoreNotFoundError:
            logger.info("store.first_run", path=str(self.path))
            return {}

    def persist(self, store: Store) -> None:
        """Rewrite the whole mapping atomically."""
        payload = {str(rank): entry.to_dict() for rank, entry in sorted(store.items())}
        atomic_write_json(self.path, payload)
        logger.debug("store.persisted", path=str(self.path), entries=len(payload))


class TermStore:
    """Ordered ``[{rank, term}]`` list produced by ingestion."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> list[TermEntry]:
        data = read_json(self.path)
        if not isinstance(data, list):
            raise StoreCorruptError(f"{self.path} must hold a JSON array of terms")
        return [TermEntry.from_dict(item) for item in data]

    def persist(self, terms: Iterable[TermEntry]) -> None:
        atomic_write_json(self.path, [t.to_dict() for t in terms])


class LemmaStore:
    """Ordered ``[{rank, term, lemma?, pos}]`` list produced by lemmatization."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> list[LemmaEntry]:
        data = read_json(self.path)
        if not isinstance(data, list):
            raise StoreCorruptError(f"{self.path} must hold a JSON array of lemma rows")
        return [LemmaEntry.from_dict(item) for item in data]

    def load_or_empty(self) -> list[LemmaEntry]:
        try:
            return self.load()
        except StoreNotFoundError:
            return []

    def persist(self, lemmas: Iterable[LemmaEntry]) -> None:
        rows = sorted(lemmas, key=lambda e: e.rank)
        atomic_write_json(self.path, [row.to_dict() for row in rows])
