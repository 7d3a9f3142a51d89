"""Tests for raw frequency-list ingestion."""

from __future__ import annotations

import pytest

from kovocab.core.errors import IngestionError
from kovocab.core.models import TermEntry
from kovocab.pipelines.ingest import ingest, parse_line, read_terms


class TestParseLine:
    def test_basic(self):
        assert parse_line("12. 사람", "a.txt") == TermEntry(12, "사람")

    def test_whitespace_trimmed(self):
        assert parse_line("  7.   있다  ", "a.txt") == TermEntry(7, "있다")

    def test_no_space_after_dot(self):
        assert parse_line("3.그", "a.txt") == TermEntry(3, "그")

    def test_blank_line(self):
        assert parse_line("   ", "a.txt") is None

    def test_malformed_line(self):
        with pytest.raises(IngestionError, match="a.txt:4") as exc:
            parse_line("사람 12", "a.txt", 4)
        assert exc.value.context.path == "a.txt"
        assert exc.value.context.metadata["line"] == 4


class TestReadTerms:
    def test_merges_files_sorted_by_rank(self, tmp_path):
        (tmp_path / "b.txt").write_text("1. 것\n3. 있다\n", encoding="utf-8")
        (tmp_path / "a.txt").write_text("2. 하다\n\n4. 그\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")

        terms = read_terms(tmp_path)

        assert [(t.rank, t.term) for t in terms] == [(1, "것"), (2, "하다"), (3, "있다"), (4, "그")]

    def test_no_files(self, tmp_path):
        with pytest.raises(IngestionError, match="No \\*.txt files"):
            read_terms(tmp_path)

    def test_duplicate_rank(self, tmp_path):
        (tmp_path / "a.txt").write_text("1. 것\n", encoding="utf-8")
        (tmp_path / "b.txt").write_text("1. 하다\n", encoding="utf-8")
        with pytest.raises(IngestionError, match="Duplicate rank 1"):
            read_terms(tmp_path)

    def test_malformed_line_aborts(self, tmp_path):
        (tmp_path / "a.txt").write_text("1. 것\nnot a line\n", encoding="utf-8")
        with pytest.raises(IngestionError, match="a.txt:2"):
            read_terms(tmp_path)


class TestIngest:
    def test_writes_term_store(self, tmp_path, term_store):
        raw = tmp_path / "raw"
        raw.mkdir()
        (raw / "top.txt").write_text("2. 하다\n1. 것\n", encoding="utf-8")

        written = ingest(raw, term_store)

        assert written == term_store.load()
        assert [t.rank for t in written] == [1, 2]

    def test_rerun_overwrites(self, tmp_path, term_store):
        raw = tmp_path / "raw"
        raw.mkdir()
        (raw / "top.txt").write_text("1. 것\n", encoding="utf-8")
        ingest(raw, term_store)
        (raw / "top.txt").write_text("1. 것\n2. 하다\n", encoding="utf-8")
        ingest(raw, term_store)
        assert len(term_store.load()) == 2
