"""
CLI: ``kovocab ingest | lemmatize | def-lemmas``: building the term corpus.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from kovocab.cli.utils import console, handle_errors, output_result, settings_from
from kovocab.clients import build_nlp_limiter, build_retry_policy, build_syntax_analyzer
from kovocab.core.store import LemmaStore, RecordStore, TermStore
from kovocab.pipelines import def_lemmas as freq
from kovocab.pipelines.ingest import ingest as ingest_terms
from kovocab.pipelines.lemmatize import Lemmatizer


def ingest(
    ctx: typer.Context,
    raw_dir: Path | None = typer.Option(None, "--raw-dir", help="Directory of *.txt frequency lists."),
) -> None:
    """Parse raw frequency lists into the ranked term list."""
    settings = settings_from(ctx)
    source = raw_dir or settings.raw_dir
    with handle_errors():
        terms = ingest_terms(source, TermStore(settings.terms_path))
    console.print(f"Wrote {len(terms)} terms to {settings.terms_path}")


def lemmatize(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Tag every term with its lemma and part of speech (resumable)."""
    settings = settings_from(ctx)
    with handle_errors():
        analyzer = build_syntax_analyzer(settings)
        terms = TermStore(settings.terms_path).load()
        lemmatizer = Lemmatizer(
            analyzer,
            LemmaStore(settings.lemmas_path),
            batch_size=settings.lemma_batch_size,
            concurrency=settings.lemma_concurrency,
            limiter=build_nlp_limiter(settings),
            retry=build_retry_policy(settings),
        )
        result = asyncio.run(lemmatizer.run(terms))
    output_result(result, as_json=json_out, title="Lemmatize")


def def_lemmas(
    ctx: typer.Context,
    filter_only: bool = typer.Option(
        False, "--filter-only", help="Re-filter the existing frequency list without calling the NLP service."
    ),
) -> None:
    """Count lemmas used inside definitions and list unseen, recurring ones."""
    settings = settings_from(ctx)
    with handle_errors():
        if filter_only:
            frequencies = freq.load_frequencies(settings.def_lemmas_path)
        else:
            analyzer = build_syntax_analyzer(settings)
            store = RecordStore(settings.definitions_path).load()
            frequencies = freq.count_definition_lemmas(
                store,
                analyzer,
                per_request=settings.def_lemmas_per_request,
                limiter=build_nlp_limiter(settings),
                retry=build_retry_policy(settings),
            )
            freq.save_frequencies(settings.def_lemmas_path, frequencies)
            console.print(f"Wrote {len(frequencies)} unique lemmas to {settings.def_lemmas_path}")

        terms = TermStore(settings.terms_path).load()
        filtered = freq.filter_frequencies(frequencies, terms)
        freq.save_frequencies(settings.def_lemmas_filtered_path, filtered)
    console.print(
        f"Filtered {len(frequencies)} -> {len(filtered)} entries; "
        f"wrote {settings.def_lemmas_filtered_path}"
    )
