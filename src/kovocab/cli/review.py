"""
CLI: ``kovocab pending | stats | spot-check``: inspecting the store.
"""

from __future__ import annotations

import typer

from kovocab.cli.utils import console, handle_errors, output_result, settings_from
from kovocab.core.store import LemmaStore, RecordStore
from kovocab.pipelines.operations import GenerateDefinitions
from kovocab.pipelines.spot_check import delete_requests, sample_requests
from kovocab.pipelines.stats import compute_stats


def _split_ids(ids: str | None) -> list[str]:
    return [part.strip() for part in (ids or "").split(",") if part.strip()]


def pending(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List terms that still need a definition."""
    settings = settings_from(ctx)
    with handle_errors():
        lemmas = LemmaStore(settings.lemmas_path).load()
        store = RecordStore(settings.definitions_path).load_or_empty()
        operation = GenerateDefinitions(lemmas, batch_size=settings.definition_batch_size)
        operation.prepare(store)
        entries = operation.select_pending(store)

    rows = [
        {"rank": e.rank, "term": e.term, "lemma": e.lemma or "", "pos": e.pos} for e in entries
    ]
    if json_out:
        output_result({"total": len(rows), "entries": rows}, as_json=True)
        return
    for row in rows:
        lemma = f" ({row['lemma']})" if row["lemma"] else ""
        console.print(f"{row['rank']}, {row['term']}{lemma}, {row['pos']}")
    console.print(f"Total pending: {len(rows)}")


def stats(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show definition and audit progress."""
    settings = settings_from(ctx)
    with handle_errors():
        result = compute_stats(RecordStore(settings.definitions_path).load())
    output_result(result, as_json=json_out, title="Stats")


def spot_check(
    ctx: typer.Context,
    ids: str | None = typer.Argument(None, help="Comma-separated defRequestIds."),
    delete: bool = typer.Option(False, "--delete", help="Clear every definition the ids produced."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Sample definitions per request id, or roll a bad request back."""
    settings = settings_from(ctx)
    request_ids = _split_ids(ids)
    record_store = RecordStore(settings.definitions_path)

    if delete:
        if not request_ids:
            raise typer.BadParameter("--delete needs at least one request id", param_hint="IDS")
        with handle_errors():
            cleared = delete_requests(record_store, request_ids)
        if json_out:
            output_result({"cleared": cleared, "requests": len(request_ids)}, as_json=True)
        else:
            console.print(f"Cleared {cleared} definitions across {len(request_ids)} request(s).")
        return

    with handle_errors():
        samples = sample_requests(record_store.load(), request_ids)
    if json_out:
        output_result(samples, as_json=True)
        return
    if not samples:
        console.print(
            f"No entries found for {ids}" if request_ids else "No definitions with defRequestId found."
        )
        return
    for sample in samples:
        console.print(f"[bold]{sample.request_id}[/bold] [dim]({sample.total} entries)[/dim]")
        for entry in sample.entries:
            console.print(f"- {entry.term}: {entry.definition}")
        console.print()
