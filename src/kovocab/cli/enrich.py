"""
CLI: ``kovocab define | audit | correct | translate``: the LLM-backed passes.

Each command builds the OpenAI provider once (failing fast on a missing
``OPENAI_API_KEY``), then hands the pass to the pipeline driver.
"""

from __future__ import annotations

import typer

from kovocab.cli.utils import console, handle_errors, output_result, print_table, settings_from
from kovocab.clients import build_llm_limiter, build_llm_provider, build_retry_policy
from kovocab.core.settings import KovocabSettings
from kovocab.core.store import LemmaStore, RecordStore
from kovocab.pipelines.driver import PipelineDriver, PipelineRunResult
from kovocab.pipelines.operations import (
    AuditEntries,
    BatchOperation,
    CorrectEntries,
    GenerateDefinitions,
    TranslateEntries,
)


def _run(settings: KovocabSettings, operation: BatchOperation) -> PipelineRunResult:
    provider = build_llm_provider(settings)
    driver = PipelineDriver(
        RecordStore(settings.definitions_path),
        provider,
        retry=build_retry_policy(settings),
        limiter=build_llm_limiter(settings),
    )
    return driver.run(operation)


def _report(result: PipelineRunResult, json_out: bool, title: str) -> None:
    if result.noop and not json_out:
        console.print(f"[dim]{title}: nothing pending.[/dim]")
        return
    output_result(result, as_json=json_out, title=title)


def define(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Generate definitions for definable terms that have none."""
    settings = settings_from(ctx)
    with handle_errors():
        settings.require_openai_key()
        lemmas = LemmaStore(settings.lemmas_path).load()
        operation = GenerateDefinitions(
            lemmas, batch_size=settings.definition_batch_size, model=settings.definition_model
        )
        result = _run(settings, operation)
    _report(result, json_out, "Define")


def audit(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Audit definitions that have never been checked."""
    settings = settings_from(ctx)
    with handle_errors():
        operation = AuditEntries(batch_size=settings.audit_batch_size, model=settings.audit_model)
        result = _run(settings, operation)
    if json_out:
        payload = result.to_dict()
        payload["concerns"] = [c.to_dict() for c in operation.found]
        output_result(payload, as_json=True)
        return
    _report(result, json_out, "Audit")
    if operation.found:
        print_table(operation.found, title="Concerns")


def correct(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Resolve open audit concerns."""
    settings = settings_from(ctx)
    with handle_errors():
        operation = CorrectEntries(
            batch_size=settings.correction_batch_size, model=settings.correction_model
        )
        result = _run(settings, operation)
    _report(result, json_out, "Correct")


def translate(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Add English glosses to audited definitions."""
    settings = settings_from(ctx)
    with handle_errors():
        operation = TranslateEntries(
            batch_size=settings.translation_batch_size, model=settings.translation_model
        )
        result = _run(settings, operation)
    _report(result, json_out, "Translate")
