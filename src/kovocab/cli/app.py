"""
Root Typer application for the kovocab CLI.

The callback resolves settings once (environment, ``.env``, then the global
options) and configures logging; every command reads them from the Typer
context.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from kovocab.cli import corpus, enrich, review
from kovocab.cli.utils import err_console
from kovocab.core.errors import KovocabError
from kovocab.core.logging import configure_logging
from kovocab.core.settings import get_settings

app = Typer(
    name="kovocab",
    help="kovocab: Korean vocabulary enrichment pipelines.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("kovocab")
        except PackageNotFoundError:
            from kovocab import __version__ as v
        typer.echo(f"kovocab {v}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Directory holding the JSON stores."),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    log_format: str | None = typer.Option(None, "--log-format", help="console or json."),
) -> None:
    """kovocab CLI: ingest, lemmatize, define, audit, correct and translate."""
    try:
        settings = get_settings(data_dir=data_dir, log_level=log_level, log_format=log_format)
    except KovocabError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e
    configure_logging(settings.log_level, settings.log_format, force=True)
    ctx.obj = settings


# ── Commands ─────────────────────────────────────────────────────────────

app.command("ingest")(corpus.ingest)
app.command("lemmatize")(corpus.lemmatize)
app.command("def-lemmas")(corpus.def_lemmas)

app.command("define")(enrich.define)
app.command("audit")(enrich.audit)
app.command("correct")(enrich.correct)
app.command("translate")(enrich.translate)

app.command("pending")(review.pending)
app.command("stats")(review.stats)
app.command("spot-check")(review.spot_check)
