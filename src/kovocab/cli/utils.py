"""
CLI utility helpers: settings access, error handling, output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from kovocab.core.errors import KovocabError
from kovocab.core.logging import get_logger
from kovocab.core.settings import KovocabSettings, get_settings

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)


# ── Settings / errors ────────────────────────────────────────────────────


def settings_from(ctx: typer.Context) -> KovocabSettings:
    """Settings built by the root callback (or from the environment)."""
    if isinstance(ctx.obj, KovocabSettings):
        return ctx.obj
    return get_settings()


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print a ``KovocabError`` and exit with status 1."""
    try:
        yield
    except KovocabError as e:
        logger.error("cli.failed", **e.to_dict())
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert a result object / dataclass / dict to a plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_result(data: Any, *, as_json: bool = False, title: str = "") -> None:
    """Render a result object, or a list of them, to the terminal."""
    if as_json:
        payload = [_to_dict(d) for d in data] if isinstance(data, list | tuple) else _to_dict(data)
        console.print_json(json.dumps(payload, ensure_ascii=False, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        print_table(data, title=title)
    else:
        print_dict(_to_dict(data), title=title)


def print_table(items: list, *, title: str = "") -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(*(str(v) for v in d.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
