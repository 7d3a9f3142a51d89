"""
CLI layer for kovocab.

Provides a Typer application whose commands delegate to the pipelines
(``kovocab.pipelines``).  This package handles only terminal transport:
argument parsing, coloured output, and table formatting.

Entry point::

    kovocab --help
"""

from kovocab.cli.app import app

__all__ = ["app"]
