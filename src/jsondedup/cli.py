"""jsondedup CLI — entry point.

Commands:
    jsondedup run   [SOURCE]   Dedup every row, writing TSV rows to stdout
    jsondedup stats [SOURCE]   Run the same transform and report counters

``jsondedup-udf`` is the ``run`` command on its own, for hosts that execute
the function binary without arguments and talk to it over stdin/stdout.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import BinaryIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import settings
from .dedup.engine import DedupStats
from .errors import LineFailure
from .pipeline import run_stream

console = Console()
err_console = Console(stderr=True)


# ── Helpers ─────────────────────────────────────────────────────────────────


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("jsondedup")
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))


def _fail(exc: LineFailure) -> None:
    err_console.print(
        f"[red]line processing error:[/red] {escape(str(exc))}",
        soft_wrap=True,
        highlight=False,
    )
    sys.exit(1)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="jsondedup")
def main() -> None:
    """jsondedup — remove duplicate JSON object keys from TSV rows."""


# ── run ──────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--output", "-o", "sink", type=click.File("wb"), default="-", help="Output file (default: stdout).")
@click.option(
    "--workers", "-w", default=settings.workers, type=click.IntRange(min=0),
    help="Worker processes (0 = one per CPU).", show_default=True,
)
@click.option(
    "--chunk-size", default=settings.chunk_size, type=click.IntRange(min=1),
    help="Lines per worker task.", show_default=True,
)
@click.option(
    "--strict-escapes/--lenient-escapes", default=settings.strict_escapes,
    help="Fail on unknown TSV escapes instead of dropping the backslash.",
)
@click.option(
    "--max-depth", default=settings.max_depth, type=click.IntRange(min=1),
    help="Deepest JSON nesting accepted.", show_default=True,
)
def run(
    source: BinaryIO,
    sink: BinaryIO,
    workers: int,
    chunk_size: int,
    strict_escapes: bool,
    max_depth: int,
) -> None:
    """Deduplicate JSON object keys, one TSV-escaped document per line.

    Each input line produces exactly one output line. The first malformed
    line aborts the stream with exit status 1.

    \b
    Examples:
      jsondedup run < rows.tsv
      jsondedup run rows.tsv -o clean.tsv --workers 0
      echo '{"a":null,"a":"x"}' | jsondedup run
    """
    _configure_logging(settings.log_level)
    try:
        run_stream(
            source,
            sink,
            workers=workers,
            chunk_size=chunk_size,
            strict_escapes=strict_escapes,
            max_depth=max_depth,
        )
    except LineFailure as exc:
        _fail(exc)


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option(
    "--strict-escapes/--lenient-escapes", default=settings.strict_escapes,
    help="Fail on unknown TSV escapes instead of dropping the backslash.",
)
@click.option(
    "--max-depth", default=settings.max_depth, type=click.IntRange(min=1),
    help="Deepest JSON nesting accepted.", show_default=True,
)
def stats(source: BinaryIO, strict_escapes: bool, max_depth: int) -> None:
    """Report how much deduplication a file of rows needs.

    \b
    Examples:
      jsondedup stats rows.tsv
    """
    from .visualization.tables import print_stats_table

    _configure_logging(settings.log_level)
    counters = DedupStats()
    with open(os.devnull, "wb") as sink:
        try:
            run_stream(
                source,
                sink,
                strict_escapes=strict_escapes,
                max_depth=max_depth,
                stats=counters,
            )
        except LineFailure as exc:
            _fail(exc)

    name = escape(str(getattr(source, "name", "<stdin>")))
    print_stats_table(counters, title=f"Dedup statistics: {name}", console=console)


if __name__ == "__main__":
    main()
