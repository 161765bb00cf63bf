"""Rich-powered table rendering for stream statistics."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table

from ..dedup.engine import DedupStats

_console = Console()

_LABELS = {
    "lines": "Lines",
    "objects": "Objects visited",
    "dotted_keys_expanded": "Dotted keys expanded",
    "duplicate_keys_removed": "Duplicate keys removed",
}


def print_stats_table(
    stats: DedupStats,
    title: str = "Dedup statistics",
    console: Console | None = None,
) -> None:
    """Render a DedupStats as a two-column Rich table."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Counter")
    table.add_column("Value", justify="right", style="cyan")

    for key, value in stats.as_dict().items():
        table.add_row(_LABELS.get(key, key), f"{value:,}")

    (console or _console).print(table)
