"""Terminal rendering of the change report."""

from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Change


def build_table(changes: Sequence[Change]) -> Table:
    """Build the report table with one row per change, in list order."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")

    table.add_column("URL", style="cyan", no_wrap=True)
    table.add_column("Message")
    table.add_column("When", style="green", no_wrap=True)

    for change in changes:
        table.add_row(Text(change.url), Text(change.message), change.display_time)

    return table


def render_changes(changes: Sequence[Change], console: Optional[Console] = None) -> None:
    """Print the change report to ``console`` (stdout by default)."""
    output = console or Console()
    if not changes:
        output.print("[yellow]No changes found.[/yellow]")
        return

    output.print(build_table(changes))
