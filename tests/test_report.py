"""Tests for terminal rendering of the change report."""

import io
import sys
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from payload_changes.models import Change
from payload_changes.report import build_table, render_changes


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def _change(url: str, message: str, when: str) -> Change:
    return Change(
        url=url,
        message=message,
        display_time=when,
        original_time=datetime(2021, 7, 1, tzinfo=timezone.utc),
        repository="https://github.com/o/r",
    )


def test_build_table_has_expected_columns_and_rows():
    """Verify the table exposes URL, Message and When columns with one row per change."""
    table = build_table([_change("u1", "m1", "1 hour ago"), _change("u2", "m2", "now")])

    assert [column.header for column in table.columns] == ["URL", "Message", "When"]
    assert table.row_count == 2


def test_render_changes_prints_rows_in_order():
    """Verify rendered output contains every change in list order."""
    console = _console()

    render_changes(
        [
            _change("https://github.com/o/r/commit/1", "First [WIP] change", "3 hours ago"),
            _change("https://github.com/o/r/commit/2", "Second change", "1 hour ago"),
        ],
        console=console,
    )

    output = console.file.getvalue()
    assert "URL" in output and "Message" in output and "When" in output
    assert "First [WIP] change" in output
    assert output.index("commit/1") < output.index("commit/2")


def test_render_changes_without_changes_prints_notice():
    """Verify an empty report prints a notice instead of a table."""
    console = _console()

    render_changes([], console=console)

    assert "No changes found." in console.file.getvalue()
