"""Formatting helpers for CLI presentation."""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from rich.markup import escape
from rich.table import Table

from statehistory.core.edits import Edit
from statehistory.session.runner import SessionTrace, StepRecord


def format_path(path: Sequence[Any]) -> str:
    """Dotted display form of an edit path; the root is shown as ``<root>``."""
    if not path:
        return "<root>"
    return ".".join(str(key) for key in path)


def format_value(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return repr(value)


def format_edit(edit: Edit) -> str:
    """One-line description like ``replace count = 3``."""
    target = format_path(edit.path)
    if edit.op == "remove":
        return f"remove {target}"
    return f"{edit.op} {target} = {format_value(edit.value)}"


def format_edits(edits: Optional[Sequence[Edit]]) -> str:
    if edits is None:
        return ""
    if not edits:
        return "(no changes)"
    return "\n".join(format_edit(edit) for edit in edits)


def _step_label(record: StepRecord) -> str:
    label = record.op
    if record.forked and record.op != "fork":
        label += " (forked)"
    return label


def build_trace_table(trace: SessionTrace, *, show_state: bool = False) -> Table:
    """Table with one row per replayed step."""
    title = f"Session: {escape(trace.name)}" if trace.name else "Session"
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Undos", justify="right")
    table.add_column("Redos", justify="right")
    table.add_column("Unchecked", justify="right")
    table.add_column("Result")
    if show_state:
        table.add_column("State")

    for record in trace.records:
        if record.failed:
            result = f"[red]{escape(record.error)}[/red]"
        else:
            result = escape(format_edits(record.edits))
        row = [
            str(record.index),
            _step_label(record),
            str(record.counts.undos),
            str(record.counts.redos),
            str(record.counts.unchecked),
            result,
        ]
        if show_state:
            row.append(escape(format_value(record.state)))
        table.add_row(*row)

    return table


__all__ = [
    "build_trace_table",
    "format_edit",
    "format_edits",
    "format_path",
    "format_value",
]
