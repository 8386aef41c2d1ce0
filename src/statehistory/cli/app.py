"""
State history CLI: validate and replay scripted history sessions.

A session file describes an initial state and a list of steps (mutations,
undo/redo, fork/commit/revert, checkpoint). `run` replays it through a
HistoryStore and prints the counts and checkpoint output after every step.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.markup import escape

from statehistory.cli.formatters import build_trace_table, format_value
from statehistory.cli.load_helpers import load_or_exit
from statehistory.io.loaders import load_session
from statehistory.session.runner import SessionRunner

app = typer.Typer(help="State history CLI: validate and replay scripted history sessions.")
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    """Configure logging for all commands."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        console.print(f"[red]Unknown log level[/red]: {escape(log_level)}")
        raise typer.Exit(code=2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


@app.command()
def validate(
    session_file: str = typer.Argument(..., help="Path to a session YAML file"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate a session file without running it."""
    spec = load_or_exit(load_session, session_file, console=console, verbose_errors=verbose)

    name = f" '{escape(spec.name)}'" if spec.name else ""
    console.print(f"[green]OK[/green] Session{name} has {len(spec.steps)} step(s)")
    if spec.config.limit is not None:
        console.print(f"Undo limit: {spec.config.limit}")


@app.command()
def run(
    session_file: str = typer.Argument(..., help="Path to a session YAML file"),
    continue_on_error: bool = typer.Option(
        False, "--continue-on-error", help="Keep replaying after a step fails"
    ),
    show_state: bool = typer.Option(False, "--show-state", help="Add a column with the state after each step"),
    as_json: bool = typer.Option(False, "--json", help="Print the trace as JSON"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Replay a session file and report counts and checkpoints per step."""
    spec = load_or_exit(load_session, session_file, console=console, verbose_errors=verbose)

    trace = SessionRunner(spec).run(stop_on_error=not continue_on_error)

    if as_json:
        console.print_json(data=trace.model_dump(mode="json"))
    else:
        console.print(build_trace_table(trace, show_state=show_state))
        counts = trace.final_counts
        console.print(f"Final state: {escape(format_value(trace.final_state))}")
        console.print(f"undos={counts.undos} redos={counts.redos} unchecked={counts.unchecked}")

    failures = trace.failures
    if failures:
        if not as_json:
            console.print(f"[red]{len(failures)} step(s) failed[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
