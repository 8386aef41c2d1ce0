from __future__ import annotations

"""Shared helper for loading session files with CLI-friendly errors."""

from typing import Any, Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from statehistory.io.loaders import LoaderError

T = TypeVar("T")


def load_or_exit(
    loader_fn: Callable[..., T],
    *args: Any,
    console: Console,
    verbose_errors: bool = False,
    **kwargs: Any,
) -> T:
    try:
        return loader_fn(*args, **kwargs)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load session:[/red] {escape(err.message)}\n{escape(str(err.cause))}")
        else:
            console.print(f"[red]Failed to load session:[/red] {escape(str(err))}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
