"""Error taxonomy for the history engine and the default patch engine."""

from __future__ import annotations

from typing import Any, Optional


class HistoryError(RuntimeError):
    """Base class for history engine failures."""


class HistoryUnderflowError(HistoryError):
    """Raised when undo/redo asks for more steps than the stack holds."""

    def __init__(self, operation: str, requested: int, available: int):
        self.operation = operation
        self.requested = requested
        self.available = available
        super().__init__(f"Cannot {operation} {requested} step(s): only {available} available")


class InvalidForkStateError(HistoryError):
    """Raised on fork while forked, or commit/revert while not forked."""

    def __init__(self, operation: str, *, forked: bool):
        self.operation = operation
        self.forked = forked
        state = "already forked" if forked else "not forked"
        super().__init__(f"Cannot {operation}: history is {state}")


class PatchError(RuntimeError):
    """Raised when an edit cannot be applied to a state value."""

    def __init__(self, message: str, *, edit: Optional[Any] = None):
        self.message = message
        self.edit = edit
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.edit is None:
            return self.message
        return f"{self.message} (edit: {self.edit.op} {list(self.edit.path)})"


__all__ = [
    "HistoryError",
    "HistoryUnderflowError",
    "InvalidForkStateError",
    "PatchError",
]
