"""Errors raised while replaying session steps."""

from __future__ import annotations

from typing import Any, Optional


class StepError(RuntimeError):
    """A mutation step could not be applied to the current state."""

    def __init__(self, message: str, *, step: Optional[Any] = None):
        self.message = message
        self.step = step
        super().__init__(message if step is None else f"{step.op}: {message}")


__all__ = ["StepError"]
