from __future__ import annotations

"""Loader error utilities."""

import os
from typing import Iterable

import yaml
from pydantic import ValidationError


class LoaderError(RuntimeError):
    """Wraps session loading failures with file path context."""

    def __init__(self, file_path: str, message: str, *, cause: Exception | None = None):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        base = f"{self.message} ({self._relative_path(self.file_path)})"
        if isinstance(self.cause, ValidationError):
            return f"{base}: {self._format_validation_errors(self.cause.errors())}"
        if isinstance(self.cause, yaml.MarkedYAMLError) and self.cause.problem_mark is not None:
            mark = self.cause.problem_mark
            return f"{base}: {self.cause.problem} at line {mark.line + 1}, column {mark.column + 1}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _relative_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    @staticmethod
    def _format_validation_errors(errors: Iterable[dict], limit: int = 3) -> str:
        error_list = list(errors)
        snippets = []
        for err in error_list[:limit]:
            loc = ".".join(str(entry) for entry in err.get("loc", ())) or "<root>"
            snippets.append(f"{loc}: {err.get('msg') or err.get('type') or 'validation error'}")
        if len(error_list) > limit:
            snippets.append(f"... ({len(error_list) - limit} more)")
        return "; ".join(snippets)

    def __str__(self) -> str:
        return self._build_message()
