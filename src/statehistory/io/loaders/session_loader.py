from __future__ import annotations

import os
from typing import Any

import yaml
from pydantic import ValidationError

from statehistory.io.loaders.errors import LoaderError
from statehistory.session.specs import SessionSpec


def _read_yaml_file(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _build_spec(data: Any, source: str) -> SessionSpec:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LoaderError(source, f"Session must be a mapping, got {type(data).__name__}")
    try:
        return SessionSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(source, "Invalid session definition", cause=exc) from exc


def load_session(path: str) -> SessionSpec:
    """Load a session definition from a YAML file.

    Expected format:
    initial_state: {count: 1}
    steps:
      - {op: increment, path: [count]}
      - {op: undo}
    """
    if not os.path.isfile(path):
        raise LoaderError(path, "Session file not found")
    try:
        data = _read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Malformed YAML", cause=exc) from exc
    return _build_spec(data, path)


def load_session_text(text: str, *, source: str = "<string>") -> SessionSpec:
    """Parse a session definition from YAML text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LoaderError(source, "Malformed YAML", cause=exc) from exc
    return _build_spec(data, source)
