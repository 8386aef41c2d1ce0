"""
Shared fixtures for history tests.
"""

from typing import Any, Callable

import pytest

from statehistory.core import ChangeSet, History, HistoryStore


def counter_reducer(draft: Any, action: Any) -> None:
    """Reducer used by store tests: "+" increments, "-" decrements."""
    if action == "+":
        draft["count"] += 1
    elif action == "-":
        draft["count"] -= 1


@pytest.fixture
def history() -> History:
    return History({"count": 1})


@pytest.fixture
def store() -> HistoryStore:
    return HistoryStore(counter_reducer, {"count": 1, "user": {"name": "fred"}})


@pytest.fixture
def push_increment() -> Callable[..., Any]:
    """Return a helper that pushes ``count += by`` and returns the new state."""

    def _push(history: History, state: Any, by: int = 1) -> Any:
        def recipe(draft):
            draft["count"] += by

        new_state, forward, inverse = history.patch_engine.produce(state, recipe)
        history.push(ChangeSet(forward=forward, inverse=inverse))
        return new_state

    return _push


@pytest.fixture
def session_file(tmp_path) -> Callable[[str], str]:
    """Return a helper that writes YAML text to a file and returns its path."""

    def _write(text: str, name: str = "session.yaml") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write
