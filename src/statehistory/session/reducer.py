"""
Reducer for scripted mutation steps.

Used as the HistoryStore reducer when replaying a session: the draft is a
deep copy owned by the patch engine, so steps mutate it in place.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Sequence, Tuple

from statehistory.core.edits import PathKey
from statehistory.session.errors import StepError
from statehistory.session.specs import AppendStep, IncrementStep, MutationStep, RemoveStep, SetStep


def session_reducer(draft: Any, step: MutationStep) -> Any:
    """
    Apply one mutation step to ``draft``.

    Returns:
        A replacement value when ``set`` or ``increment`` targets the root,
        otherwise None

    Raises:
        StepError: If the step's path does not fit the current state
    """
    if isinstance(step, SetStep):
        if not step.path:
            return deepcopy(step.value)
        container, key = _parent(draft, step.path, step)
        _assign(container, key, deepcopy(step.value), step)
        return None

    if isinstance(step, IncrementStep):
        if not step.path:
            return _incremented(draft, step)
        container, key = _parent(draft, step.path, step)
        container[key] = _incremented(_read(container, key, step), step)
        return None

    if isinstance(step, AppendStep):
        target = _walk(draft, step.path, step)
        if not isinstance(target, list):
            raise StepError(f"Cannot append to a {type(target).__name__} value", step=step)
        target.append(deepcopy(step.value))
        return None

    if isinstance(step, RemoveStep):
        container, key = _parent(draft, step.path, step)
        _read(container, key, step)
        del container[key]
        return None

    raise StepError(f"Unsupported mutation step {step!r}")


def _incremented(current: Any, step: IncrementStep) -> Any:
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        raise StepError(f"Cannot increment non-numeric value {current!r}", step=step)
    return current + step.by


def _walk(node: Any, path: Sequence[PathKey], step: MutationStep) -> Any:
    for key in path:
        node = _read(node, key, step)
    return node


def _parent(root: Any, path: Sequence[PathKey], step: MutationStep) -> Tuple[Any, PathKey]:
    return _walk(root, path[:-1], step), path[-1]


def _read(container: Any, key: PathKey, step: MutationStep) -> Any:
    if isinstance(container, dict):
        if key not in container:
            raise StepError(f"Key {key!r} not found", step=step)
        return container[key]
    if isinstance(container, list):
        if not isinstance(key, int) or not -len(container) <= key < len(container):
            raise StepError(f"List index {key!r} out of range", step=step)
        return container[key]
    raise StepError(f"Cannot look up {key!r} in a {type(container).__name__} value", step=step)


def _assign(container: Any, key: PathKey, value: Any, step: MutationStep) -> None:
    if isinstance(container, dict):
        container[key] = value
        return
    if isinstance(container, list):
        _read(container, key, step)
        container[key] = value
        return
    raise StepError(f"Cannot set {key!r} on a {type(container).__name__} value", step=step)


__all__ = ["session_reducer"]
