"""
Diff engine and patch applier for JSON-like state values.

The history engine consumes these through the PatchEngine protocol:
- produce(base, recipe): run a mutation against a draft copy of ``base`` and
  return the new value with its forward and inverse edits
- apply(state, edits): return a new value with ``edits`` applied

StructuralPatchEngine is the default implementation. It understands dicts,
lists and scalars; anything else is compared with ``==`` and replaced whole.

Diff rules:
- dict vs dict: removed keys -> remove, new keys -> add, shared keys recurse
- list vs list: shared indices recurse, extra target items -> add (ascending),
  missing target items -> remove (descending, so indices stay valid)
- anything else: replace when the values differ (type-sensitive)
"""

from __future__ import annotations

import math
from copy import deepcopy
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from statehistory.core.edits import AddEdit, Edit, PathKey, RemoveEdit, ReplaceEdit
from statehistory.core.errors import PatchError

# Mutates the draft in place, or returns a replacement value
Recipe = Callable[[Any], Any]


class PatchEngine(Protocol):
    """Diff engine + patch applier contract consumed by History."""

    def produce(self, base: Any, recipe: Recipe) -> Tuple[Any, List[Edit], List[Edit]]:
        """Return ``(new_state, forward, inverse)`` for ``recipe`` applied to ``base``."""
        ...

    def apply(self, state: Any, edits: Sequence[Edit]) -> Any:
        """Return a new value with ``edits`` applied, leaving ``state`` untouched."""
        ...


class StructuralPatchEngine:
    """Default PatchEngine: deep-copy drafts and structural diffs."""

    def produce(self, base: Any, recipe: Recipe) -> Tuple[Any, List[Edit], List[Edit]]:
        draft = deepcopy(base)
        result = recipe(draft)
        new_state = draft if result is None else result
        forward = diff_values(base, new_state)
        inverse = diff_values(new_state, base)
        return new_state, forward, inverse

    def apply(self, state: Any, edits: Sequence[Edit]) -> Any:
        return apply_edits_in_place(deepcopy(state), edits)


def diff_values(base: Any, target: Any, path: Optional[Sequence[PathKey]] = None) -> List[Edit]:
    """
    Compute the edits that turn ``base`` into ``target``.

    Args:
        base: Starting value
        target: Desired value
        path: Prefix for every generated path (defaults to the root)

    Returns:
        Edits in application order; empty when the values are equal
    """
    edits: List[Edit] = []
    _diff_into(edits, list(path or []), base, target)
    return edits


def _diff_into(edits: List[Edit], path: List[PathKey], base: Any, target: Any) -> None:
    if isinstance(base, dict) and isinstance(target, dict):
        for key, value in base.items():
            if key in target:
                _diff_into(edits, path + [key], value, target[key])
            else:
                edits.append(RemoveEdit(path=path + [key]))
        for key, value in target.items():
            if key not in base:
                edits.append(AddEdit(path=path + [key], value=deepcopy(value)))
        return

    if isinstance(base, list) and isinstance(target, list):
        shared = min(len(base), len(target))
        for index in range(shared):
            _diff_into(edits, path + [index], base[index], target[index])
        for index in range(shared, len(target)):
            edits.append(AddEdit(path=path + [index], value=deepcopy(target[index])))
        for index in range(len(base) - 1, shared - 1, -1):
            edits.append(RemoveEdit(path=path + [index]))
        return

    if not _same_value(base, target):
        edits.append(ReplaceEdit(path=path, value=deepcopy(target)))


def _same_value(left: Any, right: Any) -> bool:
    # 1 == True and 1 == 1.0 in Python, but they are different states
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    if isinstance(left, float) and math.isnan(left) and math.isnan(right):
        return True
    return left == right


def apply_edits_in_place(root: Any, edits: Sequence[Edit]) -> Any:
    """
    Apply ``edits`` to ``root``, mutating containers in place.

    Returns:
        The resulting root value (a new object when an edit replaced the root)

    Raises:
        PatchError: If an edit addresses a path that does not exist
    """
    for edit in edits:
        root = _apply_edit(root, edit)
    return root


def _apply_edit(root: Any, edit: Edit) -> Any:
    if not edit.path:
        if edit.op == "remove":
            raise PatchError("Cannot remove the root value", edit=edit)
        return deepcopy(edit.value)

    parent = _resolve(root, edit.path[:-1], edit)
    key = edit.path[-1]

    if isinstance(parent, dict):
        if edit.op != "add" and key not in parent:
            raise PatchError(f"Key {key!r} not found", edit=edit)
        if edit.op == "remove":
            del parent[key]
        else:
            parent[key] = deepcopy(edit.value)
        return root

    if isinstance(parent, list):
        index = _list_index(parent, key, edit, allow_end=edit.op == "add")
        if edit.op == "add":
            parent.insert(index, deepcopy(edit.value))
        elif edit.op == "replace":
            parent[index] = deepcopy(edit.value)
        else:
            del parent[index]
        return root

    raise PatchError(f"Cannot {edit.op} inside a {type(parent).__name__} value", edit=edit)


def _resolve(root: Any, path: Sequence[PathKey], edit: Edit) -> Any:
    node = root
    for key in path:
        if isinstance(node, dict):
            if key not in node:
                raise PatchError(f"Key {key!r} not found", edit=edit)
            node = node[key]
        elif isinstance(node, list):
            node = node[_list_index(node, key, edit)]
        else:
            raise PatchError(f"Cannot descend into a {type(node).__name__} value", edit=edit)
    return node


def _list_index(items: list, key: PathKey, edit: Edit, *, allow_end: bool = False) -> int:
    if allow_end and key == "-":
        return len(items)
    if isinstance(key, bool) or not isinstance(key, int):
        raise PatchError(f"List index must be an integer, got {key!r}", edit=edit)
    upper = len(items) if allow_end else len(items) - 1
    if key < 0 or key > upper:
        raise PatchError(f"List index {key} out of range", edit=edit)
    return key


_DEFAULT_ENGINE = StructuralPatchEngine()


def produce_with_edits(base: Any, recipe: Recipe) -> Tuple[Any, List[Edit], List[Edit]]:
    """Module-level shortcut for ``StructuralPatchEngine().produce``."""
    return _DEFAULT_ENGINE.produce(base, recipe)


def apply_edits(state: Any, edits: Sequence[Edit]) -> Any:
    """Module-level shortcut for ``StructuralPatchEngine().apply``."""
    return _DEFAULT_ENGINE.apply(state, edits)


__all__ = [
    "PatchEngine",
    "PatchError",
    "Recipe",
    "StructuralPatchEngine",
    "apply_edits",
    "apply_edits_in_place",
    "diff_values",
    "produce_with_edits",
]
