"""
Edit and change-set models.

An edit is an atomic instruction addressed by a path into a JSON-like state
value:
- ReplaceEdit: set the value at a path
- AddEdit: insert a value at a path (dict key or list index)
- RemoveEdit: delete the value at a path

A ChangeSet pairs the forward edits of one mutation with the inverse edits
that undo it. The history engine treats both as opaque data.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, List, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

# A path element: dict key or list index
PathKey = Union[int, str]


class ReplaceEdit(BaseModel):
    """Replace the value found at ``path``."""

    op: Literal["replace"] = "replace"
    path: List[PathKey] = Field(default_factory=list)
    value: Any = None

    model_config = {"frozen": True}


class AddEdit(BaseModel):
    """Insert ``value`` at ``path``."""

    op: Literal["add"] = "add"
    path: List[PathKey] = Field(default_factory=list)
    value: Any = None

    model_config = {"frozen": True}


class RemoveEdit(BaseModel):
    """Delete the value found at ``path``."""

    op: Literal["remove"] = "remove"
    path: List[PathKey] = Field(default_factory=list)

    model_config = {"frozen": True}


Edit = Annotated[Union[ReplaceEdit, AddEdit, RemoveEdit], Field(discriminator="op")]

_EDIT_LIST = TypeAdapter(List[Edit])


class ChangeSet(BaseModel):
    """
    Reversible record of one mutation.

    Applying ``forward`` to state A yields state B; applying ``inverse`` to B
    yields A again.
    """

    forward: List[Edit] = Field(default_factory=list)
    inverse: List[Edit] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        """True when the mutation changed nothing."""
        return not self.forward and not self.inverse

    @property
    def edit_count(self) -> int:
        return len(self.forward)


def parse_edits(raw: Iterable[Any]) -> List[Edit]:
    """
    Validate plain dicts (or edit models) into a list of edits.

    Args:
        raw: Items like ``{"op": "replace", "path": ["count"], "value": 3}``

    Returns:
        List of ReplaceEdit / AddEdit / RemoveEdit models

    Raises:
        pydantic.ValidationError: If an item has an unknown op or bad path
    """
    return _EDIT_LIST.validate_python(list(raw))


def dump_edits(edits: Iterable[Edit]) -> List[dict]:
    """Return the plain dict form of ``edits``."""
    return [edit.model_dump() for edit in edits]


__all__ = [
    "AddEdit",
    "ChangeSet",
    "Edit",
    "PathKey",
    "RemoveEdit",
    "ReplaceEdit",
    "dump_edits",
    "parse_edits",
]
