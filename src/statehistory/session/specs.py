"""
Session file models.

A session is an initial state plus an ordered list of steps. Mutation steps
(set, increment, append, remove) are dispatched through the session reducer;
control steps (undo, redo, fork, commit, revert, checkpoint) call the matching
HistoryStore operation.

Example:
    name: counter
    initial_state: {count: 1}
    config: {limit: 50}
    steps:
      - {op: increment, path: [count]}
      - {op: fork}
      - {op: set, path: [count], value: 10}
      - {op: revert}
      - {op: checkpoint}
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from statehistory.core.config import HistoryConfig
from statehistory.core.edits import PathKey


class _StepBase(BaseModel):
    model_config = {"extra": "forbid"}


class SetStep(_StepBase):
    op: Literal["set"]
    path: List[PathKey] = Field(default_factory=list)
    value: Any = None


class IncrementStep(_StepBase):
    op: Literal["increment"]
    path: List[PathKey]
    by: Union[int, float] = 1


class AppendStep(_StepBase):
    op: Literal["append"]
    path: List[PathKey] = Field(default_factory=list)
    value: Any = None


class RemoveStep(_StepBase):
    op: Literal["remove"]
    path: List[PathKey] = Field(min_length=1)


class UndoStep(_StepBase):
    op: Literal["undo"]
    count: int = Field(default=1, ge=1)


class RedoStep(_StepBase):
    op: Literal["redo"]
    count: int = Field(default=1, ge=1)


class ForkStep(_StepBase):
    op: Literal["fork"]


class CommitStep(_StepBase):
    op: Literal["commit"]


class RevertStep(_StepBase):
    op: Literal["revert"]


class CheckpointStep(_StepBase):
    op: Literal["checkpoint"]


MutationStep = Union[SetStep, IncrementStep, AppendStep, RemoveStep]

Step = Annotated[
    Union[
        SetStep,
        IncrementStep,
        AppendStep,
        RemoveStep,
        UndoStep,
        RedoStep,
        ForkStep,
        CommitStep,
        RevertStep,
        CheckpointStep,
    ],
    Field(discriminator="op"),
]

MUTATION_OPS = frozenset({"set", "increment", "append", "remove"})


class SessionSpec(BaseModel):
    """Validated contents of a session file."""

    name: Optional[str] = None
    initial_state: Any = Field(default_factory=dict)
    config: HistoryConfig = Field(default_factory=HistoryConfig)
    steps: List[Step] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


__all__ = [
    "AppendStep",
    "CheckpointStep",
    "CommitStep",
    "ForkStep",
    "IncrementStep",
    "MUTATION_OPS",
    "MutationStep",
    "RedoStep",
    "RemoveStep",
    "RevertStep",
    "SessionSpec",
    "SetStep",
    "Step",
    "UndoStep",
]
