"""Branching, reversible state history: undo/redo, forks and checkpoints."""

from statehistory.core import (
    ChangeSet,
    History,
    HistoryConfig,
    HistoryCounts,
    HistoryError,
    HistoryStore,
    HistoryUnderflowError,
    InvalidForkStateError,
    PatchError,
    StructuralPatchEngine,
)

__all__ = [
    "ChangeSet",
    "History",
    "HistoryConfig",
    "HistoryCounts",
    "HistoryError",
    "HistoryStore",
    "HistoryUnderflowError",
    "InvalidForkStateError",
    "PatchError",
    "StructuralPatchEngine",
]

__version__ = "0.1.0"
