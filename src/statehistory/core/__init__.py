from .config import HistoryConfig
from .edits import AddEdit, ChangeSet, Edit, RemoveEdit, ReplaceEdit, dump_edits, parse_edits
from .errors import HistoryError, HistoryUnderflowError, InvalidForkStateError, PatchError
from .history import ForkSnapshot, History, HistoryCounts
from .patching import PatchEngine, StructuralPatchEngine, apply_edits, diff_values, produce_with_edits
from .store import HistoryStore, Reducer

__all__ = [
    "AddEdit",
    "ChangeSet",
    "Edit",
    "ForkSnapshot",
    "History",
    "HistoryConfig",
    "HistoryCounts",
    "HistoryError",
    "HistoryStore",
    "HistoryUnderflowError",
    "InvalidForkStateError",
    "PatchEngine",
    "PatchError",
    "Reducer",
    "RemoveEdit",
    "ReplaceEdit",
    "StructuralPatchEngine",
    "apply_edits",
    "diff_values",
    "dump_edits",
    "parse_edits",
    "produce_with_edits",
]
