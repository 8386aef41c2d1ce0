"""
Branching, reversible state history.

History keeps:
- undoable: change-sets that can be undone (most recent first)
- redoable: change-sets that can be redone (most recent first, filled by undo)
- a checkpoint accumulator: the last checkpointed state plus the forward edits
  applied since, coalesced into a net edit list by checkpoint()
- an optional fork: a speculative branch that commit() collapses into a single
  undo step and revert() discards

Undo/redo return edits for the caller to apply to its current state. Fork
resolution and checkpoints produce state values themselves through the
injected PatchEngine, since they already hold the full base value.

State machine:
    not forked --fork()--> forked --commit() / revert()--> not forked

Multi-step undo/redo (count > 1) moves the whole batch between the stacks,
but the returned edits and the accumulator bookkeeping only cover the
last-moved change-set. Forked undo drops one logical step from the fork log
regardless of count.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from statehistory.core.config import HistoryConfig
from statehistory.core.edits import ChangeSet, Edit
from statehistory.core.errors import HistoryError, HistoryUnderflowError, InvalidForkStateError
from statehistory.core.patching import PatchEngine, StructuralPatchEngine
from statehistory.utils.logging import log_calls

logger = logging.getLogger(__name__)


class ForkSnapshot(BaseModel):
    """State and stacks captured when a fork begins."""

    state: Any
    undoable: List[ChangeSet] = Field(default_factory=list)
    redoable: List[ChangeSet] = Field(default_factory=list)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class HistoryCounts(BaseModel):
    """Observable sizes of a History."""

    undos: int = 0
    redos: int = 0
    unchecked: int = 0


class History:
    """
    Undo/redo stacks with fork and checkpoint support.

    One instance belongs to one logical state container and is driven by a
    single writer.

    Examples:
        >>> history = History({"count": 1})
        >>> state, forward, inverse = history.patch_engine.produce(
        ...     {"count": 1}, lambda draft: draft.update(count=2)
        ... )
        >>> history.push(ChangeSet(forward=forward, inverse=inverse))
        >>> history.counts.undos
        1
        >>> [edit.model_dump() for edit in history.undo()]
        [{'op': 'replace', 'path': ['count'], 'value': 1}]
    """

    def __init__(
        self,
        initial_state: Any,
        *,
        patch_engine: Optional[PatchEngine] = None,
        config: Optional[HistoryConfig] = None,
    ) -> None:
        self.patch_engine: PatchEngine = patch_engine or StructuralPatchEngine()
        self.config = config or HistoryConfig()

        self._undoable: List[ChangeSet] = []
        self._redoable: List[ChangeSet] = []

        self.checkpoint_state: Any = initial_state
        self._checkpoint_edits: List[Edit] = []

        self._fork: Optional[ForkSnapshot] = None
        # One group of forward edits per logical step taken while forked
        self._fork_groups: List[List[Edit]] = []

    # =========================================================================
    # Observation
    # =========================================================================

    @property
    def undoable(self) -> Tuple[ChangeSet, ...]:
        return tuple(self._undoable)

    @property
    def redoable(self) -> Tuple[ChangeSet, ...]:
        return tuple(self._redoable)

    @property
    def checkpoint_edits(self) -> Tuple[Edit, ...]:
        return tuple(self._checkpoint_edits)

    @property
    def fork_edits(self) -> Tuple[Edit, ...]:
        """Forward edits accumulated while forked, relative to the fork state."""
        return tuple(edit for group in self._fork_groups for edit in group)

    @property
    def fork_snapshot(self) -> Optional[ForkSnapshot]:
        return self._fork

    @property
    def is_forked(self) -> bool:
        return self._fork is not None

    @property
    def can_undo(self) -> bool:
        return bool(self._undoable)

    @property
    def can_redo(self) -> bool:
        return bool(self._redoable)

    @property
    def counts(self) -> HistoryCounts:
        """Current undo/redo depth and number of unchecked edits."""
        return HistoryCounts(
            undos=len(self._undoable),
            redos=len(self._redoable),
            unchecked=len(self._checkpoint_edits),
        )

    # =========================================================================
    # Linear history
    # =========================================================================

    @log_calls(__name__, expected=(HistoryError,))
    def push(self, change_set: ChangeSet) -> None:
        """
        Record a new mutation.

        Clears the redo stack. Forward edits go to the fork log when forked,
        to the checkpoint accumulator otherwise.
        """
        self._undoable.insert(0, change_set)
        self._redoable = []
        self._enforce_limit()
        self._record(change_set.forward)

    @log_calls(__name__, expected=(HistoryError, ValueError))
    def undo(self, count: int = 1) -> List[Edit]:
        """
        Move ``count`` change-sets from the undo stack to the redo stack.

        Args:
            count: Number of steps to undo

        Returns:
            Inverse edits of the last-undone change-set, to be applied by the
            caller to its current state

        Raises:
            HistoryUnderflowError: If fewer than ``count`` steps are undoable
            ValueError: If ``count`` is smaller than 1
        """
        batch = self._take(self._undoable, count, "undo")
        self._undoable = self._undoable[count:]
        batch.reverse()
        self._redoable = batch + self._redoable

        last = batch[0]
        if self.is_forked:
            if self._fork_groups:
                self._fork_groups.pop()
            else:
                logger.warning("Undo past the fork point; fork log is already empty")
        else:
            self._checkpoint_edits.extend(last.inverse)
        return list(last.inverse)

    @log_calls(__name__, expected=(HistoryError, ValueError))
    def redo(self, count: int = 1) -> List[Edit]:
        """
        Move ``count`` change-sets from the redo stack back to the undo stack.

        Returns:
            Forward edits of the last-redone change-set

        Raises:
            HistoryUnderflowError: If fewer than ``count`` steps are redoable
            ValueError: If ``count`` is smaller than 1
        """
        batch = self._take(self._redoable, count, "redo")
        self._redoable = self._redoable[count:]
        batch.reverse()
        self._undoable = batch + self._undoable
        self._enforce_limit()

        last = batch[0]
        self._record(last.forward)
        return list(last.forward)

    # =========================================================================
    # Forking
    # =========================================================================

    @log_calls(__name__, expected=(HistoryError,))
    def fork(self, current_state: Any) -> None:
        """
        Start a speculative branch at ``current_state``.

        Raises:
            InvalidForkStateError: If a fork is already active
        """
        if self._fork is not None:
            raise InvalidForkStateError("fork", forked=True)
        self._fork = ForkSnapshot(
            state=current_state,
            undoable=list(self._undoable),
            redoable=list(self._redoable),
        )
        self._fork_groups = []
        logger.info("Forked history at undo depth %d", len(self._undoable))

    @log_calls(__name__, expected=(HistoryError,))
    def commit(self) -> Any:
        """
        Collapse the fork into a single undo step on the pre-fork history.

        Returns:
            The merged state value

        Raises:
            InvalidForkStateError: If no fork is active
        """
        fork = self._require_fork("commit")
        state, forward, inverse = self._replay(fork.state, self.fork_edits)

        self._undoable = [ChangeSet(forward=forward, inverse=inverse), *fork.undoable]
        self._redoable = []
        self._enforce_limit()
        self._checkpoint_edits.extend(forward)

        self._fork = None
        self._fork_groups = []
        logger.info("Committed fork as one step (%d edit(s))", len(forward))
        return state

    @log_calls(__name__, expected=(HistoryError,))
    def revert(self) -> Any:
        """
        Discard the fork and restore the stacks captured by fork().

        Returns:
            The state value as it was when the fork began

        Raises:
            InvalidForkStateError: If no fork is active
        """
        fork = self._require_fork("revert")
        discarded = len(self._fork_groups)

        self._undoable = list(fork.undoable)
        self._redoable = list(fork.redoable)
        self._fork = None
        self._fork_groups = []
        logger.info("Reverted fork, discarded %d step(s)", discarded)
        return fork.state

    # =========================================================================
    # Checkpoints
    # =========================================================================

    @log_calls(__name__)
    def checkpoint(self) -> List[Edit]:
        """
        Extract the net change since the previous checkpoint.

        Edits made inside an unresolved fork are not included; they reach the
        accumulator when the fork is committed.

        Returns:
            Coalesced forward edits from the previous checkpoint state to the
            new one (empty when nothing changed)
        """
        state, net, _ = self._replay(self.checkpoint_state, self._checkpoint_edits)
        self._checkpoint_edits = []
        self.checkpoint_state = state
        logger.info("Checkpoint produced %d net edit(s)", len(net))
        return net

    # =========================================================================
    # Internals
    # =========================================================================

    def _record(self, edits: Sequence[Edit]) -> None:
        if self.is_forked:
            self._fork_groups.append(list(edits))
        else:
            self._checkpoint_edits.extend(edits)

    def _replay(self, base: Any, edits: Sequence[Edit]) -> Tuple[Any, List[Edit], List[Edit]]:
        edits = list(edits)
        return self.patch_engine.produce(base, lambda draft: self.patch_engine.apply(draft, edits))

    def _require_fork(self, operation: str) -> ForkSnapshot:
        if self._fork is None:
            raise InvalidForkStateError(operation, forked=False)
        return self._fork

    def _enforce_limit(self) -> None:
        limit = self.config.limit
        if limit is not None and len(self._undoable) > limit:
            dropped = len(self._undoable) - limit
            self._undoable = self._undoable[:limit]
            logger.debug("Dropped %d undo step(s) over the limit of %d", dropped, limit)

    @staticmethod
    def _take(stack: List[ChangeSet], count: int, operation: str) -> List[ChangeSet]:
        if count < 1:
            raise ValueError(f"{operation} count must be at least 1, got {count}")
        if count > len(stack):
            raise HistoryUnderflowError(operation, count, len(stack))
        return stack[:count]

    def __repr__(self) -> str:
        counts = self.counts
        return (
            f"History(undos={counts.undos}, redos={counts.redos}, "
            f"unchecked={counts.unchecked}, forked={self.is_forked})"
        )


__all__ = ["ForkSnapshot", "History", "HistoryCounts"]
