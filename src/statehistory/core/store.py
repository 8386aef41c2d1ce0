"""
Reducer binding for History.

HistoryStore holds the current state value and routes every mutation through
the patch engine so that History receives a reversible change-set for it.
Undo/redo edits returned by History are applied here; fork resolution and
checkpoints are delegated as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from statehistory.core.config import HistoryConfig
from statehistory.core.edits import ChangeSet, Edit
from statehistory.core.history import History, HistoryCounts
from statehistory.core.patching import PatchEngine

logger = logging.getLogger(__name__)

# reducer(draft, action) mutates the draft in place or returns a replacement
Reducer = Callable[[Any, Any], Any]


class HistoryStore:
    """
    State container with undo/redo, fork and checkpoint operations.

    Examples:
        >>> def reducer(draft, action):
        ...     if action == "+":
        ...         draft["count"] += 1
        >>> store = HistoryStore(reducer, {"count": 1})
        >>> store.dispatch("+")
        {'count': 2}
        >>> store.undo()
        {'count': 1}
    """

    def __init__(
        self,
        reducer: Reducer,
        initial_state: Any,
        *,
        patch_engine: Optional[PatchEngine] = None,
        config: Optional[HistoryConfig] = None,
    ) -> None:
        self.reducer = reducer
        self.history = History(initial_state, patch_engine=patch_engine, config=config)
        self._state = initial_state

    @property
    def state(self) -> Any:
        return self._state

    @property
    def counts(self) -> HistoryCounts:
        return self.history.counts

    @property
    def is_forked(self) -> bool:
        return self.history.is_forked

    def dispatch(self, action: Any) -> Any:
        """
        Run ``action`` through the reducer and record it in the history.

        Actions that leave the state unchanged are not recorded.

        Returns:
            The new state value
        """
        engine = self.history.patch_engine
        new_state, forward, inverse = engine.produce(self._state, lambda draft: self.reducer(draft, action))
        if not forward and not inverse:
            logger.debug("Action %r changed nothing; not recorded", action)
            return self._state

        self.history.push(ChangeSet(forward=forward, inverse=inverse))
        self._state = new_state
        return new_state

    def undo(self, count: int = 1) -> Any:
        """Undo ``count`` steps and return the resulting state."""
        self._state = self.history.patch_engine.apply(self._state, self.history.undo(count))
        return self._state

    def redo(self, count: int = 1) -> Any:
        """Redo ``count`` steps and return the resulting state."""
        self._state = self.history.patch_engine.apply(self._state, self.history.redo(count))
        return self._state

    def fork(self) -> None:
        self.history.fork(self._state)

    def commit(self) -> Any:
        self._state = self.history.commit()
        return self._state

    def revert(self) -> Any:
        self._state = self.history.revert()
        return self._state

    def checkpoint(self) -> List[Edit]:
        return self.history.checkpoint()


__all__ = ["HistoryStore", "Reducer"]
