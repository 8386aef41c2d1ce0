"""
Session replay.

SessionRunner feeds the steps of a SessionSpec into a HistoryStore and
records what each step left behind (state, counts, checkpoint edits). Steps
that fail with a history, patch or step error are recorded with their message;
by default the run stops at the first failure.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from statehistory.core.edits import Edit
from statehistory.core.errors import HistoryError, PatchError
from statehistory.core.history import HistoryCounts
from statehistory.core.patching import PatchEngine
from statehistory.core.store import HistoryStore
from statehistory.session.errors import StepError
from statehistory.session.reducer import session_reducer
from statehistory.session.specs import MUTATION_OPS, SessionSpec

logger = logging.getLogger(__name__)


class StepRecord(BaseModel):
    """Outcome of one replayed step."""

    index: int
    op: str
    state: Any = None
    counts: HistoryCounts = Field(default_factory=HistoryCounts)
    forked: bool = False
    edits: Optional[List[Edit]] = None  # checkpoint output
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class SessionTrace(BaseModel):
    """All step records of one session run."""

    name: Optional[str] = None
    initial_state: Any = None
    records: List[StepRecord] = Field(default_factory=list)
    final_state: Any = None
    final_counts: HistoryCounts = Field(default_factory=HistoryCounts)

    @property
    def failures(self) -> List[StepRecord]:
        return [record for record in self.records if record.failed]

    @property
    def checkpoints(self) -> List[List[Edit]]:
        return [record.edits for record in self.records if record.edits is not None]


class SessionRunner:
    """Replay a SessionSpec against a fresh HistoryStore."""

    def __init__(self, spec: SessionSpec, *, patch_engine: Optional[PatchEngine] = None) -> None:
        self.spec = spec
        self.store = HistoryStore(
            session_reducer,
            spec.initial_state,
            patch_engine=patch_engine,
            config=spec.config,
        )

    def run(self, *, stop_on_error: bool = True) -> SessionTrace:
        """
        Execute every step in order.

        Args:
            stop_on_error: Stop after the first failing step instead of
                continuing with the state it left unchanged

        Returns:
            SessionTrace with one record per executed step
        """
        trace = SessionTrace(name=self.spec.name, initial_state=self.spec.initial_state)

        for index, step in enumerate(self.spec.steps):
            edits: Optional[List[Edit]] = None
            error: Optional[str] = None
            try:
                edits = self._execute(step)
            except (HistoryError, PatchError, StepError) as exc:
                error = str(exc)
                logger.info("Step %d (%s) failed: %s", index, step.op, exc)

            trace.records.append(
                StepRecord(
                    index=index,
                    op=step.op,
                    state=self.store.state,
                    counts=self.store.counts,
                    forked=self.store.is_forked,
                    edits=edits,
                    error=error,
                )
            )
            if error is not None and stop_on_error:
                break

        trace.final_state = self.store.state
        trace.final_counts = self.store.counts
        return trace

    def _execute(self, step) -> Optional[List[Edit]]:
        store = self.store
        if step.op in MUTATION_OPS:
            store.dispatch(step)
        elif step.op == "undo":
            store.undo(step.count)
        elif step.op == "redo":
            store.redo(step.count)
        elif step.op == "fork":
            store.fork()
        elif step.op == "commit":
            store.commit()
        elif step.op == "revert":
            store.revert()
        elif step.op == "checkpoint":
            return store.checkpoint()
        else:
            raise StepError(f"Unknown step op {step.op!r}", step=step)
        return None


def run_session(spec: SessionSpec, *, stop_on_error: bool = True) -> SessionTrace:
    """Convenience wrapper around ``SessionRunner(spec).run()``."""
    return SessionRunner(spec).run(stop_on_error=stop_on_error)


__all__ = ["SessionRunner", "SessionTrace", "StepRecord", "run_session"]
