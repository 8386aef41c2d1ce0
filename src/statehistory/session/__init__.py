"""
Scripted history sessions.

- specs: pydantic models of a session file
- reducer: applies mutation steps to a draft state
- runner: replays a session against a HistoryStore and records a trace
"""

from statehistory.session.errors import StepError
from statehistory.session.reducer import session_reducer
from statehistory.session.runner import SessionRunner, SessionTrace, StepRecord, run_session
from statehistory.session.specs import SessionSpec, Step

__all__ = [
    "SessionRunner",
    "SessionSpec",
    "SessionTrace",
    "Step",
    "StepError",
    "StepRecord",
    "run_session",
    "session_reducer",
]
