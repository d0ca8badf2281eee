"""Session tracking: registry and status state machine."""

from berth.sessions.registry import NewSession, SessionRegistry
from berth.sessions.status import InvalidTransitionError, observe

__all__ = [
    "InvalidTransitionError",
    "NewSession",
    "SessionRegistry",
    "observe",
]
