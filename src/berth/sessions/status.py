"""Session status state machine.

The engine never pushes state changes.  Every non-terminal transition is
observational: it happens only when someone probes the container and feeds
the answer to :func:`observe`.

    CREATED --confirm--> RUNNING <--observe--> {RUNNING, STOPPED, ERROR}
    any non-terminal --destroy--> DESTROYED (terminal)
"""

from __future__ import annotations

from berth.types import SessionStatus

_ALLOWED: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.CREATED: frozenset({SessionStatus.RUNNING, SessionStatus.DESTROYED}),
    SessionStatus.RUNNING: frozenset(
        {SessionStatus.RUNNING, SessionStatus.STOPPED, SessionStatus.ERROR, SessionStatus.DESTROYED}
    ),
    SessionStatus.STOPPED: frozenset(
        {SessionStatus.RUNNING, SessionStatus.STOPPED, SessionStatus.ERROR, SessionStatus.DESTROYED}
    ),
    SessionStatus.ERROR: frozenset(
        {SessionStatus.RUNNING, SessionStatus.STOPPED, SessionStatus.ERROR, SessionStatus.DESTROYED}
    ),
    SessionStatus.DESTROYED: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    def __init__(self, current: SessionStatus, target: SessionStatus) -> None:
        super().__init__(f"Illegal session transition {current} -> {target}")
        self.current = current
        self.target = target


def transition(current: SessionStatus, target: SessionStatus) -> SessionStatus:
    if target not in _ALLOWED[current]:
        raise InvalidTransitionError(current, target)
    return target


def confirm_created(current: SessionStatus) -> SessionStatus:
    """The engine confirmed the container exists."""
    return transition(current, SessionStatus.RUNNING)


def destroy(current: SessionStatus) -> SessionStatus:
    return transition(current, SessionStatus.DESTROYED)


def observe(current: SessionStatus, probe: bool | Exception) -> SessionStatus:
    """Apply one ``is_running`` probe result.

    ``True`` → running, ``False`` → stopped, an exception → error.  A
    destroyed session ignores probes.  A session still in ``CREATED`` has
    no confirmed container yet, so a probe cannot promote it.
    """
    if current in (SessionStatus.DESTROYED, SessionStatus.CREATED):
        return current
    if isinstance(probe, Exception):
        return transition(current, SessionStatus.ERROR)
    return transition(current, SessionStatus.RUNNING if probe else SessionStatus.STOPPED)
