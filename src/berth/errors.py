"""Error taxonomy.

Every error carries an :class:`ErrorKind` so the tool router can tell the
caller which of the three classes a failure belongs to without string
matching.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_PARAMS = "invalid_params"
    INVALID_REFERENCE = "invalid_reference"
    INTERNAL_ERROR = "internal_error"


class BerthError(Exception):
    """Base for all errors surfaced to tool callers."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class ValidationError(BerthError):
    """Malformed or missing tool arguments. Never retried."""

    kind = ErrorKind.INVALID_PARAMS


class UnknownToolError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class NotFoundError(BerthError):
    """The referenced session id is not in the registry."""

    kind = ErrorKind.INVALID_REFERENCE

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class EngineError(BerthError):
    """The container engine rejected or failed a call."""

    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, *, command: str | None = None, stderr: str = "") -> None:
        detail = f"{message}: {stderr.strip()}" if stderr.strip() else message
        super().__init__(detail)
        self.command = command
        self.stderr = stderr


class TransferError(EngineError):
    """``docker cp`` failed. The message always names both paths."""

    def __init__(self, source: str, dest: str, *, direction: str, stderr: str = "") -> None:
        super().__init__(
            f"Failed to copy {source} -> {dest} ({direction})",
            command="cp",
            stderr=stderr,
        )
        self.source = source
        self.dest = dest
        self.direction = direction
