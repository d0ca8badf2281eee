"""Per-tool handlers.

Each handler resolves the session through the registry (raising
``NotFoundError`` before any engine call when it's unknown), runs the
orchestrator call under the session's lock, and formats the response text.
Only ``SessionHandler.list_sessions`` updates session status.
"""

from berth.handlers._execution import ExecutionHandler
from berth.handlers._logs import LogsHandler
from berth.handlers._session import SessionHandler
from berth.handlers._transfer import TransferHandler

__all__ = [
    "ExecutionHandler",
    "LogsHandler",
    "SessionHandler",
    "TransferHandler",
]
