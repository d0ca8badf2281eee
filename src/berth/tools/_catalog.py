"""The tool catalog: names, descriptions, request models, handlers."""

from __future__ import annotations

from berth.handlers import ExecutionHandler, LogsHandler, SessionHandler, TransferHandler
from berth.requests import (
    CreateSessionRequest,
    ExecuteCommandRequest,
    ExecuteInSessionRequest,
    GetLogsRequest,
    ListSessionsRequest,
    SessionIdRequest,
    TransferFilesRequest,
)
from berth.tools._registry import ToolEntry


def build_catalog(
    sessions: SessionHandler,
    execution: ExecutionHandler,
    transfer: TransferHandler,
    logs: LogsHandler,
) -> list[ToolEntry]:
    async def list_sessions(_: ListSessionsRequest) -> str:
        return await sessions.list_sessions()

    return [
        ToolEntry(
            "create_session",
            "Create a new Claude Code container session",
            CreateSessionRequest,
            sessions.create_session,
        ),
        ToolEntry(
            "execute_in_session",
            "Execute Claude Code in a specific session",
            ExecuteInSessionRequest,
            execution.execute_in_session,
        ),
        ToolEntry(
            "list_sessions",
            "List all active sessions",
            ListSessionsRequest,
            list_sessions,
        ),
        ToolEntry(
            "destroy_session",
            "Destroy a Claude Code session",
            SessionIdRequest,
            sessions.destroy_session,
        ),
        ToolEntry(
            "transfer_files",
            "Transfer files between host and container",
            TransferFilesRequest,
            transfer.transfer_files,
        ),
        ToolEntry(
            "execute_command",
            "Execute arbitrary command in container",
            ExecuteCommandRequest,
            execution.execute_command,
        ),
        ToolEntry(
            "get_session_logs",
            "Get container logs for debugging",
            GetLogsRequest,
            logs.get_session_logs,
        ),
    ]
