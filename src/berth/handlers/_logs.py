"""Log retrieval handler: get_session_logs."""

from __future__ import annotations

from berth.container import Orchestrator
from berth.requests import GetLogsRequest
from berth.sessions import SessionRegistry


class LogsHandler:
    def __init__(self, registry: SessionRegistry, orchestrator: Orchestrator) -> None:
        self._registry = registry
        self._orchestrator = orchestrator

    async def get_session_logs(self, request: GetLogsRequest) -> str:
        async with self._registry.session(request.session_id) as session:
            logs = await self._orchestrator.get_logs(session.container_id, request.tail)
        return logs or f"No logs for session {request.session_id}"
