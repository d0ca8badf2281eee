"""Execution handlers: execute_in_session, execute_command."""

from __future__ import annotations

from berth.container import Orchestrator
from berth.requests import ExecuteCommandRequest, ExecuteInSessionRequest
from berth.sessions import SessionRegistry


class ExecutionHandler:
    def __init__(self, registry: SessionRegistry, orchestrator: Orchestrator) -> None:
        self._registry = registry
        self._orchestrator = orchestrator

    async def execute_in_session(self, request: ExecuteInSessionRequest) -> str:
        async with self._registry.session(request.session_id) as session:
            return await self._orchestrator.exec_agent(
                session.container_id, request.prompt, request.tools
            )

    async def execute_command(self, request: ExecuteCommandRequest) -> str:
        async with self._registry.session(request.session_id) as session:
            return await self._orchestrator.exec_command(session.container_id, request.command)
