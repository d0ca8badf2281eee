"""Session lifecycle handlers: create_session, list_sessions, destroy_session."""

from __future__ import annotations

import json

from berth.requests import CreateSessionRequest, SessionIdRequest
from berth.sessions import SessionRegistry
from berth.types import RemovalOutcome


class SessionHandler:
    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def create_session(self, request: CreateSessionRequest) -> str:
        session = await self._registry.create(request.to_new_session())
        return json.dumps(
            {
                "sessionId": session.id,
                "name": session.name,
                "containerName": session.container_name,
                "projectPath": session.project_path,
                "status": str(session.status),
                "runtime": session.runtime.summary(),
            },
            indent=2,
        )

    async def list_sessions(self) -> str:
        sessions = await self._registry.list()
        return json.dumps([s.to_dict() for s in sessions], indent=2)

    async def destroy_session(self, request: SessionIdRequest) -> str:
        outcome = await self._registry.remove(request.session_id)
        if outcome is RemovalOutcome.ALREADY_GONE:
            return (
                f"Session {request.session_id} cleaned up "
                "(container was already removed or stopped)"
            )
        return f"Session {request.session_id} destroyed"
