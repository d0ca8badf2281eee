"""File transfer handler: transfer_files."""

from __future__ import annotations

from berth.container import Orchestrator
from berth.requests import TransferFilesRequest
from berth.sessions import SessionRegistry


class TransferHandler:
    def __init__(self, registry: SessionRegistry, orchestrator: Orchestrator) -> None:
        self._registry = registry
        self._orchestrator = orchestrator

    async def transfer_files(self, request: TransferFilesRequest) -> str:
        async with self._registry.session(request.session_id) as session:
            await self._orchestrator.copy(
                session.container_id,
                request.direction,
                request.source_path,
                request.dest_path,
            )
        where = "host -> container" if request.direction == "to_container" else "container -> host"
        return f"Transferred {request.source_path} to {request.dest_path} ({where})"
