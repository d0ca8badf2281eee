"""Application wiring and lifecycle.

Builds the orchestrator, registry, handlers and MCP server from settings,
then serves over stdio inside the registry's context so that startup
(daemon check, optional orphan reconciliation) and shutdown (destroy or
disown sessions) always bracket the server.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
from collections.abc import Mapping

from berth.config import Settings, get_settings
from berth.container import ContainerOrchestrator, Orchestrator
from berth.credentials import CredentialResolver
from berth.handlers import ExecutionHandler, LogsHandler, SessionHandler, TransferHandler
from berth.logger import logger
from berth.sessions import SessionRegistry
from berth.tools import ToolRouter, build_catalog, build_server, run_server


class BerthApp:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        orchestrator: Orchestrator | None = None,
        ambient: Mapping[str, str] | None = None,
    ) -> None:
        s = settings or get_settings()
        self.settings = s
        self.orchestrator = orchestrator or ContainerOrchestrator(s.container, s.agent)
        self.registry = SessionRegistry(
            self.orchestrator,
            CredentialResolver(ambient),
            container=s.container,
            lifecycle=s.lifecycle,
        )
        self.router = ToolRouter(
            build_catalog(
                SessionHandler(self.registry),
                ExecutionHandler(self.registry, self.orchestrator),
                TransferHandler(self.registry, self.orchestrator),
                LogsHandler(self.registry, self.orchestrator),
            )
        )
        self._shutting_down = False
        self._serve_task: asyncio.Task[None] | None = None

    def _on_signal(self, sig_name: str) -> None:
        """Graceful shutdown handler. Second signal force-exits."""
        if self._shutting_down:
            logger.info("Force shutdown")
            os._exit(1)
        self._shutting_down = True
        logger.info("Shutdown signal received", signal=sig_name)
        if self._serve_task is not None:
            self._serve_task.cancel()

    async def run(self) -> None:
        server = build_server(self.router, self.settings.server.name, self.settings.server.version)
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._on_signal, sig.name)

        async with self.registry:
            logger.info(
                "MCP server running on stdio",
                name=self.settings.server.name,
                image=self.settings.container.image,
                tools=self.router.names(),
            )
            self._serve_task = asyncio.ensure_future(run_server(server))
            with contextlib.suppress(asyncio.CancelledError):
                await self._serve_task
        logger.info("Shutdown complete")
