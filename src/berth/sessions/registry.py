"""Session registry: maps session ids to containers.

The registry is the only shared mutable state in the process.  Each
session gets its own ``asyncio.Lock``; every operation that touches a
session's container runs under that lock via :meth:`SessionRegistry.session`,
so a destroy and an execute issued back-to-back on one session are
linearized.  Operations on different sessions never wait on each other.

Status is never pushed: :meth:`SessionRegistry.list` probes every container
and applies :func:`berth.sessions.status.observe`.

Use as an async context manager to get startup (daemon check, optional
orphan reconciliation) and shutdown (destroy or disown) semantics::

    async with SessionRegistry(orchestrator, resolver) as registry:
        ...
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from berth.config import ContainerConfig, LifecycleConfig
from berth.container.orchestrator import Orchestrator
from berth.credentials import CredentialResolver, RuntimeRequest
from berth.errors import EngineError, NotFoundError, ValidationError
from berth.logger import logger
from berth.sessions import status as state
from berth.types import RemovalOutcome, Session


@dataclass(frozen=True)
class NewSession:
    project_path: str
    name: str | None = None
    runtime: RuntimeRequest = field(default_factory=RuntimeRequest)


class SessionRegistry:
    def __init__(
        self,
        orchestrator: Orchestrator,
        resolver: CredentialResolver,
        *,
        container: ContainerConfig | None = None,
        lifecycle: LifecycleConfig | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._resolver = resolver
        self._container = container or ContainerConfig()
        self._lifecycle = lifecycle or LifecycleConfig()
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SessionRegistry:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    async def start(self) -> None:
        await self._orchestrator.ping()
        if self._lifecycle.reconcile_on_startup:
            await self._reconcile_orphans()

    async def shutdown(self) -> None:
        sessions = list(self._sessions.values())
        if not sessions:
            return
        if self._lifecycle.on_shutdown == "disown":
            logger.info(
                "Disowning sessions on shutdown",
                containers=[s.container_name for s in sessions],
            )
            for session in sessions:
                self._forget(session)
            return

        logger.info("Destroying sessions on shutdown", count=len(sessions))
        results = await asyncio.gather(
            *(self.remove(s.id) for s in sessions),
            return_exceptions=True,
        )
        for session, result in zip(sessions, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    "Failed to destroy session on shutdown",
                    session_id=session.id,
                    container=session.container_name,
                    err=str(result),
                )

    async def _reconcile_orphans(self) -> None:
        tracked = {s.container_name for s in self._sessions.values()}
        orphans = [name for name in await self._orchestrator.list_managed() if name not in tracked]
        for name in orphans:
            try:
                await self._orchestrator.remove(name)
            except EngineError as exc:
                logger.warning("Failed to remove orphaned container", container=name, err=str(exc))
        if orphans:
            logger.info("Reconciled orphaned containers", containers=orphans)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create(self, request: NewSession) -> Session:
        """Create a container and register it.

        The record is inserted only after the engine confirms creation, so
        a failed create leaves nothing behind in the registry.
        """
        if not request.project_path or not request.project_path.strip():
            raise ValidationError("projectPath: must be a non-empty path")
        project_path = str(Path(request.project_path).expanduser().resolve())

        session_id = uuid.uuid4().hex
        session = Session(
            id=session_id,
            name=request.name or session_id,
            container_id="",
            container_name=f"{self._container.name_prefix}{session_id[:8]}",
            project_path=project_path,
            runtime=self._resolver.resolve(request.runtime),
        )
        session.container_id = await self._orchestrator.create_container(
            project_path,
            session.container_name,
            session.runtime,
            session_id=session_id,
        )
        session.status = state.confirm_created(session.status)
        self._sessions[session_id] = session
        self._locks[session_id] = asyncio.Lock()
        logger.info(
            "Session created",
            session_id=session_id,
            container=session.container_name,
            project_path=project_path,
        )
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise NotFoundError(session_id) from None

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @contextlib.asynccontextmanager
    async def session(self, session_id: str) -> AsyncIterator[Session]:
        """Hold *session_id*'s lock for the duration of the block.

        Raises :class:`NotFoundError` up front, and again after the lock is
        acquired if the session was destroyed while this caller waited.
        Log lines emitted inside the block carry ``session_id``.
        """
        lock = self._locks.get(session_id)
        if lock is None:
            raise NotFoundError(session_id)
        async with lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError(session_id)
            with structlog.contextvars.bound_contextvars(session_id=session_id):
                yield session

    async def list(self) -> list[Session]:
        """Refresh every session's status from the engine and return them.

        Probes run concurrently without taking session locks.  A failed
        probe marks only its own session ``error``.
        """
        sessions = list(self._sessions.values())
        probes = await asyncio.gather(
            *(self._orchestrator.is_running(s.container_id) for s in sessions),
            return_exceptions=True,
        )
        refreshed: list[Session] = []
        for session, probe in zip(sessions, probes, strict=True):
            if session.id not in self._sessions:
                continue  # destroyed while the probe was in flight
            if isinstance(probe, BaseException) and not isinstance(probe, Exception):
                raise probe
            if isinstance(probe, Exception):
                logger.warning(
                    "Status probe failed",
                    session_id=session.id,
                    container=session.container_name,
                    err=str(probe),
                )
            session.status = state.observe(session.status, probe)
            refreshed.append(session)
        return refreshed

    async def remove(self, session_id: str) -> RemovalOutcome:
        """Remove the session's container, then forget the session.

        An already-absent container still counts as success.  Any other
        engine failure leaves the record in place and propagates.
        """
        async with self.session(session_id) as session:
            outcome = await self._orchestrator.remove(session.container_id)
            self._forget(session)
        logger.info("Session destroyed", session_id=session_id, outcome=str(outcome))
        return outcome

    # ------------------------------------------------------------------

    def _forget(self, session: Session) -> None:
        session.status = state.destroy(session.status)
        self._sessions.pop(session.id, None)
        self._locks.pop(session.id, None)
