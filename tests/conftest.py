"""Shared test fixtures for berth."""

from __future__ import annotations

import asyncio
import subprocess
from collections.abc import Sequence

import pytest
import structlog

from berth.types import RemovalOutcome, RuntimeProfile

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, not fixtures: importable by test files)
# ---------------------------------------------------------------------------


def make_settings(**overrides):
    """Create a Settings object with defaults for testing.

    Uses ``model_construct`` so no config.toml, .env or env vars are read.

    Usage::

        s = make_settings(lifecycle=LifecycleConfig(on_shutdown="disown"))
    """
    from berth.config import AgentConfig, ContainerConfig, LifecycleConfig, ServerConfig, Settings

    defaults = {
        "container": ContainerConfig(),
        "agent": AgentConfig(),
        "lifecycle": LifecycleConfig(),
        "server": ServerConfig(),
    }
    defaults.update(overrides)
    return Settings.model_construct(**defaults)


def completed(
    returncode: int = 0, stdout: str = "", stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    """A finished docker CLI call, for mocking ``run_docker``."""
    return subprocess.CompletedProcess(["docker"], returncode, stdout=stdout, stderr=stderr)


class FakeOrchestrator:
    """In-memory stand-in for :class:`ContainerOrchestrator`.

    Records every engine call in ``calls`` as ``(operation, *args)``.
    ``running`` maps container id to the probe answer: a bool, or an
    exception to raise.  Set ``gate`` to an ``asyncio.Event`` to hold
    exec/copy/logs calls until it is set.  ``log_context`` records the bound
    structlog contextvars seen by each ``exec_command``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.running: dict[str, bool | Exception] = {}
        self.managed: list[str] = []
        self.create_error: Exception | None = None
        self.remove_error: Exception | None = None
        self.remove_outcome = RemovalOutcome.REMOVED
        self.agent_output = "agent output"
        self.command_output = "command output"
        self.logs = "line 1\nline 2\n"
        self.gate: asyncio.Event | None = None
        self.probe_gate: asyncio.Event | None = None
        self.log_context: list[dict] = []
        self._counter = 0

    @property
    def engine_calls(self) -> list[str]:
        return [c[0] for c in self.calls if c[0] != "ping"]

    async def _wait_gate(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def ping(self) -> None:
        self.calls.append(("ping",))

    async def create_container(
        self, mount_path: str, name: str, runtime: RuntimeProfile, *, session_id: str
    ) -> str:
        self.calls.append(("create", mount_path, name, session_id))
        if self.create_error is not None:
            raise self.create_error
        self._counter += 1
        container_id = f"c{self._counter:011d}"
        self.running[container_id] = True
        return container_id

    async def remove(self, container_id: str) -> RemovalOutcome:
        self.calls.append(("remove", container_id))
        if self.remove_error is not None:
            raise self.remove_error
        self.running.pop(container_id, None)
        return self.remove_outcome

    async def is_running(self, container_id: str) -> bool:
        self.calls.append(("is_running", container_id))
        if self.probe_gate is not None:
            await self.probe_gate.wait()
        result = self.running.get(container_id, False)
        if isinstance(result, Exception):
            raise result
        return result

    async def list_managed(self) -> list[str]:
        self.calls.append(("list_managed",))
        return list(self.managed)

    async def exec_agent(self, container_id: str, prompt: str, tools: Sequence[str] = ()) -> str:
        self.calls.append(("exec_agent", container_id, prompt, list(tools)))
        await self._wait_gate()
        return self.agent_output

    async def exec_command(self, container_id: str, command: str) -> str:
        self.calls.append(("exec_command", container_id, command))
        self.log_context.append(structlog.contextvars.get_contextvars())
        await self._wait_gate()
        return self.command_output

    async def copy(self, container_id: str, direction: str, source: str, dest: str) -> None:
        self.calls.append(("copy", container_id, direction, source, dest))
        await self._wait_gate()

    async def get_logs(self, container_id: str, tail: int = 100) -> str:
        self.calls.append(("get_logs", container_id, tail))
        await self._wait_gate()
        return self.logs


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Ensure each test starts with a clean Settings singleton.

    Uses ``make_settings()`` to build from pure defaults: no config.toml,
    no .env, no file I/O.
    """
    monkeypatch.setattr("berth.config._settings", make_settings())


# ---------------------------------------------------------------------------
# Reusable fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_orchestrator() -> FakeOrchestrator:
    return FakeOrchestrator()


@pytest.fixture
def registry(fake_orchestrator):
    from berth.credentials import CredentialResolver
    from berth.sessions import SessionRegistry

    return SessionRegistry(fake_orchestrator, CredentialResolver(ambient={}))


@pytest.fixture
def app(fake_orchestrator):
    from berth.app import BerthApp

    return BerthApp(make_settings(), orchestrator=fake_orchestrator, ambient={})
