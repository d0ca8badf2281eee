"""Container orchestrator: uniform create/exec/copy/inspect/logs/remove.

Thin adapter over the docker CLI.  Every method maps to one (occasionally
two) engine calls and raises only :mod:`berth.errors` types.  The
orchestrator holds no session state; the registry owns identity.
"""

from __future__ import annotations

import json
import time
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from berth.config import AgentConfig, ContainerConfig
from berth.container._args import (
    MANAGED_LABEL,
    build_agent_args,
    build_command_args,
    build_copy_args,
    build_run_args,
)
from berth.container._docker import (
    ensure_docker,
    is_daemon_error,
    is_missing_container,
    is_not_running,
    run_docker,
)
from berth.errors import EngineError, TransferError, ValidationError
from berth.logger import logger
from berth.types import Direction, RemovalOutcome, RuntimeProfile

DEFAULT_LOG_TAIL = 100


@runtime_checkable
class Orchestrator(Protocol):
    """Engine contract consumed by the session registry and handlers."""

    async def ping(self) -> None: ...
    async def create_container(
        self, mount_path: str, name: str, runtime: RuntimeProfile, *, session_id: str
    ) -> str: ...
    async def remove(self, container_id: str) -> RemovalOutcome: ...
    async def is_running(self, container_id: str) -> bool: ...
    async def list_managed(self) -> list[str]: ...
    async def exec_agent(
        self, container_id: str, prompt: str, tools: Sequence[str] = ()
    ) -> str: ...
    async def exec_command(self, container_id: str, command: str) -> str: ...
    async def copy(
        self, container_id: str, direction: Direction, source: str, dest: str
    ) -> None: ...
    async def get_logs(self, container_id: str, tail: int = DEFAULT_LOG_TAIL) -> str: ...


class ContainerOrchestrator:
    """Docker-backed :class:`Orchestrator`."""

    def __init__(self, container: ContainerConfig, agent: AgentConfig) -> None:
        self._cfg = container
        self._agent = agent

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def ping(self) -> None:
        await ensure_docker()

    async def create_container(
        self,
        mount_path: str,
        name: str,
        runtime: RuntimeProfile,
        *,
        session_id: str,
    ) -> str:
        """Start a detached container with *mount_path* bind-mounted.

        Returns the engine-assigned container id.
        """
        env = runtime.container_env()
        args = build_run_args(
            self._cfg,
            name=name,
            mount_path=mount_path,
            session_id=session_id,
            env_names=env.keys(),
        )
        result = await run_docker(*args, check=False, timeout=self._cfg.docker_timeout, env=env)
        if result.returncode != 0:
            raise EngineError(
                f"Failed to create container {name} from image {self._cfg.image}",
                command="run",
                stderr=result.stderr,
            )
        container_id = result.stdout.strip()
        logger.info(
            "Container created",
            container=name,
            container_id=container_id[:12],
            mount=mount_path,
            profile=runtime.kind,
        )
        return container_id

    async def remove(self, container_id: str) -> RemovalOutcome:
        """Force-remove a container (idempotent).

        An engine report that the container is already absent or not running
        is a benign outcome, not an error.
        """
        result = await run_docker(
            "rm", "-f", container_id, check=False, timeout=self._cfg.docker_timeout
        )
        if result.returncode == 0:
            logger.info("Container removed", container_id=container_id[:12])
            return RemovalOutcome.REMOVED
        if is_missing_container(result.stderr) or is_not_running(result.stderr):
            logger.info("Container already gone", container_id=container_id[:12])
            return RemovalOutcome.ALREADY_GONE
        raise EngineError(
            f"Failed to remove container {container_id[:12]}",
            command="rm",
            stderr=result.stderr,
        )

    async def is_running(self, container_id: str) -> bool:
        """Query the engine for the container's running state.

        A container the engine doesn't know is not running.  Any other
        failure raises :class:`EngineError`: callers must not read an
        unanswered probe as "running".
        """
        start = time.monotonic()
        result = await run_docker(
            "inspect",
            "-f",
            "{{.State.Running}}",
            container_id,
            check=False,
            timeout=self._cfg.docker_timeout,
        )
        elapsed_ms = (time.monotonic() - start) * 1000
        if elapsed_ms > 500:
            logger.warning(
                "Slow docker inspect",
                container_id=container_id[:12],
                elapsed_ms=round(elapsed_ms),
            )
        if result.returncode != 0:
            if is_missing_container(result.stderr):
                return False
            raise EngineError(
                f"Failed to inspect container {container_id[:12]}",
                command="inspect",
                stderr=result.stderr,
            )
        return result.stdout.strip() == "true"

    async def list_managed(self) -> list[str]:
        """Names of all containers (running or not) carrying the managed label."""
        result = await run_docker(
            "ps",
            "-a",
            "--filter",
            f"label={MANAGED_LABEL}",
            "--format",
            "{{json .}}",
            timeout=self._cfg.docker_timeout,
        )
        names: list[str] = []
        for line in result.stdout.strip().splitlines():
            if not line:
                continue
            c = json.loads(line)
            if name := c.get("Names", ""):
                names.append(name)
        return names

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def exec_agent(self, container_id: str, prompt: str, tools: Sequence[str] = ()) -> str:
        """Run the agent non-interactively and return its complete stdout."""
        args = build_agent_args(
            self._cfg.workspace_dir,
            container_id,
            cli=self._agent.cli,
            prompt=prompt,
            tools=tools,
            extra_args=self._agent.extra_args,
        )
        logger.info("Running agent", container_id=container_id[:12], tools=list(tools) or None)
        result = await run_docker(*args, check=False, timeout=self._cfg.exec_timeout)
        if result.returncode != 0:
            raise EngineError(
                f"Agent exited with code {result.returncode} in container {container_id[:12]}",
                command="exec",
                stderr=result.stderr,
            )
        return result.stdout

    async def exec_command(self, container_id: str, command: str) -> str:
        """Run a shell command and return its output.

        A non-zero exit of the command itself is reported in the output, not
        raised; only engine failures raise.
        """
        args = build_command_args(self._cfg.workspace_dir, container_id, command)
        logger.info("Running command", container_id=container_id[:12])
        result = await run_docker(*args, check=False, timeout=self._cfg.exec_timeout)
        if result.returncode != 0 and is_daemon_error(result.stderr):
            raise EngineError(
                f"Failed to exec in container {container_id[:12]}",
                command="exec",
                stderr=result.stderr,
            )
        output = result.stdout
        if result.stderr:
            output += f"\n[stderr]\n{result.stderr}"
        if result.returncode != 0:
            output += f"\n[exit code {result.returncode}]"
        return output

    # ------------------------------------------------------------------
    # Files and logs
    # ------------------------------------------------------------------

    async def copy(self, container_id: str, direction: Direction, source: str, dest: str) -> None:
        """Copy between host and container; *direction* says where *source* lives."""
        if direction not in ("to_container", "from_container"):
            raise ValidationError(
                f"direction: must be to_container or from_container, got {direction!r}"
            )
        if not source or not dest:
            raise TransferError(source, dest, direction=direction, stderr="empty path")
        args = build_copy_args(container_id, direction, source, dest)
        try:
            result = await run_docker(*args, check=False, timeout=self._cfg.docker_timeout)
        except EngineError as exc:
            raise TransferError(source, dest, direction=direction, stderr=str(exc)) from exc
        if result.returncode != 0:
            raise TransferError(source, dest, direction=direction, stderr=result.stderr)
        logger.info(
            "Files copied",
            container_id=container_id[:12],
            direction=direction,
            source=source,
            dest=dest,
        )

    async def get_logs(self, container_id: str, tail: int = DEFAULT_LOG_TAIL) -> str:
        """Last *tail* lines of container output (stdout and stderr combined)."""
        result = await run_docker(
            "logs",
            "--tail",
            str(tail),
            container_id,
            check=False,
            timeout=self._cfg.docker_timeout,
        )
        if result.returncode != 0:
            raise EngineError(
                f"Failed to read logs for container {container_id[:12]}",
                command="logs",
                stderr=result.stderr,
            )
        return result.stdout + result.stderr
