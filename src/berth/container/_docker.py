"""Docker CLI helpers: subprocess wrappers used by the orchestrator.

All public functions are async so they don't block the event loop.
The underlying subprocess calls run in a thread via ``asyncio.to_thread``.

Engine-specific failure shapes (missing binary, subprocess timeout, non-zero
exit) are converted to :class:`~berth.errors.EngineError` here so nothing
above this module has to know about ``subprocess``.
"""

from __future__ import annotations

import asyncio
import os
import re
import shutil
import subprocess

from berth.errors import EngineError
from berth.logger import logger

_MISSING_RE = re.compile(r"No such (container|object)", re.IGNORECASE)
_NOT_RUNNING_RE = re.compile(r"is not running", re.IGNORECASE)
_DAEMON_ERROR_RE = re.compile(
    r"Error response from daemon|Cannot connect to the Docker daemon|No such container",
    re.IGNORECASE,
)


def docker_available() -> bool:
    """Check if ``docker`` is on PATH."""
    return shutil.which("docker") is not None


def is_missing_container(stderr: str) -> bool:
    return bool(_MISSING_RE.search(stderr))


def is_not_running(stderr: str) -> bool:
    return bool(_NOT_RUNNING_RE.search(stderr))


def is_daemon_error(stderr: str) -> bool:
    """True when stderr came from the docker CLI/daemon, not the exec'd process."""
    return bool(_DAEMON_ERROR_RE.search(stderr))


def _run_docker_sync(
    *args: str,
    timeout: float | None,
    env: dict[str, str] | None,
) -> subprocess.CompletedProcess[str]:
    """Run a ``docker`` CLI command (blocking: internal only)."""
    return subprocess.run(
        ["docker", *args],
        capture_output=True,
        text=True,
        timeout=timeout,
        env={**os.environ, **env} if env else None,
    )


async def run_docker(
    *args: str,
    check: bool = True,
    timeout: float | None = 30,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a ``docker`` CLI command without blocking the event loop.

    *env* is merged over the current process environment for the CLI
    process only.  Combined with ``-e NAME`` (no value) on ``docker run``
    this hands values to the container without putting them on argv.

    With ``check=True`` a non-zero exit raises :class:`EngineError`.
    """
    command = args[0] if args else ""
    try:
        result = await asyncio.to_thread(_run_docker_sync, *args, timeout=timeout, env=env)
    except FileNotFoundError as exc:
        raise EngineError("docker CLI not found on PATH", command=command) from exc
    except subprocess.TimeoutExpired as exc:
        raise EngineError(f"docker {command} timed out after {timeout}s", command=command) from exc

    if check and result.returncode != 0:
        raise EngineError(
            f"docker {command} exited with code {result.returncode}",
            command=command,
            stderr=result.stderr,
        )
    return result


async def ensure_docker() -> None:
    """Verify the Docker daemon is reachable."""
    if not docker_available():
        raise EngineError("Docker is required but the docker CLI is not installed")
    result = await run_docker("info", "--format", "{{.ServerVersion}}", check=False)
    if result.returncode != 0:
        raise EngineError(
            "Docker is required but not running. Start with: sudo systemctl start docker",
            command="info",
            stderr=result.stderr,
        )
    logger.debug("Docker daemon is running", server_version=result.stdout.strip())
