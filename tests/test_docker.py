"""Tests for the docker CLI wrapper."""

from __future__ import annotations

import subprocess
from unittest.mock import AsyncMock, patch

import pytest
from conftest import completed

from berth.container._docker import (
    ensure_docker,
    is_daemon_error,
    is_missing_container,
    is_not_running,
    run_docker,
)
from berth.errors import EngineError


class TestRunDocker:
    async def test_returns_completed_process(self):
        with patch("berth.container._docker.subprocess.run", return_value=completed(0, "ok\n")):
            result = await run_docker("ps")
        assert result.stdout == "ok\n"

    async def test_invokes_docker_binary_with_args(self):
        with patch(
            "berth.container._docker.subprocess.run", return_value=completed()
        ) as mock_run:
            await run_docker("inspect", "abc", timeout=5)
        args, kwargs = mock_run.call_args
        assert args[0] == ["docker", "inspect", "abc"]
        assert kwargs["timeout"] == 5
        assert kwargs["capture_output"] is True
        assert kwargs["env"] is None

    async def test_env_is_merged_over_process_env(self, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        with patch(
            "berth.container._docker.subprocess.run", return_value=completed()
        ) as mock_run:
            await run_docker("run", env={"ANTHROPIC_API_KEY": "sk-test"})
        env = mock_run.call_args.kwargs["env"]
        assert env["ANTHROPIC_API_KEY"] == "sk-test"
        assert env["PATH"] == "/usr/bin"

    async def test_check_raises_engine_error_with_stderr(self):
        with patch(
            "berth.container._docker.subprocess.run",
            return_value=completed(1, stderr="Error response from daemon: boom"),
        ):
            with pytest.raises(EngineError, match="boom") as exc_info:
                await run_docker("ps")
        assert exc_info.value.command == "ps"

    async def test_check_false_returns_failures(self):
        with patch(
            "berth.container._docker.subprocess.run", return_value=completed(1, stderr="nope")
        ):
            result = await run_docker("ps", check=False)
        assert result.returncode == 1

    async def test_missing_binary_is_engine_error(self):
        with patch("berth.container._docker.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(EngineError, match="not found"):
                await run_docker("ps", check=False)

    async def test_timeout_is_engine_error(self):
        with patch(
            "berth.container._docker.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["docker"], 3),
        ):
            with pytest.raises(EngineError, match="timed out"):
                await run_docker("exec", check=False, timeout=3)


class TestClassifiers:
    def test_missing_container(self):
        assert is_missing_container("Error: No such container: abc123")
        assert is_missing_container("Error response from daemon: No such object: abc123")
        assert not is_missing_container("permission denied")

    def test_not_running(self):
        assert is_not_running("Error response from daemon: Container abc is not running")
        assert not is_not_running("")

    def test_daemon_error(self):
        assert is_daemon_error("Error response from daemon: container abc is paused")
        assert is_daemon_error("Cannot connect to the Docker daemon at unix:///var/run/docker.sock")
        assert not is_daemon_error("ls: cannot access 'x': No such file or directory")


class TestEnsureDocker:
    async def test_missing_cli(self):
        with patch("berth.container._docker.docker_available", return_value=False):
            with pytest.raises(EngineError, match="not installed"):
                await ensure_docker()

    async def test_daemon_down(self):
        with (
            patch("berth.container._docker.docker_available", return_value=True),
            patch(
                "berth.container._docker.run_docker",
                new_callable=AsyncMock,
                return_value=completed(1, stderr="Cannot connect to the Docker daemon"),
            ),
        ):
            with pytest.raises(EngineError, match="not running"):
                await ensure_docker()

    async def test_daemon_up(self):
        with (
            patch("berth.container._docker.docker_available", return_value=True),
            patch(
                "berth.container._docker.run_docker",
                new_callable=AsyncMock,
                return_value=completed(0, "27.0.3\n"),
            ) as mock,
        ):
            await ensure_docker()
        assert mock.call_args.args[0] == "info"
