"""Tests for application wiring and the serve lifecycle."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

from conftest import FakeOrchestrator, make_settings

from berth.app import BerthApp
from berth.config import LifecycleConfig
from berth.sessions import NewSession


def test_router_exposes_full_catalog(app):
    assert len(app.router.names()) == 7


async def test_run_brackets_server_with_startup_and_shutdown(app, fake_orchestrator, tmp_path):
    async def serve(_server):
        await app.registry.create(NewSession(str(tmp_path)))

    with patch("berth.app.run_server", AsyncMock(side_effect=serve)):
        await app.run()

    assert fake_orchestrator.calls[0] == ("ping",)
    assert fake_orchestrator.engine_calls[-1] == "remove"
    assert len(app.registry) == 0


async def test_run_disowns_when_configured(tmp_path):
    orch = FakeOrchestrator()
    app = BerthApp(
        make_settings(lifecycle=LifecycleConfig(on_shutdown="disown")),
        orchestrator=orch,
        ambient={},
    )

    async def serve(_server):
        await app.registry.create(NewSession(str(tmp_path)))

    with patch("berth.app.run_server", AsyncMock(side_effect=serve)):
        await app.run()

    assert "remove" not in orch.engine_calls


async def test_signal_stops_server(app, fake_orchestrator):
    async def serve(_server):
        app._on_signal("SIGTERM")
        await asyncio.sleep(3600)

    with patch("berth.app.run_server", AsyncMock(side_effect=serve)):
        await asyncio.wait_for(app.run(), timeout=5)

    assert app._shutting_down


async def test_second_signal_force_exits(app):
    app._on_signal("SIGINT")
    with patch("berth.app.os._exit") as exit_mock:
        app._on_signal("SIGINT")
    exit_mock.assert_called_once_with(1)
