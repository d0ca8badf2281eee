"""Tests for settings loading: defaults, config.toml, env overrides."""

from __future__ import annotations

import pydantic
import pytest

from berth.config import ContainerConfig, LifecycleConfig, Settings, get_settings, reset_settings


@pytest.fixture
def clean_cwd(tmp_path, monkeypatch):
    """Run from an empty directory so no config.toml or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    for var in ("CONTAINER__IMAGE", "LIFECYCLE__ON_SHUTDOWN", "AGENT__CLI"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


class TestDefaults:
    def test_defaults(self, clean_cwd):
        s = Settings()
        assert s.container.image == "claude-code:latest"
        assert s.container.name_prefix == "claude-session-"
        assert s.container.workspace_dir == "/workspace"
        assert s.container.keepalive_command == ["sleep", "infinity"]
        assert s.container.exec_timeout is None
        assert s.agent.cli == "claude"
        assert s.lifecycle.reconcile_on_startup is False
        assert s.lifecycle.on_shutdown == "destroy"
        assert s.server.name == "claude-code-container"


class TestWorkspaceDir:
    def test_relative_path_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="absolute"):
            ContainerConfig(workspace_dir="workspace")

    def test_trailing_slash_stripped(self):
        assert ContainerConfig(workspace_dir="/src/").workspace_dir == "/src"

    def test_root_kept(self):
        assert ContainerConfig(workspace_dir="/").workspace_dir == "/"


class TestSources:
    def test_toml_file(self, clean_cwd):
        (clean_cwd / "config.toml").write_text(
            '[container]\nimage = "my-claude:1.2"\n\n[lifecycle]\non_shutdown = "disown"\n'
        )
        s = Settings()
        assert s.container.image == "my-claude:1.2"
        assert s.lifecycle.on_shutdown == "disown"

    def test_env_overrides_toml(self, clean_cwd, monkeypatch):
        (clean_cwd / "config.toml").write_text('[container]\nimage = "from-toml"\n')
        monkeypatch.setenv("CONTAINER__IMAGE", "from-env")
        assert Settings().container.image == "from-env"

    def test_unknown_key_in_section_fails(self, clean_cwd):
        (clean_cwd / "config.toml").write_text("[container]\nimagee = \"typo\"\n")
        with pytest.raises(pydantic.ValidationError):
            Settings()

    def test_invalid_shutdown_policy_fails(self):
        with pytest.raises(pydantic.ValidationError):
            LifecycleConfig(on_shutdown="abandon")


class TestSingleton:
    def test_cached_until_reset(self, clean_cwd):
        reset_settings()
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first
