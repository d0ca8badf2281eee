"""Centralized configuration: Pydantic BaseSettings with TOML + dotenv sources.

Non-secret settings live in config.toml. Environment variables override it
using ``__`` as the nested delimiter (e.g. ``CONTAINER__IMAGE``).

Credentials are NOT configured here: they arrive per session on the
``create_session`` call, with the process environment as the ambient
fallback (see :mod:`berth.credentials`).

Priority (highest wins): init args > env vars > .env > config.toml

Usage::

    from berth.config import get_settings

    s = get_settings()
    print(s.container.image)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from berth import __version__

# ---------------------------------------------------------------------------
# Sub-models (each maps to a [section] in config.toml)
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    """Base for all config sub-models: reject unknown keys so typos fail loudly."""

    model_config = {"extra": "forbid"}


class ContainerConfig(_StrictModel):
    image: str = "claude-code:latest"
    name_prefix: str = "claude-session-"
    workspace_dir: str = "/workspace"  # mount target for the session's project path
    keepalive_command: list[str] = ["sleep", "infinity"]
    docker_timeout: float = 30.0  # seconds, for create/inspect/cp/logs/rm
    exec_timeout: float | None = None  # seconds, for agent/command exec; None = unbounded

    @field_validator("workspace_dir")
    @classmethod
    def require_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("workspace_dir must be an absolute container path")
        return v.rstrip("/") or "/"


class AgentConfig(_StrictModel):
    cli: str = "claude"
    extra_args: list[str] = []  # appended to every agent invocation


class LifecycleConfig(_StrictModel):
    # Remove labelled containers left behind by a previous (crashed) process.
    reconcile_on_startup: bool = False
    on_shutdown: Literal["destroy", "disown"] = "destroy"


class ServerConfig(_StrictModel):
    name: str = "claude-code-container"
    version: str = __version__


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        toml_file="config.toml",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    container: ContainerConfig = ContainerConfig()
    agent: AgentConfig = AgentConfig()
    lifecycle: LifecycleConfig = LifecycleConfig()
    server: ServerConfig = ServerConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init > env vars > .env > config.toml > file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_settings: Settings | None = None


def get_settings() -> Settings:
    """Lazy cached singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Clear the cached singleton (for tests)."""
    global _settings
    _settings = None
