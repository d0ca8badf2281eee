"""Data models for berth."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal

Direction = Literal["to_container", "from_container"]
ProfileKind = Literal["direct", "cloud"]


class SessionStatus(StrEnum):
    CREATED = "created"  # container requested, not yet confirmed
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"  # last status probe failed
    DESTROYED = "destroyed"  # terminal


class RemovalOutcome(StrEnum):
    REMOVED = "removed"
    ALREADY_GONE = "already_gone"  # benign cleanup: engine had nothing to remove


# ---------------------------------------------------------------------------
# Credential resolution results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resolved:
    value: str
    source: Literal["explicit", "ambient"]


@dataclass(frozen=True)
class Unresolved:
    pass


UNRESOLVED = Unresolved()

Resolution = Resolved | Unresolved


@dataclass
class RuntimeProfile:
    """Credential scheme a session's agent runs under.

    Values are held in memory only. :meth:`summary` is the only view that
    leaves the process, and it reports which variables are set, never their
    values.
    """

    kind: ProfileKind
    credentials: dict[str, Resolution] = field(default_factory=dict)
    settings: dict[str, str] = field(default_factory=dict)  # non-secret env, e.g. feature flags

    # Non-secret credential entries echoed back verbatim in summaries.
    _PUBLIC_KEYS = frozenset({"AWS_REGION", "ANTHROPIC_MODEL", "ANTHROPIC_SMALL_FAST_MODEL"})

    def container_env(self) -> dict[str, str]:
        """Environment to inject into the container (resolved values only)."""
        env = dict(self.settings)
        for name, res in self.credentials.items():
            if isinstance(res, Resolved):
                env[name] = res.value
        return env

    def summary(self) -> dict[str, Any]:
        out: dict[str, Any] = {"profile": self.kind}
        for name, res in self.credentials.items():
            if isinstance(res, Resolved) and name in self._PUBLIC_KEYS:
                out[name] = res.value
            else:
                out[name] = res.source if isinstance(res, Resolved) else "unset"
        return out


@dataclass
class Session:
    id: str
    name: str
    container_id: str
    container_name: str
    project_path: str
    runtime: RuntimeProfile
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: SessionStatus = SessionStatus.CREATED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "containerId": self.container_id,
            "containerName": self.container_name,
            "projectPath": self.project_path,
            "createdAt": self.created_at.isoformat(),
            "status": str(self.status),
            "runtime": self.runtime.summary(),
        }
