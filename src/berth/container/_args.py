"""Docker CLI argument construction for session containers."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence

from berth.config import ContainerConfig

MANAGED_LABEL = "berth.managed=true"
SESSION_LABEL = "berth.session"


def mount_spec(source: str, target: str) -> str:
    """Bind-mount value for ``--mount``.

    Docker parses the value as one CSV record, so a field holding a comma or
    quote has to be quoted.
    """
    buf = io.StringIO()
    csv.writer(buf, lineterminator="").writerow(
        ["type=bind", f"source={source}", f"target={target}"]
    )
    return buf.getvalue()


def build_run_args(
    cfg: ContainerConfig,
    *,
    name: str,
    mount_path: str,
    session_id: str,
    env_names: Iterable[str],
) -> list[str]:
    """Build CLI args for ``docker run``.

    Env vars are passed by name only; the values come from the docker CLI's
    own environment (see :func:`berth.container._docker.run_docker`).
    """
    # --init: the keepalive process must reap exec'd children and honour SIGTERM.
    args = [
        "run",
        "-d",
        "--init",
        "--name",
        name,
        "--label",
        MANAGED_LABEL,
        "--label",
        f"{SESSION_LABEL}={session_id}",
        "--mount",
        mount_spec(mount_path, cfg.workspace_dir),
        "-w",
        cfg.workspace_dir,
    ]
    for env_name in sorted(env_names):
        args.extend(["-e", env_name])
    args.append(cfg.image)
    args.extend(cfg.keepalive_command)
    return args


def build_agent_args(
    workspace_dir: str,
    container_id: str,
    *,
    cli: str,
    prompt: str,
    tools: Sequence[str],
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Build CLI args for a non-interactive agent run via ``docker exec``.

    An empty *tools* list omits ``--allowedTools`` so the container's
    default tool set applies.  The prompt goes last, after ``--``, so a
    prompt starting with a dash is never read as an option.
    """
    args = ["exec", "-w", workspace_dir, container_id, cli, "--print"]
    if tools:
        args.extend(["--allowedTools", ",".join(tools)])
    args.extend(extra_args)
    args.extend(["--", prompt])
    return args


def build_command_args(workspace_dir: str, container_id: str, command: str) -> list[str]:
    return ["exec", "-w", workspace_dir, container_id, "sh", "-c", command]


def build_copy_args(container_id: str, direction: str, source: str, dest: str) -> list[str]:
    if direction == "to_container":
        return ["cp", source, f"{container_id}:{dest}"]
    return ["cp", f"{container_id}:{source}", dest]
