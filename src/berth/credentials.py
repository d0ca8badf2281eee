"""Credential resolution for session containers.

Precedence, per variable: explicit request field > ambient process
environment > unset.  The ambient source is only consulted for the
cloud (Bedrock) profile.

The resolver never invents a value and never rejects a request for missing
credentials: an unresolved credential simply isn't injected, and the agent
fails at execution time if it needed it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from berth.logger import logger
from berth.types import UNRESOLVED, Resolution, Resolved, RuntimeProfile


@dataclass(frozen=True)
class RuntimeRequest:
    """Runtime-profile fields of a ``create_session`` call."""

    use_cloud_profile: bool = False
    api_key: str | None = None
    aws_region: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    cloud_model: str | None = None
    cloud_small_model: str | None = None


# container env var → RuntimeRequest attribute, for the cloud profile
_CLOUD_FIELDS: dict[str, str] = {
    "AWS_REGION": "aws_region",
    "AWS_ACCESS_KEY_ID": "aws_access_key_id",
    "AWS_SECRET_ACCESS_KEY": "aws_secret_access_key",
    "AWS_SESSION_TOKEN": "aws_session_token",
    "ANTHROPIC_MODEL": "cloud_model",
    "ANTHROPIC_SMALL_FAST_MODEL": "cloud_small_model",
}


class CredentialResolver:
    def __init__(self, ambient: Mapping[str, str] | None = None) -> None:
        self._ambient = os.environ if ambient is None else ambient

    def resolve(self, request: RuntimeRequest) -> RuntimeProfile:
        if not request.use_cloud_profile:
            profile = RuntimeProfile(
                kind="direct",
                credentials={"ANTHROPIC_API_KEY": _explicit(request.api_key)},
            )
        else:
            profile = RuntimeProfile(
                kind="cloud",
                credentials={
                    env: self._explicit_or_ambient(getattr(request, attr), env)
                    for env, attr in _CLOUD_FIELDS.items()
                },
                settings={"CLAUDE_CODE_USE_BEDROCK": "1"},
            )

        unresolved = [k for k, v in profile.credentials.items() if not isinstance(v, Resolved)]
        if unresolved:
            logger.debug("Credentials left unresolved", profile=profile.kind, unresolved=unresolved)
        return profile

    def _explicit_or_ambient(self, value: str | None, env_name: str) -> Resolution:
        explicit = _explicit(value)
        if isinstance(explicit, Resolved):
            return explicit
        ambient = self._ambient.get(env_name)
        if ambient:
            return Resolved(ambient, "ambient")
        return UNRESOLVED


def _explicit(value: str | None) -> Resolution:
    return Resolved(value, "explicit") if value else UNRESOLVED
