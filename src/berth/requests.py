"""Typed tool requests.

One model per tool.  Field aliases are the camelCase names on the wire;
the JSON schemas advertised in the tool catalog are generated from these
models, so the catalog and the validation can't drift apart.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from berth.container import DEFAULT_LOG_TAIL
from berth.credentials import RuntimeRequest
from berth.sessions import NewSession


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class CreateSessionRequest(_Request):
    project_path: str = Field(
        alias="projectPath", min_length=1, description="Path to mount in the container"
    )
    session_name: str | None = Field(
        default=None, alias="sessionName", description="Optional session name"
    )
    api_key: str | None = Field(
        default=None, alias="apiKey", description="Anthropic API key for this session"
    )
    use_bedrock: bool = Field(
        default=False, alias="useBedrock", description="Use AWS Bedrock instead of Anthropic API"
    )
    aws_region: str | None = Field(
        default=None, alias="awsRegion", description="AWS region for Bedrock"
    )
    aws_access_key_id: str | None = Field(
        default=None, alias="awsAccessKeyId", description="AWS access key ID"
    )
    aws_secret_access_key: str | None = Field(
        default=None, alias="awsSecretAccessKey", description="AWS secret access key"
    )
    aws_session_token: str | None = Field(
        default=None, alias="awsSessionToken", description="AWS session token"
    )
    bedrock_model: str | None = Field(
        default=None, alias="bedrockModel", description="Bedrock model ID"
    )
    bedrock_small_model: str | None = Field(
        default=None, alias="bedrockSmallModel", description="Bedrock small/fast model ID"
    )

    def to_new_session(self) -> NewSession:
        return NewSession(
            project_path=self.project_path,
            name=self.session_name,
            runtime=RuntimeRequest(
                use_cloud_profile=self.use_bedrock,
                api_key=self.api_key,
                aws_region=self.aws_region,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
                aws_session_token=self.aws_session_token,
                cloud_model=self.bedrock_model,
                cloud_small_model=self.bedrock_small_model,
            ),
        )


class SessionIdRequest(_Request):
    session_id: str = Field(alias="sessionId", min_length=1, description="Session ID")


class ListSessionsRequest(_Request):
    pass


class ExecuteInSessionRequest(SessionIdRequest):
    prompt: str = Field(description="Prompt for Claude Code")
    tools: list[str] = Field(
        default_factory=list,
        description="Specific tools to enable (empty: the container's default set)",
    )


class ExecuteCommandRequest(SessionIdRequest):
    command: str = Field(min_length=1, description="Command to execute")


class TransferFilesRequest(SessionIdRequest):
    direction: Literal["to_container", "from_container"] = Field(description="Transfer direction")
    source_path: str = Field(alias="sourcePath", min_length=1, description="Source path")
    dest_path: str = Field(alias="destPath", min_length=1, description="Destination path")


class GetLogsRequest(SessionIdRequest):
    tail: int = Field(default=DEFAULT_LOG_TAIL, ge=1, description="Number of lines to tail")
