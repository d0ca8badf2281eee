"""Tool registry and router for the MCP server.

The tool set is closed: :func:`berth.tools._catalog.build_catalog` builds
every entry up front, each pairing a request model with the handler that
accepts it.  :class:`ToolRouter` validates arguments into the model,
dispatches, and maps failures to error results tagged with their kind.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

import pydantic
import structlog
from mcp.types import CallToolResult, TextContent, Tool

from berth.errors import BerthError, ErrorKind, UnknownToolError, ValidationError
from berth.logger import logger


@dataclass(frozen=True)
class ToolEntry:
    """A registered tool with its request model and handler."""

    name: str
    description: str
    request_model: type[pydantic.BaseModel]
    handler: Callable[[Any], Awaitable[str]]

    def definition(self) -> Tool:
        schema = self.request_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return Tool(name=self.name, description=self.description, inputSchema=schema)


def tool_error(kind: ErrorKind, msg: str) -> CallToolResult:
    """Return an MCP error result; the text leads with the error kind tag."""
    return CallToolResult(
        content=[TextContent(type="text", text=f"[{kind}] {msg}")],
        isError=True,
    )


def parse_request(model: type[pydantic.BaseModel], arguments: dict[str, Any] | None) -> Any:
    try:
        return model.model_validate(arguments or {})
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '(arguments)'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(problems) from exc


class ToolRouter:
    def __init__(self, entries: Iterable[ToolEntry]) -> None:
        self._tools: dict[str, ToolEntry] = {e.name: e for e in entries}

    def all_tools(self) -> list[Tool]:
        return [e.definition() for e in self._tools.values()]

    def names(self) -> list[str]:
        return list(self._tools)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        with structlog.contextvars.bound_contextvars(tool=name):
            return await self._dispatch(name, arguments)

    async def _dispatch(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        # Arguments are not logged: create_session carries credentials.
        logger.info("Tool called", args=sorted(arguments or {}))
        try:
            entry = self._tools.get(name)
            if entry is None:
                raise UnknownToolError(name)
            request = parse_request(entry.request_model, arguments)
            text = await entry.handler(request)
        except BerthError as exc:
            logger.warning("Tool failed", kind=str(exc.kind), err=str(exc))
            return tool_error(exc.kind, f"Tool {name} failed: {exc}")
        except Exception as exc:
            logger.exception("Tool crashed")
            return tool_error(ErrorKind.INTERNAL_ERROR, f"Tool {name} failed: {exc}")
        return CallToolResult(content=[TextContent(type="text", text=text)])
