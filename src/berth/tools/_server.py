"""MCP server setup: exposes the router's tools over stdio."""

from __future__ import annotations

from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from berth.tools._registry import ToolRouter


def build_server(router: ToolRouter, name: str, version: str) -> Server:
    server: Server = Server(name, version=version)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return router.all_tools()

    # The router validates against the request models itself so that
    # argument errors carry the same kind tag as every other failure.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
        return await router.call(name, arguments)

    return server


async def run_server(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
