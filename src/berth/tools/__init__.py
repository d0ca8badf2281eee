"""MCP tool surface: catalog, router, stdio server."""

from berth.tools._catalog import build_catalog
from berth.tools._registry import ToolEntry, ToolRouter, tool_error
from berth.tools._server import build_server, run_server

__all__ = [
    "ToolEntry",
    "ToolRouter",
    "build_catalog",
    "build_server",
    "run_server",
    "tool_error",
]
