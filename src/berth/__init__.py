"""berth: Claude Code sessions in Docker containers, served over MCP."""

__version__ = "0.1.0"
