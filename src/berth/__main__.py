"""Entry point for `python -m berth` / `berth`.

Subcommands:
    berth              Serve MCP over stdio (default)
    berth serve        Same as above
    berth check        Verify the Docker daemon is reachable, exit 0/1
"""

from __future__ import annotations

import argparse
import asyncio
import sys


def _serve() -> None:
    from berth.app import BerthApp

    app = BerthApp()
    asyncio.run(app.run())


def _check() -> None:
    from berth.container import ensure_docker
    from berth.errors import EngineError

    try:
        asyncio.run(ensure_docker())
    except EngineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    print("Docker daemon is reachable", file=sys.stderr)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="berth",
        description="Claude Code container sessions over MCP",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Serve MCP tools over stdio (default)")
    sub.add_parser("check", help="Check that the Docker daemon is reachable")
    args = parser.parse_args()

    if args.command == "check":
        _check()
    else:
        _serve()


if __name__ == "__main__":
    main()
