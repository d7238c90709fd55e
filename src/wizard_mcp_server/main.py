"""Entry point for the bundled MCP server."""

from __future__ import annotations

import argparse
import json
import sys

from wizard_mcp.logging import configure_logging
from wizard_mcp_server.capabilities import build_server
from wizard_mcp_server.settings import Settings
from wizard_mcp_server.transport import JsonRpcEndpoint


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(description="Wizard MCP server")
    parser.add_argument(
        "--catalog",
        action="store_true",
        help="Print the registered resources, templates, tools and prompts as JSON.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the log level from MCP_LOG_LEVEL.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Register capabilities, then print the catalog or serve JSON-RPC on stdio."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(args.log_level or settings.log_level, settings.log_json)
    server = build_server(settings)

    if args.catalog:
        print(json.dumps(server.to_catalog(), indent=2))
        return 0

    JsonRpcEndpoint(server).serve(sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
