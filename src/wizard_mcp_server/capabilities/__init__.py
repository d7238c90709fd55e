"""Capability registration helpers for the bundled MCP server."""

from __future__ import annotations

from wizard_mcp.server import MCPServer
from wizard_mcp.types import Prompt, Resource, ResourceTemplate, ServerInfo, Tool
from wizard_mcp_server.capabilities.prompts import code_review_prompt, greeting_prompt
from wizard_mcp_server.capabilities.resources import (
    UserDirectory,
    UserProfile,
    server_config_resource,
    user_profile_template,
)
from wizard_mcp_server.capabilities.tools import add_tool, divide_tool, echo_tool
from wizard_mcp_server.settings import Settings


def default_directory() -> UserDirectory:
    """Seed directory used by the demo server."""
    return UserDirectory(
        [
            UserProfile("42", "Arthur Dent", "arthur@example.com"),
            UserProfile("7", "Ford Prefect", "ford@example.com"),
        ]
    )


def build_capabilities(
    server_info: ServerInfo, directory: UserDirectory
) -> list[Resource | ResourceTemplate | Tool | Prompt]:
    """Instantiate all capabilities in registration order."""
    return [
        server_config_resource(server_info),
        user_profile_template(directory),
        add_tool(),
        echo_tool(),
        divide_tool(),
        greeting_prompt(),
        code_review_prompt(),
    ]


def build_server(
    settings: Settings | None = None, directory: UserDirectory | None = None
) -> MCPServer:
    """Create an :class:`MCPServer` with every bundled capability registered."""
    settings = settings or Settings()
    server = MCPServer(
        server_info=settings.server_info,
        capabilities=settings.capabilities,
        instructions=settings.instructions or None,
        logging_enabled=settings.logging_enabled,
    )
    server.register(
        *build_capabilities(settings.server_info, directory or default_directory())
    )
    return server
