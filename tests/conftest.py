"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from wizard_mcp.server import MCPServer
from wizard_mcp.types import Prompt, Resource, ResourceTemplate, Tool
from wizard_mcp_server.capabilities import build_server
from wizard_mcp_server.settings import Settings


def _add(arguments: dict[str, Any], _context: object) -> dict[str, Any]:
    total = arguments.get("a", 0) + arguments.get("b", 0)
    return {"content": [{"type": "text", "text": str(total)}]}


def _explode(_arguments: dict[str, Any], _context: object) -> dict[str, Any]:
    raise RuntimeError("tool exploded")


def _greet(arguments: dict[str, Any], context: object) -> dict[str, Any]:
    return {
        "messages": [
            {
                "role": "user",
                "content": {"type": "text", "text": f"Hello {arguments['name']}"},
            }
        ],
        "context": context,
    }


def _broken_prompt(_arguments: dict[str, Any], _context: object) -> dict[str, Any]:
    raise RuntimeError("prompt exploded")


def _read_static(uri: str, context: object) -> dict[str, Any]:
    return {"contents": [{"uri": uri, "text": "static", "context": context}]}


def _read_profile(uri: str, variables: dict[str, str], _context: object) -> dict[str, Any]:
    return {"contents": [{"uri": uri, "text": f"profile {variables['userId']}"}]}


@pytest.fixture()
def server() -> MCPServer:
    """Provide a server with one capability of each kind plus failing handlers."""
    instance = MCPServer()
    instance.register_resource(
        Resource(
            uri="test://resource",
            name="test-resource",
            read_handler=_read_static,
            metadata={"description": "Static test resource"},
        )
    )
    instance.register_resource_template(
        ResourceTemplate(
            name="profile",
            uri_template="users://{userId}/profile",
            read_handler=_read_profile,
            metadata={"mimeType": "text/plain"},
            list_handler=lambda _context: [
                {"uri": "users://1/profile", "name": "profile-1"}
            ],
            completion_handlers={
                "userId": lambda value, _context: [
                    candidate for candidate in ("1", "12", "2") if candidate.startswith(value)
                ]
            },
        )
    )
    instance.register_tool(
        Tool(name="add", handler=_add, description="Add two numbers.")
    )
    instance.register_tool(Tool(name="explode", handler=_explode))
    instance.register_prompt(
        Prompt(
            name="greet",
            handler=_greet,
            argument_schema={
                "name": {"description": "Who to greet.", "required": True},
                "tone": {"description": "Optional tone."},
            },
            description="Greet someone.",
        )
    )
    instance.register_prompt(Prompt(name="broken", handler=_broken_prompt))
    return instance


@pytest.fixture()
def demo_server() -> MCPServer:
    """Provide the bundled demo server with logging disabled."""
    return build_server(Settings(logging_enabled=False))
