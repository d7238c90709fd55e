"""Tests for the MCP server operations."""

from __future__ import annotations

from typing import Any

import pytest

from wizard_mcp.errors import (
    DuplicateRegistrationError,
    Err,
    ErrorCode,
    MCPError,
    Ok,
    raise_mcp_error,
)
from wizard_mcp.negotiation import LATEST_PROTOCOL_VERSION
from wizard_mcp.server import MCPServer
from wizard_mcp.types import Prompt, Resource, ResourceTemplate, ServerInfo, Tool


def _noop_tool(_arguments: dict[str, Any], _context: object) -> dict[str, Any]:
    return {"content": []}


def _unwrap(outcome: object) -> Any:
    assert isinstance(outcome, Ok), outcome
    return outcome.value


class TestRegistration:
    """Registration and listing behavior."""

    def test_register_and_list_tools(self) -> None:
        """Registered tools are listed with schema and optional description."""
        # Arrange
        server = MCPServer()

        # Act
        server.register_tool(
            Tool(name="test-tool", handler=_noop_tool, description="Test tool description")
        )
        server.register_tool(Tool(name="bare", handler=_noop_tool))

        # Assert
        tools = _unwrap(server.list_tools())["tools"]
        assert tools == [
            {
                "name": "test-tool",
                "inputSchema": {"type": "object"},
                "description": "Test tool description",
            },
            {"name": "bare", "inputSchema": {"type": "object"}},
        ]

    def test_custom_input_schema_is_kept(self) -> None:
        """A supplied input schema replaces the default."""
        schema = {"type": "object", "properties": {"a": {"type": "number"}}}
        server = MCPServer()
        server.register_tool(Tool(name="t", handler=_noop_tool, input_schema=schema))

        assert _unwrap(server.list_tools())["tools"][0]["inputSchema"] == schema

    @pytest.mark.parametrize(
        "capability",
        [
            Resource(uri="test://dup", name="dup", read_handler=lambda uri, ctx: {}),
            ResourceTemplate(
                name="dup",
                uri_template="dup://{id}",
                read_handler=lambda uri, variables, ctx: {},
            ),
            Tool(name="dup", handler=_noop_tool),
            Prompt(name="dup", handler=lambda arguments, ctx: {}),
        ],
    )
    def test_prevents_duplicate_registration(self, capability: Any) -> None:
        """Every registry rejects a second registration of the same key."""
        # Arrange
        server = MCPServer()
        server.register(capability)

        # Act / Assert
        with pytest.raises(DuplicateRegistrationError):
            server.register(capability)

    def test_register_rejects_unknown_capability_types(self) -> None:
        """Only the four capability categories can be registered."""
        with pytest.raises(TypeError):
            MCPServer().register("not a capability")  # type: ignore[arg-type]

    def test_catalog_lists_every_category(self, server: MCPServer) -> None:
        """The catalog mirrors registration order without invoking handlers."""
        catalog = server.to_catalog()

        assert [tool["name"] for tool in catalog["tools"]] == ["add", "explode"]
        assert [prompt["name"] for prompt in catalog["prompts"]] == ["greet", "broken"]
        assert catalog["resources"][0]["uri"] == "test://resource"
        assert catalog["resourceTemplates"][0]["uriTemplate"] == "users://{userId}/profile"


class TestInitialize:
    """Handshake behavior."""

    def test_reports_server_identity_and_capabilities(self) -> None:
        """Configured identity, capabilities and instructions are returned."""
        server = MCPServer(
            server_info=ServerInfo(name="Test Server", version="2.0.0"),
            capabilities={"tools": {"listChanged": False}},
            instructions="Call add for sums.",
        )

        result = _unwrap(
            server.initialize({"name": "client"}, {"resources": {}}, "2024-10-07")
        )

        assert result == {
            "protocolVersion": "2024-10-07",
            "serverInfo": {"name": "Test Server", "version": "2.0.0"},
            "capabilities": {"tools": {"listChanged": False}},
            "instructions": "Call add for sums.",
        }

    def test_falls_back_to_latest_protocol_version(self) -> None:
        """Unsupported versions are replaced without an error."""
        result = _unwrap(MCPServer().initialize({}, {}, "unsupported-version"))

        assert result["protocolVersion"] == LATEST_PROTOCOL_VERSION
        assert "instructions" not in result
        assert result["capabilities"] == {"resources": {}, "tools": {}, "prompts": {}}


class TestResources:
    """Resource listing and reading."""

    def test_lists_fixed_then_template_resources(self, server: MCPServer) -> None:
        """Template list results follow fixed resources and carry template metadata."""
        resources = _unwrap(server.list_resources())["resources"]

        assert resources == [
            {
                "uri": "test://resource",
                "name": "test-resource",
                "description": "Static test resource",
            },
            {"uri": "users://1/profile", "name": "profile-1", "mimeType": "text/plain"},
        ]

    def test_metadata_does_not_override_uri_or_name(self) -> None:
        """Descriptor fields win over colliding metadata keys."""
        server = MCPServer()
        server.register_resource(
            Resource(
                uri="test://a",
                name="a",
                read_handler=lambda uri, ctx: {},
                metadata={"uri": "test://spoofed", "name": "spoofed", "mimeType": "x/y"},
            )
        )

        assert _unwrap(server.list_resources())["resources"] == [
            {"uri": "test://a", "name": "a", "mimeType": "x/y"}
        ]

    def test_lists_templates(self, server: MCPServer) -> None:
        """Template descriptors include name, template and metadata."""
        templates = _unwrap(server.list_resource_templates())["resourceTemplates"]

        assert templates == [
            {
                "name": "profile",
                "uriTemplate": "users://{userId}/profile",
                "mimeType": "text/plain",
            }
        ]

    def test_exact_uri_wins(self, server: MCPServer) -> None:
        """A fixed resource is read with the call context passed through."""
        contents = _unwrap(server.read_resource("test://resource", context="ctx"))

        assert contents == {
            "contents": [{"uri": "test://resource", "text": "static", "context": "ctx"}]
        }

    def test_template_match_extracts_variables(self, server: MCPServer) -> None:
        """A templated URI is resolved through the first matching template."""
        contents = _unwrap(server.read_resource("users://42/profile"))

        assert contents["contents"][0]["text"] == "profile 42"

    def test_first_registered_template_wins(self) -> None:
        """Overlapping templates are not ranked; registration order decides."""
        server = MCPServer()
        server.register_resource_template(
            ResourceTemplate(
                name="generic",
                uri_template="items://{kind}/{id}",
                read_handler=lambda uri, variables, ctx: "generic",
            )
        )
        server.register_resource_template(
            ResourceTemplate(
                name="books",
                uri_template="items://books/{id}",
                read_handler=lambda uri, variables, ctx: "books",
            )
        )

        assert _unwrap(server.read_resource("items://books/1")) == "generic"

    def test_unknown_uri_is_invalid_params(self, server: MCPServer) -> None:
        """URIs matching nothing fail with InvalidParams."""
        outcome = server.read_resource("users://42/details")

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INVALID_PARAMS
        assert outcome.error.message == "Resource not found: users://42/details"

    def test_unparseable_uri_is_invalid_params(self, server: MCPServer) -> None:
        """URIs the URI parser rejects fail with InvalidParams."""
        outcome = server.read_resource("http://[::1/broken")

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INVALID_PARAMS
        assert outcome.error.message.startswith("Invalid URI")


class TestTools:
    """Tool invocation and failure containment."""

    def test_runs_registered_tool(self, server: MCPServer) -> None:
        """Executing a registered tool returns its payload."""
        # Act
        result = _unwrap(server.call_tool("add", {"a": 2, "b": 3}))

        # Assert
        assert result["content"][0]["text"] == "5"

    def test_arguments_default_to_empty_mapping(self) -> None:
        """Handlers always receive a mapping."""
        received: list[dict[str, Any]] = []
        server = MCPServer()
        server.register_tool(
            Tool(name="spy", handler=lambda arguments, ctx: received.append(arguments))
        )

        server.call_tool("spy")

        assert received == [{}]

    def test_running_unknown_tool_errors(self) -> None:
        """Unknown tools are an InvalidParams protocol error."""
        outcome = MCPServer().call_tool("missing")

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INVALID_PARAMS
        assert outcome.error.message == "Tool missing not found"

    def test_handler_failure_becomes_error_result(self, server: MCPServer) -> None:
        """A raising handler yields a successful result flagged as an error."""
        result = _unwrap(server.call_tool("explode"))

        assert result == {
            "content": [{"type": "text", "text": "tool exploded"}],
            "isError": True,
        }

    def test_mcp_errors_from_tools_are_also_contained(self) -> None:
        """Even protocol-shaped errors raised by a tool stay in the domain tier."""

        def handler(_arguments: dict[str, Any], _context: object) -> None:
            raise_mcp_error(ErrorCode.INVALID_PARAMS, "bad account")

        server = MCPServer()
        server.register_tool(Tool(name="account", handler=handler))

        result = _unwrap(server.call_tool("account"))

        assert result["isError"] is True
        assert result["content"][0]["text"] == "bad account"


class TestPrompts:
    """Prompt listing and rendering."""

    def test_lists_prompt_arguments_in_declared_order(self, server: MCPServer) -> None:
        """Argument descriptors are projected from the schema."""
        prompts = _unwrap(server.list_prompts())["prompts"]

        assert prompts == [
            {
                "name": "greet",
                "description": "Greet someone.",
                "arguments": [
                    {"name": "name", "description": "Who to greet.", "required": True},
                    {"name": "tone", "description": "Optional tone."},
                ],
            },
            {"name": "broken"},
        ]

    def test_renders_prompt_with_context(self, server: MCPServer) -> None:
        """Arguments and context reach the handler."""
        result = _unwrap(server.get_prompt("greet", {"name": "Ada"}, context="ctx"))

        assert result["messages"][0]["content"]["text"] == "Hello Ada"
        assert result["context"] == "ctx"

    def test_missing_required_argument_is_rejected_before_handler(self) -> None:
        """The handler is never invoked when a required argument is absent."""
        calls: list[dict[str, Any]] = []
        server = MCPServer()
        server.register_prompt(
            Prompt(
                name="needs-topic",
                handler=lambda arguments, ctx: calls.append(arguments),
                argument_schema={"topic": {"required": True}},
            )
        )

        outcome = server.get_prompt("needs-topic", {"other": "x"})

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INVALID_PARAMS
        assert outcome.error.message == "Missing required argument: topic"
        assert calls == []

    def test_null_required_argument_counts_as_missing(self, server: MCPServer) -> None:
        """A required argument supplied as null is treated as absent."""
        outcome = server.get_prompt("greet", {"name": None})

        assert isinstance(outcome, Err)
        assert outcome.error.message == "Missing required argument: name"

    def test_unknown_prompt_is_invalid_params(self, server: MCPServer) -> None:
        """Unknown prompts are an InvalidParams protocol error."""
        outcome = server.get_prompt("missing")

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INVALID_PARAMS

    def test_handler_failure_is_internal_error(self, server: MCPServer) -> None:
        """Prompts do not get the soft-failure treatment tools get."""
        outcome = server.get_prompt("broken")

        assert isinstance(outcome, Err)
        assert outcome.error.code is ErrorCode.INTERNAL_ERROR
        assert outcome.error.message == "Error getting prompt: prompt exploded"


def test_ping_returns_empty_result() -> None:
    """Ping answers with an empty mapping."""
    assert MCPServer().ping() == Ok({})


def test_read_handler_mcp_error_is_raised_to_dispatcher() -> None:
    """Read handlers may raise MCPError; the operation lets it through."""

    def read(_uri: str, _variables: dict[str, str], _context: object) -> None:
        raise_mcp_error(ErrorCode.INVALID_PARAMS, "Unknown user")

    server = MCPServer()
    server.register_resource_template(
        ResourceTemplate(name="u", uri_template="u://{id}", read_handler=read)
    )

    with pytest.raises(MCPError):
        server.read_resource("u://1")
