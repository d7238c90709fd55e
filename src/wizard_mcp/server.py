"""In-memory MCP service: capability registries plus the message dispatcher.

The service is free of transport details. A transport hands it a decoded
JSON-RPC message together with an opaque call context and turns the returned
result value back into a JSON-RPC envelope.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlsplit

from wizard_mcp.errors import Err, MCPError, Ok, ProtocolError, Result
from wizard_mcp.logging import get_logger
from wizard_mcp.messages import MessageType
from wizard_mcp.negotiation import build_initialize_result
from wizard_mcp.params import (
    CallToolParams,
    CompleteParams,
    GetPromptParams,
    InitializeParams,
    ReadResourceParams,
    parse_params,
)
from wizard_mcp.registry import Registry
from wizard_mcp.types import (
    CallContext,
    Prompt,
    Resource,
    ResourceTemplate,
    ServerInfo,
    Tool,
)

Route = Callable[[dict[str, Any], CallContext], Result]

KNOWN_NOTIFICATIONS = frozenset(
    {"notifications/initialized", "notifications/cancelled"}
)
MAX_COMPLETION_VALUES = 100


def default_capabilities() -> dict[str, Any]:
    """Capability declarations advertised when none are configured."""
    return {"resources": {}, "tools": {}, "prompts": {}}


class MCPServer:
    """Registries and dispatcher for MCP resources, tools and prompts.

    Capabilities are registered at startup and then only read. Every request is
    processed synchronously to completion; the dispatcher keeps no per-call state,
    so one instance can serve several worker threads.
    """

    def __init__(
        self,
        server_info: ServerInfo | None = None,
        capabilities: Mapping[str, Any] | None = None,
        instructions: str | None = None,
        *,
        logging_enabled: bool = False,
    ) -> None:
        """Create a service with empty registries.

        Args:
            server_info: Identity reported during the handshake.
            capabilities: Capability declarations echoed during the handshake.
            instructions: Optional usage instructions for the client.
            logging_enabled: Whether failures and unknown notifications are logged.

        """
        self.server_info = server_info or ServerInfo()
        self.capabilities = (
            dict(capabilities) if capabilities is not None else default_capabilities()
        )
        self.instructions = instructions
        self.logging_enabled = logging_enabled
        self.resources: Registry[Resource] = Registry("Resource")
        self.resource_templates: Registry[ResourceTemplate] = Registry(
            "Resource template"
        )
        self.tools: Registry[Tool] = Registry("Tool")
        self.prompts: Registry[Prompt] = Registry("Prompt")
        self._logger = get_logger(__name__)
        self._routes: dict[str, Route] = {
            "initialize": self._initialize_route,
            "ping": lambda _params, _context: self.ping(),
            "resources/list": lambda _params, context: self.list_resources(context),
            "resources/templates/list": (
                lambda _params, _context: self.list_resource_templates()
            ),
            "resources/read": self._read_resource_route,
            "tools/list": lambda _params, _context: self.list_tools(),
            "tools/call": self._call_tool_route,
            "prompts/list": lambda _params, _context: self.list_prompts(),
            "prompts/get": self._get_prompt_route,
            "completion/complete": self._complete_route,
        }

    # Registration -------------------------------------------------------------

    def register_resource(self, resource: Resource) -> None:
        """Register a fixed resource.

        Args:
            resource: Resource definition to register.

        Raises:
            DuplicateRegistrationError: If the URI is already registered.

        """
        self.resources.register(resource.uri, resource)

    def register_resource_template(self, template: ResourceTemplate) -> None:
        """Register a resource template.

        Raises:
            DuplicateRegistrationError: If the template name is already registered.

        """
        self.resource_templates.register(template.name, template)

    def register_tool(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            DuplicateRegistrationError: If the tool name is already registered.

        """
        self.tools.register(tool.name, tool)

    def register_prompt(self, prompt: Prompt) -> None:
        """Register a prompt.

        Raises:
            DuplicateRegistrationError: If the prompt name is already registered.

        """
        self.prompts.register(prompt.name, prompt)

    def register(
        self, *capabilities: Resource | ResourceTemplate | Tool | Prompt
    ) -> None:
        """Register several capabilities of any category at once."""
        for capability in capabilities:
            if isinstance(capability, Resource):
                self.register_resource(capability)
            elif isinstance(capability, ResourceTemplate):
                self.register_resource_template(capability)
            elif isinstance(capability, Tool):
                self.register_tool(capability)
            elif isinstance(capability, Prompt):
                self.register_prompt(capability)
            else:
                raise TypeError(f"Cannot register {type(capability).__name__}")

    # Operations ---------------------------------------------------------------

    def initialize(
        self,
        client_info: Mapping[str, Any],
        client_capabilities: Mapping[str, Any],
        protocol_version: str | None,
    ) -> Result:
        """Negotiate the protocol version and describe this server.

        Client info and capabilities are accepted but not interpreted.
        """
        return Ok(
            build_initialize_result(
                self.server_info,
                self.capabilities,
                protocol_version,
                self.instructions,
            )
        )

    def ping(self) -> Result:
        """Answer a liveness check with an empty result."""
        return Ok({})

    def list_resources(self, context: CallContext = None) -> Result:
        """List fixed resources followed by resources from list-capable templates."""
        resources = [resource.descriptor() for resource in self.resources]
        for template in self.resource_templates:
            resources.extend(template.list_resources(context))
        return Ok({"resources": resources})

    def list_resource_templates(self) -> Result:
        """List resource template descriptors."""
        return Ok(
            {
                "resourceTemplates": [
                    template.descriptor() for template in self.resource_templates
                ]
            }
        )

    def read_resource(self, uri: str, context: CallContext = None) -> Result:
        """Read a resource by exact URI, falling back to templates in order.

        Args:
            uri: Concrete URI requested by the client.
            context: Opaque call context passed to the read handler.

        Returns:
            ``Ok`` with the handler's contents, or ``Err`` with ``InvalidParams``
            when the URI is malformed or matches nothing.

        """
        try:
            urlsplit(uri)
        except ValueError:
            return Err(ProtocolError.invalid_params(f"Invalid URI: {uri}"))

        resource = self.resources.lookup(uri)
        if resource is not None:
            return Ok(resource.read_handler(uri, context))

        for template in self.resource_templates:
            variables = template.match(uri)
            if variables is not None:
                return Ok(template.read_handler(uri, variables, context))

        return Err(ProtocolError.invalid_params(f"Resource not found: {uri}"))

    def list_tools(self) -> Result:
        """List tool descriptors."""
        return Ok({"tools": [tool.descriptor() for tool in self.tools]})

    def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        context: CallContext = None,
    ) -> Result:
        """Invoke a registered tool.

        A failing tool handler does not produce a protocol error. Its message is
        returned as a successful result flagged with ``isError``.

        Args:
            name: Registered tool name.
            arguments: Arguments forwarded to the handler.
            context: Opaque call context.

        Returns:
            ``Ok`` with the tool result, or ``Err`` with ``InvalidParams`` when the
            tool is unknown.

        """
        tool = self.tools.lookup(name)
        if tool is None:
            return Err(ProtocolError.invalid_params(f"Tool {name} not found"))

        arguments = arguments or {}
        try:
            return Ok(tool.handler(arguments, context))
        except Exception as exc:
            if self.logging_enabled:
                self._logger.exception(
                    "tool_call_failed", tool=name, arguments=arguments
                )
            return Ok(
                {"content": [{"type": "text", "text": str(exc)}], "isError": True}
            )

    def list_prompts(self) -> Result:
        """List prompt descriptors."""
        return Ok({"prompts": [prompt.descriptor() for prompt in self.prompts]})

    def get_prompt(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        context: CallContext = None,
    ) -> Result:
        """Render a registered prompt.

        Required arguments are checked before the handler runs. Any handler
        failure becomes an ``InternalError``.

        Returns:
            ``Ok`` with the prompt result, ``Err`` with ``InvalidParams`` for an
            unknown prompt or missing argument, or ``Err`` with ``InternalError``.

        """
        prompt = self.prompts.lookup(name)
        if prompt is None:
            return Err(ProtocolError.invalid_params(f"Prompt {name} not found"))

        arguments = arguments or {}
        missing = prompt.missing_argument(arguments)
        if missing is not None:
            return Err(
                ProtocolError.invalid_params(f"Missing required argument: {missing}")
            )

        try:
            return Ok(prompt.handler(arguments, context))
        except Exception as exc:
            if self.logging_enabled:
                self._logger.exception(
                    "prompt_get_failed", prompt=name, arguments=arguments
                )
            return Err(ProtocolError.internal_error(f"Error getting prompt: {exc}"))

    def complete(
        self, params: CompleteParams, context: CallContext = None
    ) -> Result:
        """Suggest values for a resource template variable.

        Prompt references resolve to an empty completion since prompts declare
        no completion handlers.
        """
        ref = params.ref
        if ref.type == "ref/prompt":
            if ref.name is None or self.prompts.lookup(ref.name) is None:
                return Err(ProtocolError.invalid_params(f"Prompt {ref.name} not found"))
            return Ok(_completion([]))

        template = next(
            (
                candidate
                for candidate in self.resource_templates
                if candidate.uri_template == ref.uri
            ),
            None,
        )
        if template is None:
            return Err(
                ProtocolError.invalid_params(f"Resource template not found: {ref.uri}")
            )
        handler = template.completion_handlers.get(params.argument.name)
        if handler is None:
            return Ok(_completion([]))
        return Ok(_completion(list(handler(params.argument.value, context))))

    # Dispatch -----------------------------------------------------------------

    def dispatch(
        self,
        message_type: MessageType,
        method: str,
        params: dict[str, Any] | None = None,
        context: CallContext = None,
    ) -> Result | None:
        """Process one decoded message.

        Args:
            message_type: Whether the message is a request or a notification.
            method: JSON-RPC method name.
            params: Request params, empty when omitted.
            context: Opaque call context forwarded to every handler.

        Returns:
            ``None`` for notifications, otherwise ``Ok`` with the method result or
            ``Err`` with a protocol error. Unexpected failures become
            ``InternalError``; this method does not raise.

        """
        params = params or {}
        if message_type is MessageType.NOTIFICATION:
            self._handle_notification(method)
            return None

        route = self._routes.get(method)
        if route is None:
            return Err(ProtocolError.method_not_found(method))

        try:
            return route(params, context)
        except MCPError as error:
            return Err(error.error)
        except Exception as exc:
            if self.logging_enabled:
                self._logger.exception(
                    "request_failed", method=method, params=params
                )
            return Err(ProtocolError.internal_error(str(exc)))

    def _handle_notification(self, method: str) -> None:
        if method in KNOWN_NOTIFICATIONS:
            return
        if self.logging_enabled:
            self._logger.warning("unknown_notification", method=method)

    def _initialize_route(
        self, params: dict[str, Any], _context: CallContext
    ) -> Result:
        parsed = parse_params(InitializeParams, params)
        if isinstance(parsed, ProtocolError):
            return Err(parsed)
        return self.initialize(
            parsed.client_info, parsed.capabilities, parsed.protocol_version
        )

    def _read_resource_route(
        self, params: dict[str, Any], context: CallContext
    ) -> Result:
        parsed = parse_params(ReadResourceParams, params)
        if isinstance(parsed, ProtocolError):
            return Err(parsed)
        return self.read_resource(parsed.uri, context)

    def _call_tool_route(self, params: dict[str, Any], context: CallContext) -> Result:
        parsed = parse_params(CallToolParams, params)
        if isinstance(parsed, ProtocolError):
            return Err(parsed)
        return self.call_tool(parsed.name, parsed.arguments, context)

    def _get_prompt_route(self, params: dict[str, Any], context: CallContext) -> Result:
        parsed = parse_params(GetPromptParams, params)
        if isinstance(parsed, ProtocolError):
            return Err(parsed)
        return self.get_prompt(parsed.name, parsed.arguments, context)

    def _complete_route(self, params: dict[str, Any], context: CallContext) -> Result:
        parsed = parse_params(CompleteParams, params)
        if isinstance(parsed, ProtocolError):
            return Err(parsed)
        return self.complete(parsed, context)

    # Discovery ----------------------------------------------------------------

    def to_catalog(self) -> dict[str, list[dict[str, Any]]]:
        """Produce a static catalog of every registered capability.

        Template list handlers are not invoked, so only fixed resources appear
        under ``resources``.

        Returns:
            Mapping of category to descriptors in registration order.

        """
        return {
            "resources": [resource.descriptor() for resource in self.resources],
            "resourceTemplates": [
                template.descriptor() for template in self.resource_templates
            ],
            "tools": [tool.descriptor() for tool in self.tools],
            "prompts": [prompt.descriptor() for prompt in self.prompts],
        }


def _completion(values: list[str]) -> dict[str, Any]:
    return {
        "completion": {
            "values": values[:MAX_COMPLETION_VALUES],
            "total": len(values),
            "hasMore": len(values) > MAX_COMPLETION_VALUES,
        }
    }
