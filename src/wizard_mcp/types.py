"""Capability definitions that can be registered with the server."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from wizard_mcp.templates import UriTemplate

CallContext = Any
"""Opaque per-call value supplied by the transport (caller identity and so on)."""

ResourceReadHandler = Callable[[str, CallContext], Any]
TemplateReadHandler = Callable[[str, dict[str, str], CallContext], Any]
TemplateListHandler = Callable[[CallContext], Sequence[Mapping[str, Any]]]
CompletionHandler = Callable[[str, CallContext], Sequence[str]]
ToolHandler = Callable[[dict[str, Any], CallContext], Any]
PromptHandler = Callable[[dict[str, Any], CallContext], Any]


def _merge_metadata(
    descriptor: dict[str, Any], metadata: Mapping[str, Any]
) -> dict[str, Any]:
    """Add metadata keys that do not collide with the descriptor's own fields."""
    for key, value in metadata.items():
        descriptor.setdefault(key, value)
    return descriptor


@dataclass(frozen=True)
class ServerInfo:
    """Static identity reported during the handshake."""

    name: str = "Wizard MCP Server"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class Resource:
    """A fixed, URI-addressable resource.

    Attributes:
        uri: Unique URI of the resource.
        name: Human-readable name.
        read_handler: Callable producing the resource contents.
        metadata: Extra descriptor fields such as ``description`` or ``mimeType``.

    """

    uri: str
    name: str
    read_handler: ResourceReadHandler
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def descriptor(self) -> dict[str, Any]:
        """Return the ``resources/list`` entry for this resource."""
        return _merge_metadata({"uri": self.uri, "name": self.name}, self.metadata)


@dataclass(frozen=True)
class ResourceTemplate:
    """A family of resources described by a URI template.

    Attributes:
        name: Unique template name.
        uri_template: Template such as ``users://{userId}/profile``.
        read_handler: Callable receiving the URI and the extracted variables.
        metadata: Extra descriptor fields, also merged into listed resources.
        list_handler: Optional callable enumerating concrete resources.
        completion_handlers: Per-variable callables suggesting values.

    """

    name: str
    uri_template: str
    read_handler: TemplateReadHandler
    metadata: Mapping[str, Any] = field(default_factory=dict)
    list_handler: TemplateListHandler | None = None
    completion_handlers: Mapping[str, CompletionHandler] = field(default_factory=dict)
    matcher: UriTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", UriTemplate(self.uri_template))

    def match(self, uri: str) -> dict[str, str] | None:
        """Return variable bindings when ``uri`` fits the template."""
        return self.matcher.match(uri)

    def descriptor(self) -> dict[str, Any]:
        """Return the ``resources/templates/list`` entry for this template."""
        return _merge_metadata(
            {"name": self.name, "uriTemplate": self.uri_template}, self.metadata
        )

    def list_resources(self, context: CallContext) -> list[dict[str, Any]]:
        """Enumerate concrete resources, each merged with the template metadata.

        Template metadata wins over keys returned by the list handler.
        """
        if self.list_handler is None:
            return []
        return [
            {**dict(resource), **dict(self.metadata)}
            for resource in self.list_handler(context)
        ]


@dataclass(frozen=True)
class Tool:
    """A named callable with a JSON-schema input contract."""

    name: str
    handler: ToolHandler
    input_schema: Mapping[str, Any] | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.input_schema:
            object.__setattr__(self, "input_schema", {"type": "object"})

    def descriptor(self) -> dict[str, Any]:
        """Return the ``tools/list`` entry for this tool."""
        descriptor: dict[str, Any] = {
            "name": self.name,
            "inputSchema": dict(self.input_schema or {}),
        }
        if self.description is not None:
            descriptor["description"] = self.description
        return descriptor


@dataclass(frozen=True)
class PromptArgument:
    """One declared prompt argument."""

    name: str
    description: str | None = None
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        argument: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            argument["description"] = self.description
        if self.required:
            argument["required"] = True
        return argument


@dataclass(frozen=True)
class Prompt:
    """A named prompt template with an ordered argument schema.

    ``argument_schema`` maps each argument name to ``{"description": ...,
    "required": ...}``; both keys are optional and declaration order is kept.
    """

    name: str
    handler: PromptHandler
    argument_schema: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    description: str | None = None

    def arguments(self) -> list[PromptArgument]:
        """Project the schema onto argument descriptors in declared order."""
        return [
            PromptArgument(
                name=name,
                description=properties.get("description"),
                required=bool(properties.get("required", False)),
            )
            for name, properties in self.argument_schema.items()
        ]

    def missing_argument(self, supplied: Mapping[str, Any]) -> str | None:
        """Return the first required argument absent from ``supplied``.

        An argument supplied as ``None`` counts as absent.
        """
        for argument in self.arguments():
            if argument.required and supplied.get(argument.name) is None:
                return argument.name
        return None

    def descriptor(self) -> dict[str, Any]:
        """Return the ``prompts/list`` entry for this prompt."""
        descriptor: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            descriptor["description"] = self.description
        if self.argument_schema:
            descriptor["arguments"] = [arg.to_dict() for arg in self.arguments()]
        return descriptor
