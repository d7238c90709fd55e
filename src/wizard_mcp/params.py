"""Typed parameters for the built-in MCP request methods."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wizard_mcp.errors import ProtocolError

ParamsT = TypeVar("ParamsT", bound="RequestParams")


class RequestParams(BaseModel):
    """Base schema for request params.

    Unknown keys such as ``_meta`` are kept so extensions pass through.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class InitializeParams(RequestParams):
    """Parameters for ``initialize``.

    Client info and capabilities are accepted as sent and never rejected; a
    null or non-object value reads as empty, a non-string version as absent.
    """

    protocol_version: Any = Field(default=None, alias="protocolVersion")
    capabilities: Any = Field(default_factory=dict)
    client_info: Any = Field(default_factory=dict, alias="clientInfo")

    @field_validator("protocol_version", mode="before")
    @classmethod
    def non_string_version_to_none(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("capabilities", "client_info", mode="before")
    @classmethod
    def non_object_to_empty(cls, value: Any) -> dict[str, Any]:
        return dict(value) if isinstance(value, Mapping) else {}


class ReadResourceParams(RequestParams):
    """Parameters for ``resources/read``."""

    uri: str


class CallToolParams(RequestParams):
    """Parameters for ``tools/call``."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def null_arguments_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class GetPromptParams(RequestParams):
    """Parameters for ``prompts/get``."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def null_arguments_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class CompletionReference(RequestParams):
    """The object a completion request refers to."""

    type: Literal["ref/resource", "ref/prompt"]
    uri: str | None = None
    name: str | None = None


class CompletionArgument(RequestParams):
    """The argument being completed and its partial value."""

    name: str
    value: str = ""


class CompleteParams(RequestParams):
    """Parameters for ``completion/complete``."""

    ref: CompletionReference
    argument: CompletionArgument


def _is_required(model: type[RequestParams], location: Any) -> bool:
    for name, info in model.model_fields.items():
        if location in (name, info.alias):
            return info.is_required()
    return False


def parse_params(
    model: type[ParamsT], raw_params: dict[str, Any]
) -> ParamsT | ProtocolError:
    """Validate ``raw_params`` against ``model``.

    An absent or null required field is reported as
    ``Missing required parameter: <name>``; any other validation problem as
    ``Invalid parameters``, with the pydantic error list attached as data.

    Returns:
        The validated model, or an ``InvalidParams`` protocol error.

    """
    try:
        return model.model_validate(raw_params)
    except ValidationError as error:
        details = error.errors(include_url=False, include_context=False)
        for detail in details:
            if len(detail["loc"]) != 1:
                continue
            field = detail["loc"][0]
            if detail["type"] == "missing" or (
                detail.get("input") is None and _is_required(model, field)
            ):
                return ProtocolError.invalid_params(
                    f"Missing required parameter: {field}"
                )
        return ProtocolError.invalid_params(
            "Invalid parameters",
            [
                {"loc": list(detail["loc"]), "msg": detail["msg"]}
                for detail in details
            ],
        )

