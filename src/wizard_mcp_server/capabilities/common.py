"""Shared helpers for the bundled capabilities."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

ParamsT = TypeVar("ParamsT", bound="ToolParameters")


class ToolParameters(BaseModel):
    """Base arguments schema for tools and prompts."""

    model_config = ConfigDict(extra="forbid")


def validate_arguments(
    model: type[ParamsT], arguments: dict[str, Any], owner: str
) -> ParamsT:
    """Validate and coerce incoming arguments.

    Args:
        model: Pydantic model describing the arguments.
        arguments: Raw arguments received from the client.
        owner: Name of the tool or prompt, used in the error message.

    Raises:
        ValueError: If validation fails.

    Returns:
        The validated model instance.

    """
    try:
        return model.model_validate(arguments)
    except ValidationError as error:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}"
            for detail in error.errors(include_url=False)
        )
        raise ValueError(f"Invalid arguments for '{owner}': {problems}") from error


def input_schema(model: type[ToolParameters]) -> dict[str, Any]:
    """Return the JSON schema advertised for ``model``."""
    schema = model.model_json_schema()
    schema.pop("title", None)
    return schema


def text_content(text: str) -> dict[str, Any]:
    """Wrap ``text`` as a single MCP text content item list."""
    return {"content": [{"type": "text", "text": text}]}
