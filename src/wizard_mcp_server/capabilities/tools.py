"""Arithmetic and echo tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from wizard_mcp.types import CallContext, Tool
from wizard_mcp_server.capabilities.common import (
    ToolParameters,
    input_schema,
    text_content,
    validate_arguments,
)


class AddParams(ToolParameters):
    """Parameters for the add tool."""

    a: int | float
    b: int | float


class EchoParams(ToolParameters):
    """Parameters for the echo tool."""

    message: str
    repeat: int = Field(default=1, ge=1, le=100)


class DivideParams(ToolParameters):
    """Parameters for the divide tool."""

    dividend: float
    divisor: float


def add_tool() -> Tool:
    """Create the add tool."""

    def handler(arguments: dict[str, Any], _context: CallContext) -> dict[str, Any]:
        params = validate_arguments(AddParams, arguments, "add")
        return text_content(str(params.a + params.b))

    return Tool(
        name="add",
        handler=handler,
        input_schema=input_schema(AddParams),
        description="Add two numbers.",
    )


def echo_tool() -> Tool:
    """Create the echo tool."""

    def handler(arguments: dict[str, Any], _context: CallContext) -> dict[str, Any]:
        params = validate_arguments(EchoParams, arguments, "echo")
        return text_content(" ".join([params.message] * params.repeat))

    return Tool(
        name="echo",
        handler=handler,
        input_schema=input_schema(EchoParams),
        description="Echo a message back, optionally repeated.",
    )


def divide_tool() -> Tool:
    """Create the divide tool; division by zero is reported as a tool error."""

    def handler(arguments: dict[str, Any], _context: CallContext) -> dict[str, Any]:
        params = validate_arguments(DivideParams, arguments, "divide")
        if params.divisor == 0:
            raise ZeroDivisionError("Cannot divide by zero")
        return text_content(str(params.dividend / params.divisor))

    return Tool(
        name="divide",
        handler=handler,
        input_schema=input_schema(DivideParams),
        description="Divide one number by another.",
    )
