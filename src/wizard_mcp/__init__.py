"""wizard_mcp package initialization."""

from wizard_mcp.errors import (
    DuplicateRegistrationError,
    Err,
    ErrorCode,
    MCPError,
    Ok,
    ProtocolError,
    raise_mcp_error,
)
from wizard_mcp.messages import MessageType
from wizard_mcp.negotiation import LATEST_PROTOCOL_VERSION, SUPPORTED_PROTOCOL_VERSIONS
from wizard_mcp.server import MCPServer
from wizard_mcp.types import Prompt, Resource, ResourceTemplate, ServerInfo, Tool

__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "DuplicateRegistrationError",
    "Err",
    "ErrorCode",
    "MCPError",
    "MCPServer",
    "MessageType",
    "Ok",
    "Prompt",
    "ProtocolError",
    "Resource",
    "ResourceTemplate",
    "ServerInfo",
    "Tool",
    "raise_mcp_error",
]
