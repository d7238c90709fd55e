"""Protocol version negotiation and the ``initialize`` handshake result."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from wizard_mcp.types import ServerInfo

LATEST_PROTOCOL_VERSION = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS: tuple[str, ...] = (LATEST_PROTOCOL_VERSION, "2024-10-07")


def negotiate_version(requested: str | None) -> str:
    """Return ``requested`` when supported, otherwise the latest version."""
    if requested is not None and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return LATEST_PROTOCOL_VERSION


def build_initialize_result(
    server_info: ServerInfo,
    capabilities: Mapping[str, Any],
    requested_version: str | None,
    instructions: str | None = None,
) -> dict[str, Any]:
    """Assemble the result of an ``initialize`` request.

    Args:
        server_info: Identity reported to the client.
        capabilities: Capability declarations echoed to the client verbatim.
        requested_version: Protocol version asked for by the client.
        instructions: Optional usage instructions; omitted when empty.

    Returns:
        The JSON-ready handshake result.

    """
    result: dict[str, Any] = {
        "protocolVersion": negotiate_version(requested_version),
        "serverInfo": server_info.to_dict(),
        "capabilities": dict(capabilities),
    }
    if instructions:
        result["instructions"] = instructions
    return result
