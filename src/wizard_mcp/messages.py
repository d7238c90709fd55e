"""JSON-RPC 2.0 envelope helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from wizard_mcp.errors import ProtocolError

JSONRPC_VERSION = "2.0"


class MessageType(str, Enum):
    """Kinds of inbound JSON-RPC messages."""

    REQUEST = "request"
    NOTIFICATION = "notification"


def classify(envelope: Mapping[str, Any]) -> MessageType:
    """Classify an envelope by the presence of its ``id`` member."""
    if "id" in envelope:
        return MessageType.REQUEST
    return MessageType.NOTIFICATION


def success_response(request_id: Any, result: Any) -> dict[str, Any]:
    """Build a JSON-RPC success envelope."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, error: ProtocolError) -> dict[str, Any]:
    """Build a JSON-RPC error envelope; ``request_id`` may be ``None``."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.to_dict()}
