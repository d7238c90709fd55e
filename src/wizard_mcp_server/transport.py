"""JSON-RPC envelope handling around :class:`~wizard_mcp.server.MCPServer`.

This is the collaborator side of the protocol core: it validates decoded
envelopes, decodes raw JSON text, and runs a newline-delimited stdio loop.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TextIO

from wizard_mcp.errors import Ok, ProtocolError
from wizard_mcp.logging import get_logger
from wizard_mcp.messages import (
    JSONRPC_VERSION,
    MessageType,
    classify,
    error_response,
    success_response,
)
from wizard_mcp.server import MCPServer
from wizard_mcp.types import CallContext

logger = get_logger(__name__)


class JsonRpcEndpoint:
    """Turn JSON-RPC envelopes into dispatcher calls and back."""

    def __init__(self, server: MCPServer) -> None:
        """Bind the endpoint to a fully registered server."""
        self.server = server

    def handle(
        self, message: object, context: CallContext = None
    ) -> dict[str, Any] | None:
        """Process one decoded envelope.

        Args:
            message: Decoded JSON value received from the client.
            context: Opaque call context forwarded to every handler.

        Returns:
            The response envelope, or ``None`` for a notification.

        """
        if not isinstance(message, Mapping):
            return error_response(
                None, ProtocolError.invalid_request("Invalid JSON-RPC message")
            )
        if message.get("jsonrpc") != JSONRPC_VERSION:
            return error_response(
                None, ProtocolError.invalid_request("Invalid JSON-RPC version")
            )

        request_id = message.get("id")
        method = message.get("method")
        if not isinstance(method, str):
            return error_response(
                request_id, ProtocolError.invalid_request("Missing or invalid method")
            )

        message_type = classify(message)
        params = message.get("params")
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            if message_type is MessageType.NOTIFICATION:
                return None
            return error_response(
                request_id, ProtocolError.invalid_params("Params must be an object")
            )

        outcome = self.server.dispatch(message_type, method, dict(params), context)
        if outcome is None:
            return None
        if isinstance(outcome, Ok):
            return success_response(request_id, outcome.value)
        return error_response(request_id, outcome.error)

    def handle_raw(self, text: str, context: CallContext = None) -> str | None:
        """Decode ``text``, process it, and encode the response.

        Malformed or too deeply nested JSON yields a ``ParseError`` response
        with a null id. A result that cannot be encoded is answered with an
        ``InternalError`` carrying the request id.
        """
        try:
            message = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as error:
            response = error_response(
                None, ProtocolError.parse_error("Parse error", str(error))
            )
        else:
            response = self.handle(message, context)
        if response is None:
            return None
        try:
            return json.dumps(response, default=str)
        except (TypeError, ValueError, RecursionError) as error:
            logger.exception("response_encoding_failed", id=response.get("id"))
            return json.dumps(
                error_response(
                    response.get("id"),
                    ProtocolError.internal_error(
                        f"Could not encode response: {error}"
                    ),
                ),
                default=str,
            )

    def serve(
        self, stdin: TextIO, stdout: TextIO, context: CallContext = None
    ) -> None:
        """Answer newline-delimited JSON-RPC messages until ``stdin`` is exhausted."""
        for line in stdin:
            if not line.strip():
                continue
            reply = self.handle_raw(line, context)
            if reply is None:
                continue
            stdout.write(reply + "\n")
            stdout.flush()
        logger.info("stdio_transport_closed")
