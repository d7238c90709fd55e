"""Model Context Protocol server application built on :mod:`wizard_mcp`."""

from wizard_mcp_server.capabilities import build_server
from wizard_mcp_server.settings import Settings
from wizard_mcp_server.transport import JsonRpcEndpoint

__all__ = ["JsonRpcEndpoint", "Settings", "build_server"]
