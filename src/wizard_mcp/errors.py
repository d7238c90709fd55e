"""Protocol error model and result values for the MCP dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes used by MCP."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


@dataclass(frozen=True)
class ProtocolError:
    """A protocol-level failure that maps 1:1 to a JSON-RPC error object.

    Attributes:
        code: One of the closed :class:`ErrorCode` values.
        message: Human-readable description of the failure.
        data: Optional structured payload forwarded to the client.

    """

    code: ErrorCode
    message: str
    data: Any = None

    @classmethod
    def parse_error(cls, message: str, data: Any = None) -> ProtocolError:
        """Build a ParseError (-32700)."""
        return cls(ErrorCode.PARSE_ERROR, message, data)

    @classmethod
    def invalid_request(cls, message: str, data: Any = None) -> ProtocolError:
        """Build an InvalidRequest error (-32600)."""
        return cls(ErrorCode.INVALID_REQUEST, message, data)

    @classmethod
    def method_not_found(cls, method: str) -> ProtocolError:
        """Build a MethodNotFound error (-32601) for ``method``."""
        return cls(ErrorCode.METHOD_NOT_FOUND, f"Method not found: {method}")

    @classmethod
    def invalid_params(cls, message: str, data: Any = None) -> ProtocolError:
        """Build an InvalidParams error (-32602)."""
        return cls(ErrorCode.INVALID_PARAMS, message, data)

    @classmethod
    def internal_error(cls, message: str, data: Any = None) -> ProtocolError:
        """Build an InternalError (-32603)."""
        return cls(ErrorCode.INTERNAL_ERROR, message, data)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-RPC ``error`` member for this failure."""
        payload: dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


class MCPError(Exception):
    """Exception carrying a :class:`ProtocolError`.

    Owner-supplied handlers raise this to report a specific protocol error, for
    example an ``InvalidParams`` for an identifier that does not exist. The
    dispatcher converts it back into an :class:`Err` value.
    """

    def __init__(self, code: ErrorCode, message: str, data: Any = None) -> None:
        """Create an exception wrapping a protocol error payload."""
        super().__init__(message)
        self.error = ProtocolError(ErrorCode(code), message, data)

    @classmethod
    def from_error(cls, error: ProtocolError) -> MCPError:
        """Wrap an existing protocol error value."""
        return cls(error.code, error.message, error.data)

    @property
    def code(self) -> ErrorCode:
        """Numeric JSON-RPC code of the wrapped error."""
        return self.error.code

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-RPC ``error`` member for the wrapped error."""
        return self.error.to_dict()


def raise_mcp_error(code: ErrorCode, message: str, data: Any = None) -> NoReturn:
    """Raise an :class:`MCPError` with the given code and payload."""
    raise MCPError(code, message, data)


class DuplicateRegistrationError(ValueError):
    """Raised when a capability key is registered twice."""

    def __init__(self, kind: str, key: str) -> None:
        """Create the error for the ``kind`` registry and offending ``key``."""
        super().__init__(f"{kind} '{key}' is already registered")
        self.kind = kind
        self.key = key


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome of a route handler."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed outcome of a route handler carrying a protocol error."""

    error: ProtocolError


Result = Union[Ok[Any], Err]
