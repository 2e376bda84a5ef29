"""Protocol error codes and the exception that carries them."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """JSON-RPC and MCP error codes."""

    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    TOOL_NOT_FOUND = -32000
    TOOL_EXECUTION_FAILED = -32001
    PARSE_ERROR = -32700


class ProtocolError(Exception):
    """An error that maps onto a JSON-RPC error object."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = int(code)
        self.message = message

    def to_dict(self) -> dict:
        """Return the error as a JSON-RPC error object."""
        return {"code": self.code, "message": self.message}