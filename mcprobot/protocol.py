"""JSON-RPC message types, handler interfaces and the JSON encoder."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2025-03-26"

METHOD_INITIALIZE = "initialize"
METHOD_NOTIFICATIONS_INITIALIZED = "notifications/initialized"
METHOD_ROOTS_LIST = "roots/list"
METHOD_NOTIFICATIONS_ROOTS_LIST_CHANGED = "notifications/roots/list_changed"
METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"
METHOD_NOTIFICATIONS_TOOLS_LIST_CHANGED = "notifications/tools/list_changed"


def _string_field(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


@dataclass
class Request:
    """A JSON-RPC request with an integer id."""

    jsonrpc: str = JSONRPC_VERSION
    id: int = 0
    method: str = ""
    params: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        """Build a request from decoded JSON, raising ValueError on bad shapes."""
        if not isinstance(data, dict):
            raise ValueError(f"request must be a JSON object, got {type(data).__name__}")
        request_id = data.get("id")
        if request_id is None:
            request_id = 0
        if isinstance(request_id, bool) or not isinstance(request_id, int):
            raise ValueError(f"field 'id' must be an integer, got {type(request_id).__name__}")
        params = data.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValueError(f"field 'params' must be an object, got {type(params).__name__}")
        return cls(
            jsonrpc=_string_field(data, "jsonrpc"),
            id=request_id,
            method=_string_field(data, "method"),
            params=params,
        )

    def to_dict(self) -> dict:
        payload: dict = {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method}
        if self.params:
            payload["params"] = self.params
        return payload


@dataclass
class Info:
    """Name and version of a server."""

    name: str
    version: str

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version}


@dataclass
class CapabilityParam:
    """Flags describing one server capability."""

    subscribe: bool = False
    list_changed: bool = False

    def to_dict(self) -> dict:
        return {"subscribe": self.subscribe, "listChanged": self.list_changed}


@dataclass
class Error:
    """A JSON-RPC error object."""

    code: int
    message: str

    def to_dict(self) -> dict:
        return {"code": int(self.code), "message": self.message}


@dataclass
class Response:
    """A JSON-RPC response."""

    id: Union[int, str] = 0
    result: Optional[dict] = None
    server_info: Optional[Info] = None
    instructions: str = ""
    error: Optional[Error] = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict:
        payload: dict = {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}
        if self.server_info is not None:
            payload["serverInfo"] = self.server_info.to_dict()
        if self.instructions:
            payload["instructions"] = self.instructions
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload


@dataclass
class Notification:
    """A JSON-RPC notification."""

    method: str
    params: dict = field(default_factory=dict)
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict:
        payload: dict = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params:
            payload["params"] = self.params
        return payload


@dataclass
class RootCapability:
    """A root exposed by a client; the URI must use the file scheme."""

    uri: str
    name: str = ""

    def to_dict(self) -> dict:
        payload = {"uri": self.uri}
        if self.name:
            payload["name"] = self.name
        return payload


class MCPHandler(ABC):
    """Something that answers a request by writing to a writer."""

    @abstractmethod
    def serve_rpc(self, writer: Any, request: Request) -> None:
        """Handle ``request`` and write the response to ``writer``."""


@dataclass(frozen=True)
class HandlerFunc(MCPHandler):
    """Adapts a plain callable into an MCPHandler."""

    func: Callable[[Any, Request], None]

    def serve_rpc(self, writer: Any, request: Request) -> None:
        self.func(writer, request)

    def __call__(self, writer: Any, request: Request) -> None:
        self.func(writer, request)


_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def _default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_json(writer: Any, payload: Any) -> None:
    """Write ``payload`` to ``writer`` as one line of compact JSON.

    Objects with a ``to_dict`` method are serialised through it. Raises
    TypeError for unserialisable values and ValueError for NaN or infinity.
    """
    text = json.dumps(
        payload,
        default=_default,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )
    writer.write(text.translate(_ESCAPES) + "\n")