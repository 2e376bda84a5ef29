"""The server builder: tool registry, request routing and built-in handlers."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from mcprobot.errors import ErrorCode, ProtocolError
from mcprobot.httpserver import HTTPServer
from mcprobot.protocol import (
    METHOD_INITIALIZE,
    METHOD_TOOLS_CALL,
    METHOD_TOOLS_LIST,
    PROTOCOL_VERSION,
    CapabilityParam,
    HandlerFunc,
    Info,
    MCPHandler,
    Request,
    Response,
    encode_json,
)
from mcprobot.stdio import StdioServer
from mcprobot.tools import ToolDefinition


@dataclass(frozen=True)
class _ServerTool:
    handler: MCPHandler
    definition: ToolDefinition


def _invalid(message: str) -> ProtocolError:
    return ProtocolError(ErrorCode.INVALID_PARAMS, message)


class ServerBuilder:
    """Collects tools and routes requests to the right handler."""

    def __init__(self, name: str, version: str) -> None:
        self.info = Info(name=name, version=version)
        self._lock = threading.RLock()
        self._tools: dict[str, _ServerTool] = {}

    def with_tool(self, definition: ToolDefinition, handler: Any) -> "ServerBuilder":
        """Register ``handler`` for the tool ``definition``, replacing one of the same name."""
        if not isinstance(handler, MCPHandler):
            handler = HandlerFunc(handler)
        with self._lock:
            self._tools[definition.name] = _ServerTool(handler, definition)
        return self

    def capabilities(self) -> dict[str, CapabilityParam]:
        """Return the capabilities advertised on initialize."""
        with self._lock:
            return {"tools": CapabilityParam(list_changed=True)} if self._tools else {}

    def _answer(self, writer: Any, request: Request, result: dict, what: str) -> None:
        try:
            encode_json(writer, Response(id=request.id, result=result))
        except (TypeError, ValueError) as err:
            writer.write(f"Failed to encode {what} response: {err}")

    def initialize_handler(self, writer: Any, request: Request) -> None:
        """Answer an initialize request."""
        result = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self.capabilities(),
            "serverInfo": self.info,
        }
        self._answer(writer, request, result, "initialize")

    def list_tools_handler(self, writer: Any, request: Request) -> None:
        """Answer a tools/list request."""
        with self._lock:
            tools = [tool.definition for tool in self._tools.values()]
        self._answer(writer, request, {"tools": tools}, "tools list")

    def resolve_handler(self, request: Request) -> MCPHandler:
        """Return the handler for ``request`` or raise ProtocolError."""
        if request.method == METHOD_INITIALIZE:
            return HandlerFunc(self.initialize_handler)
        if request.method == METHOD_TOOLS_LIST:
            return HandlerFunc(self.list_tools_handler)
        if request.method == METHOD_TOOLS_CALL:
            return self._resolve_tool(request.params or {})
        raise ProtocolError(ErrorCode.METHOD_NOT_FOUND, f"method not found: {request.method}")

    def _resolve_tool(self, params: dict) -> MCPHandler:
        if "name" not in params:
            raise _invalid("missing or invalid 'name' parameter")
        tool_name = params["name"]
        if not isinstance(tool_name, str):
            raise _invalid(
                f"invalid 'name' parameter type: expected string, got {type(tool_name).__name__}"
            )

        with self._lock:
            tool = self._tools.get(tool_name)
        if tool is None:
            raise _invalid(f"tool not found: {tool_name}")

        if "arguments" not in params:
            if tool.definition.required:
                raise _invalid(f"missing required 'arguments' parameter for tool: {tool_name}")
            return tool.handler

        args = params["arguments"]
        if not isinstance(args, dict):
            raise _invalid(
                f"invalid 'arguments' parameter type: expected object, got {type(args).__name__}"
            )
        tool.definition.validate_arguments(args)
        return tool.handler

    def build_http_server(self) -> HTTPServer:
        return HTTPServer(self)

    def build_stdio_server(self) -> StdioServer:
        return StdioServer(self)