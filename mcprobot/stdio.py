"""Serving requests as newline-delimited JSON over standard input and output."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from mcprobot.errors import ErrorCode, ProtocolError
from mcprobot.protocol import Request
from mcprobot.responsewriter import ResponseWriter

if TYPE_CHECKING:
    from mcprobot.server import ServerBuilder


class StdioServer:
    """Reads one JSON request per line and writes one JSON response per line."""

    def __init__(self, server: "ServerBuilder") -> None:
        self.server = server

    def handle_request(self, data: Union[str, bytes], writer: Any) -> None:
        """Decode one request from ``data`` and write its response to ``writer``."""
        try:
            request = Request.from_dict(json.loads(data))
        except ValueError as err:
            ResponseWriter(writer, 0).write_error(
                ErrorCode.PARSE_ERROR, f"Failed to decode request: {err}"
            )
            return

        try:
            handler = self.server.resolve_handler(request)
        except Exception as err:
            code = err.code if isinstance(err, ProtocolError) else ErrorCode.INTERNAL_ERROR
            ResponseWriter(writer, request.id).write_error(code, f"Failed to resolve handler: {err}")
            return

        handler.serve_rpc(writer, request)

    def listen_and_serve(
        self,
        reader: Optional[Iterable[Union[str, bytes]]] = None,
        writer: Any = None,
    ) -> None:
        """Serve requests from ``reader`` (default stdin) until end of input."""
        sink = sys.stdout if writer is None else writer
        for line in sys.stdin if reader is None else reader:
            if line.strip():
                self.handle_request(line, sink)
                if hasattr(sink, "flush"):
                    sink.flush()