"""Writing JSON-RPC responses and tool results."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

from mcprobot.protocol import Error, Response, encode_json
from mcprobot.results import ToolResultMedia, ToolResultStructured, ToolResultText, text_result


@dataclass
class ResponseWriter:
    """Writes responses for one request id to a text writer."""

    writer: Any
    request_id: int = 0

    def write_tool_result(self, result: Any) -> None:
        """Write a tools/call result.

        Raises TypeError for an unsupported result type and ValueError when a
        structured result cannot be encoded.
        """
        structured = None
        if isinstance(result, ToolResultStructured):
            buf = io.StringIO()
            try:
                encode_json(buf, result)
            except (TypeError, ValueError) as err:
                raise ValueError(f"failed to marshal structured tool result: {err}") from err
            content = [text_result(buf.getvalue().rstrip("\n"))]
            structured = result
        elif isinstance(result, (list, tuple)):
            content = list(result)
        elif isinstance(result, (ToolResultMedia, ToolResultText)):
            content = [result]
        else:
            raise TypeError(f"invalid tool result type: {type(result).__name__}")

        complete: dict = {"content": content}
        if structured is not None:
            complete["structuredContent"] = structured
        self.write_result(complete)

    def write_result(self, result: dict) -> None:
        """Write a successful response carrying ``result``."""
        encode_json(self.writer, Response(id=self.request_id, result=result))

    def write_error(self, code: int, message: str) -> None:
        """Write a JSON-RPC error response."""
        encode_json(self.writer, Response(id=self.request_id, error=Error(int(code), message)))

    def write_tool_error(self, message: str) -> None:
        """Write a tool result flagged as an error."""
        self.write_result({"content": [text_result(message)], "isError": True})