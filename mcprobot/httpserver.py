"""Serving requests over HTTP POST."""

from __future__ import annotations

import io
import json
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from mcprobot.protocol import Request

if TYPE_CHECKING:
    from mcprobot.server import ServerBuilder

Reply = tuple[int, dict, bytes]

_log = logging.getLogger(__name__)


def _error_reply(status: int, message: str) -> Reply:
    headers = {"Content-Type": "text/plain; charset=utf-8", "X-Content-Type-Options": "nosniff"}
    return status, headers, (message + "\n").encode("utf-8")


class HTTPServer:
    """An HTTP front end that answers JSON-RPC requests sent by POST."""

    def __init__(self, server: "ServerBuilder") -> None:
        self.server = server

    def handle_post(self, body: bytes) -> Reply:
        """Answer a POST body; returns status, headers and response body."""
        try:
            request = Request.from_dict(json.loads(body))
        except ValueError:
            return _error_reply(HTTPStatus.BAD_REQUEST, "Invalid request body")

        try:
            handler = self.server.resolve_handler(request)
        except Exception as err:
            return _error_reply(HTTPStatus.NOT_FOUND, f"Failed to resolve handler: {err}")

        headers = {
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "Access-Control-Allow-Origin": "*",
        }
        buffer = io.StringIO()
        handler.serve_rpc(buffer, request)
        return HTTPStatus.OK, headers, buffer.getvalue().encode("utf-8")

    def handle_options(self) -> Reply:
        """Answer a CORS preflight request."""
        headers = {
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type, Accept",
        }
        return HTTPStatus.OK, headers, b""

    def make_request_handler(self, pattern: str) -> type[BaseHTTPRequestHandler]:
        """Return a request handler class serving ``/pattern``."""
        app = self
        route = "/" + pattern

        class _Handler(BaseHTTPRequestHandler):
            protocol_version = "HTTP/1.1"

            def _dispatch(self) -> None:
                length = self.headers.get("Content-Length", "")
                body = self.rfile.read(int(length)) if length.isdigit() else b""
                if urlsplit(self.path).path != route:
                    reply = _error_reply(HTTPStatus.NOT_FOUND, "404 page not found")
                elif self.command == "POST":
                    reply = app.handle_post(body)
                elif self.command == "OPTIONS":
                    reply = app.handle_options()
                else:
                    reply = _error_reply(HTTPStatus.METHOD_NOT_ALLOWED, "Method Not Allowed")
                    reply[1]["Allow"] = "OPTIONS, POST"

                status, headers, payload = reply
                self.send_response(int(status))
                for name, value in headers.items():
                    self.send_header(name, value)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                if self.command != "HEAD":
                    self.wfile.write(payload)

            do_POST = do_OPTIONS = do_GET = do_HEAD = do_PUT = do_PATCH = do_DELETE = _dispatch

            def log_message(self, format: str, *args: object) -> None:
                _log.debug(format, *args)

        return _Handler

    def listen_and_serve(self, pattern: str, addr: str) -> None:
        """Serve ``/pattern`` on ``addr`` (``host:port``) until interrupted."""
        host, sep, port = addr.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"invalid listen address: {addr!r}")
        host = host[1:-1] if host.startswith("[") and host.endswith("]") else host
        with ThreadingHTTPServer((host, int(port)), self.make_request_handler(pattern)) as httpd:
            httpd.serve_forever()