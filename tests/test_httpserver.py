import http.client
import json
import threading
from http.server import ThreadingHTTPServer

import pytest

from mcprobot.errors import ErrorCode
from mcprobot.protocol import PROTOCOL_VERSION
from mcprobot.results import text_result
from mcprobot.server import ServerBuilder
from mcprobot.tools import new_tool, tool_handler


def _http():
    definition = new_tool("echo").with_string_property("text", "Text", True).build()
    handler = tool_handler(lambda args: text_result(args["text"]))
    return ServerBuilder("robot", "1.0").with_tool(definition, handler).build_http_server()


def _body(payload):
    return json.dumps(payload).encode("utf-8")


def test_handle_post_initialize():
    status, headers, body = _http().handle_post(
        _body({"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    )
    assert status == 200
    assert headers["Content-Type"] == "application/json"
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert json.loads(body)["result"]["protocolVersion"] == PROTOCOL_VERSION


def test_handle_post_invalid_body():
    status, headers, body = _http().handle_post(b"{broken")
    assert status == 400
    assert body == b"Invalid request body\n"


def test_handle_post_unknown_method():
    status, _, body = _http().handle_post(_body({"jsonrpc": "2.0", "id": 1, "method": "foo"}))
    assert status == 404
    assert body.decode() == "Failed to resolve handler: method not found: foo\n"


def test_handle_post_tool_error_from_tool():
    definition = new_tool("fail").build()

    def failing(args):
        raise RuntimeError("boom")

    server = ServerBuilder("robot", "1.0").with_tool(definition, tool_handler(failing))
    status, _, body = server.build_http_server().handle_post(
        _body({"jsonrpc": "2.0", "id": 2, "method": "tools/call", "params": {"name": "fail"}})
    )
    result = json.loads(body)["result"]
    assert status == 200
    assert result["isError"] is True
    assert "boom" in result["content"][0]["text"]


def test_handle_options():
    status, headers, body = _http().handle_options()
    assert status == 200
    assert headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert headers["Access-Control-Allow-Headers"] == "Content-Type, Accept"
    assert body == b""


def test_listen_and_serve_rejects_bad_address():
    with pytest.raises(ValueError):
        _http().listen_and_serve("mcp", "no-port-here")


@pytest.fixture
def live_server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _http().make_request_handler("mcp"))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd.server_address[1]
    httpd.shutdown()
    httpd.server_close()
    thread.join()


def _request(port, method, path, body=None):
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        headers = {"Content-Type": "application/json"} if body is not None else {}
        conn.request(method, path, body=body, headers=headers)
        response = conn.getresponse()
        return response.status, dict(response.getheaders()), response.read()
    finally:
        conn.close()


def test_live_post_tool_call(live_server):
    payload = {"jsonrpc": "2.0", "id": 6, "method": "tools/call",
               "params": {"name": "echo", "arguments": {"text": "over http"}}}
    status, _, body = _request(live_server, "POST", "/mcp", _body(payload))
    decoded = json.loads(body)
    assert status == 200
    assert decoded["id"] == 6
    assert decoded["result"]["content"] == [{"type": "text", "text": "over http"}]


def test_live_post_validation_error(live_server):
    payload = {"jsonrpc": "2.0", "id": 6, "method": "tools/call",
               "params": {"name": "echo", "arguments": {"text": 3}}}
    status, _, body = _request(live_server, "POST", "/mcp", _body(payload))
    assert status == 404
    assert b"argument 'text' must be a string" in body


def test_live_options(live_server):
    status, headers, _ = _request(live_server, "OPTIONS", "/mcp")
    assert status == 200
    assert headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"


def test_live_wrong_method_and_path(live_server):
    status, headers, _ = _request(live_server, "GET", "/mcp")
    assert status == 405
    assert "POST" in headers["Allow"]
    status, _, _ = _request(live_server, "POST", "/other", _body({"id": 1}))
    assert status == 404


def test_error_code_constant_used_for_params():
    status, _, body = _http().handle_post(
        _body({"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {}})
    )
    assert status == 404
    assert ErrorCode.INVALID_PARAMS == -32602
    assert b"missing or invalid 'name' parameter" in body