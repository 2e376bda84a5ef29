# mcprobot

`mcprobot` is a small library for writing Model Context Protocol (MCP)
tool servers. You describe each tool with a builder and register a handler
for it. The tools are then served with JSON-RPC 2.0, either over a text
stream such as standard input/output or over HTTP.

The library uses only the Python standard library. It requires Python 3.10
or newer.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Defining a tool

```python
from mcprobot.tools import new_tool, tool_handler
from mcprobot.results import text_result

greet = (
    new_tool("greet")
    .description("Say hello to someone")
    .with_string_property("name", "Who to greet", True)
    .title("Greeter")
    .mark_read_only(True)
    .build()
)

def greet_impl(args):
    return text_result(f"Hello, {args['name']}!")

greet_handler = tool_handler(greet_impl)
```

`ToolBuilder` also offers `with_number_property`, `with_boolean_property`,
`with_array_property`, `mark_as_destructive`, `mark_as_idempotent` and
`mark_as_calling_open_world`. `build()` returns a copy of the
`ToolDefinition`, so you can keep using the builder afterwards.

Before the server calls a tool, `ToolDefinition.validate_arguments` checks
its arguments. It rejects missing required arguments and arguments that are
not declared. It also checks the `string`, `number` (an int or a float, but
not a bool), `boolean` and `array` types. Each failure raises
`mcprobot.errors.ProtocolError` with code `ErrorCode.INVALID_PARAMS`
(`-32602`).

`tool_handler(func)` turns `func(arguments) -> result` into a handler. The
result may be any of these:

- a `ToolResultText`, from `text_result`
- a `ToolResultMedia`, from `image_result` or `audio_result`, which
  base64-encode the bytes you pass
- a list or tuple of such items
- a `ToolResultStructured` (a `dict` subclass)

A structured result is sent twice: as a JSON text item under `content`, and
as it is under `structuredContent`.

When `func` raises `ProtocolError`, the reply is a JSON-RPC error that
carries its code and message. Any other exception becomes a tool result with
`isError: true`, and so does a result of an unsupported type.

You can also pass `with_tool` any object that implements
`mcprobot.protocol.MCPHandler`. A plain callable `(writer, request)` works
too; it is wrapped in `HandlerFunc`. Such a handler writes its own response,
usually through `mcprobot.responsewriter.ResponseWriter`.

## Serving over a stream

```python
import sys
from mcprobot.server import ServerBuilder

server = ServerBuilder("my-server", "1.0.0").with_tool(greet, greet_handler)
server.build_stdio_server().listen_and_serve(sys.stdin, sys.stdout)
```

`StdioServer.listen_and_serve(reader, writer)` expects one JSON request per
line. It skips blank lines, writes one JSON response per line and stops at
end of input. When you leave out the reader or the writer, it uses
`sys.stdin` or `sys.stdout` in its place.

If a line is not valid JSON, or its `id` is not an integer, the server
replies with error `-32700` and id `0`. If the method is unknown or the
arguments are invalid, it replies with an error whose code comes from the
`ProtocolError`. `StdioServer.handle_request(data, writer)` handles a single
request.

The server answers `initialize`, `tools/list` and `tools/call`. If at least
one tool is registered, `initialize` advertises the `tools` capability.

## Serving over HTTP

```python
http_server = server.build_http_server()
http_server.listen_and_serve("mcp", "127.0.0.1:8080")
```

This serves `POST /mcp` for JSON-RPC requests and `OPTIONS /mcp` for CORS
preflight. It runs until it is interrupted. Other paths get `404`, and other
methods on the path get `405`.

An HTTP request is answered differently from a stream request:

- A body that cannot be decoded gets a plain-text `400`.
- A request the server cannot route (unknown method, unknown tool or invalid
  arguments) gets a plain-text `404` that starts with
  `Failed to resolve handler:`. It does not get a JSON-RPC error.

`HTTPServer.handle_post(body)` and `HTTPServer.handle_options()` return
`(status, headers, body)` tuples. You can call them without opening a socket.
`make_request_handler(pattern)` returns a `BaseHTTPRequestHandler` subclass
for use with your own `http.server` server.

## What it does not do

- It only handles tools. It has no resources, prompts or logging, and it does
  not answer `roots/list`.
- It does not handle notifications. A notification such as
  `notifications/initialized` gets a "method not found" error, like any other
  unknown method.
- Request ids must be integers. String ids are rejected.
- The HTTP front end answers each POST with a single JSON body. It does not
  stream and it does not track sessions.
- The package provides no command-line program. You start a server from your
  own code, as shown above.