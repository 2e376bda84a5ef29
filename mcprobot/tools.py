"""Tool definitions, a builder for them and argument validation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from mcprobot.errors import ErrorCode, ProtocolError
from mcprobot.protocol import HandlerFunc, Request
from mcprobot.responsewriter import ResponseWriter


@dataclass
class ToolAnnotations:
    """Optional hints about how a tool behaves."""

    title: str = ""
    read_only_hint: Optional[bool] = None
    destructive_hint: Optional[bool] = None
    idempotent_hint: Optional[bool] = None
    open_world_hint: Optional[bool] = None

    def to_dict(self) -> dict:
        payload: dict = {"title": self.title} if self.title else {}
        hints = {
            "readOnlyHint": self.read_only_hint,
            "destructiveHint": self.destructive_hint,
            "idempotentHint": self.idempotent_hint,
            "openWorldHint": self.open_world_hint,
        }
        payload.update({key: value for key, value in hints.items() if value is not None})
        return payload


def _invalid(message: str) -> ProtocolError:
    return ProtocolError(ErrorCode.INVALID_PARAMS, message)


_TYPE_CHECKS = {
    "string": (lambda arg: isinstance(arg, str), "a string"),
    "number": (lambda arg: isinstance(arg, (int, float)) and not isinstance(arg, bool), "a number"),
    "boolean": (lambda arg: isinstance(arg, bool), "a boolean"),
    "array": (lambda arg: isinstance(arg, list), "an array"),
}


def validate_argument_type(name: str, arg: Any, expected_type: str) -> None:
    """Raise ProtocolError if ``arg`` does not match the schema type."""
    check = _TYPE_CHECKS.get(expected_type)
    if check is None:
        if isinstance(arg, dict):
            raise _invalid(f"object arguments are not supported. argument '{name}' is an object. ")
        return
    matches, noun = check
    if not matches(arg):
        raise _invalid(f"argument '{name}' must be {noun}")


@dataclass
class ToolDefinition:
    """Name, description and input schema of a tool."""

    name: str
    description: str = ""
    input_schema: dict = field(default_factory=dict)
    required: list = field(default_factory=list)
    annotations: Optional[ToolAnnotations] = None

    def to_dict(self) -> dict:
        payload: dict = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
        if self.required:
            payload["required"] = list(self.required)
        if self.annotations is not None:
            payload["annotations"] = self.annotations.to_dict()
        return payload

    def validate_arguments(self, args: dict) -> None:
        """Raise ProtocolError if ``args`` does not fit this tool's schema."""
        for name in self.required:
            if name not in args:
                raise _invalid(f"missing required argument: {name}")

        properties = self.input_schema.get("properties")
        if not isinstance(properties, dict):
            return

        for name, arg in args.items():
            if name not in properties:
                raise _invalid(f"unexpected argument: {name}")
            schema = properties[name]
            if not isinstance(schema, dict):
                raise _invalid(f"invalid schema for argument: {name}. {type(schema).__name__}")
            expected = schema.get("type")
            if not isinstance(expected, str):
                raise _invalid(f"invalid schema for argument: {name}. {type(expected).__name__}")
            validate_argument_type(name, arg, expected)


class ToolBuilder:
    """Fluent builder for a ToolDefinition."""

    def __init__(self, name: str) -> None:
        self._definition = ToolDefinition(name=name)

    def description(self, description: str) -> "ToolBuilder":
        self._definition.description = description
        return self

    def _with_property(self, name: str, description: str, kind: str, required: bool) -> "ToolBuilder":
        schema = self._definition.input_schema
        if schema.get("properties") is None:
            schema["properties"] = {}
            schema["type"] = "object"
        schema["properties"][name] = {"type": kind, "description": description}
        if required:
            self._definition.required.append(name)
        return self

    def with_string_property(self, name: str, description: str, required: bool) -> "ToolBuilder":
        return self._with_property(name, description, "string", required)

    def with_number_property(self, name: str, description: str, required: bool) -> "ToolBuilder":
        return self._with_property(name, description, "number", required)

    def with_boolean_property(self, name: str, description: str, required: bool) -> "ToolBuilder":
        return self._with_property(name, description, "boolean", required)

    def with_array_property(self, name: str, description: str, required: bool) -> "ToolBuilder":
        return self._with_property(name, description, "array", required)

    def _annotate(self, **hints: Any) -> "ToolBuilder":
        if self._definition.annotations is None:
            self._definition.annotations = ToolAnnotations()
        for key, value in hints.items():
            setattr(self._definition.annotations, key, value)
        return self

    def title(self, title: str) -> "ToolBuilder":
        return self._annotate(title=title)

    def mark_read_only(self, read_only: bool) -> "ToolBuilder":
        return self._annotate(read_only_hint=read_only)

    def mark_as_destructive(self, is_destructive: bool) -> "ToolBuilder":
        return self._annotate(destructive_hint=is_destructive)

    def mark_as_idempotent(self, is_idempotent: bool) -> "ToolBuilder":
        return self._annotate(idempotent_hint=is_idempotent)

    def mark_as_calling_open_world(self, calls_open_world: bool) -> "ToolBuilder":
        return self._annotate(open_world_hint=calls_open_world)

    def build(self) -> ToolDefinition:
        """Return a copy of the definition built so far."""
        return copy.deepcopy(self._definition)


def new_tool(name: str) -> ToolBuilder:
    """Start building a tool called ``name``."""
    return ToolBuilder(name)


def tool_handler(func: Callable[[dict], Any]) -> HandlerFunc:
    """Wrap ``func(arguments) -> result`` as a handler for tools/call requests."""

    def serve(writer: Any, request: Request) -> None:
        response = ResponseWriter(writer, request.id)
        args = (request.params or {}).get("arguments")
        if not isinstance(args, dict):
            args = {}
        failure = "failed to write response for reqID: {}: {}"
        try:
            result = func(args)
        except ProtocolError as err:
            response.write_error(err.code, err.message)
            return
        except Exception as err:
            response.write_tool_error(failure.format(request.id, err))
            return
        try:
            response.write_tool_result(result)
        except (TypeError, ValueError) as err:
            response.write_tool_error(failure.format(request.id, err))

    return HandlerFunc(serve)