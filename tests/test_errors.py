import pytest

from mcprobot.errors import ErrorCode, ProtocolError


def test_message_is_string_form():
    err = ProtocolError(ErrorCode.INVALID_PARAMS, "missing or invalid 'name' parameter")
    assert str(err) == "missing or invalid 'name' parameter"
    assert err.message == "missing or invalid 'name' parameter"


def test_code_is_plain_int():
    err = ProtocolError(ErrorCode.METHOD_NOT_FOUND, "method not found: x")
    assert err.code == -32601
    assert type(err.code) is int


def test_to_dict():
    err = ProtocolError(ErrorCode.INVALID_PARAMS, "bad")
    assert err.to_dict() == {"code": -32602, "message": "bad"}


def test_parse_error_carries_code_and_message():
    err = ProtocolError(ErrorCode.PARSE_ERROR, "broken")
    assert err.code == -32700
    assert err.to_dict() == {"code": -32700, "message": "broken"}
    with pytest.raises(Exception, match="^broken$"):
        raise err


def test_codes_map_by_value():
    assert ErrorCode(-32000) is ErrorCode.TOOL_NOT_FOUND
    assert ErrorCode(-32001) is ErrorCode.TOOL_EXECUTION_FAILED
    assert ErrorCode(-32600) is ErrorCode.INVALID_REQUEST
    assert ErrorCode(-32603) is ErrorCode.INTERNAL_ERROR