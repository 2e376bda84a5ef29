import base64

from mcprobot.results import (
    ToolResultMedia,
    ToolResultStructured,
    ToolResultText,
    audio_result,
    image_result,
    text_result,
)


def test_text_result():
    item = text_result("hello")
    assert item == ToolResultText("hello")
    assert item.to_dict() == {"type": "text", "text": "hello"}


def test_image_result_round_trip():
    raw = b"\x89PNG\x00\xff"
    item = image_result(raw, "image/png")
    assert item.type == "image"
    assert item.mime_type == "image/png"
    assert base64.b64decode(item.data) == raw


def test_audio_result_round_trip():
    raw = bytes(range(50))
    item = audio_result(raw, "audio/wav")
    assert item.type == "audio"
    assert base64.b64decode(item.data) == raw


def test_media_to_dict_keys():
    item = ToolResultMedia("image", "AAAA", "image/gif")
    assert item.to_dict() == {"type": "image", "data": "AAAA", "mimeType": "image/gif"}


def test_empty_media():
    assert image_result(b"", "image/png").data == ""


def test_structured_behaves_as_dict():
    structured = ToolResultStructured(a=1, b=[2])
    assert structured["b"] == [2]
    assert dict(structured) == {"a": 1, "b": [2]}