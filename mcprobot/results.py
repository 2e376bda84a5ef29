"""Content items that a tool can return."""

from __future__ import annotations

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class ToolResultText:
    """A text content item."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolResultMedia:
    """A base64-encoded media content item."""

    type: str
    data: str
    mime_type: str

    def to_dict(self) -> dict:
        return {"type": self.type, "data": self.data, "mimeType": self.mime_type}


class ToolResultStructured(dict):
    """A structured result, sent both as text and as structured content."""


def text_result(text: str) -> ToolResultText:
    """Return a text content item."""
    return ToolResultText(text=text)


def _media(kind: str, data: bytes, mime_type: str) -> ToolResultMedia:
    return ToolResultMedia(
        type=kind,
        data=base64.b64encode(bytes(data)).decode("ascii"),
        mime_type=mime_type,
    )


def image_result(data: bytes, mime_type: str) -> ToolResultMedia:
    """Return an image content item holding ``data`` in base64."""
    return _media("image", data, mime_type)


def audio_result(data: bytes, mime_type: str) -> ToolResultMedia:
    """Return an audio content item holding ``data`` in base64."""
    return _media("audio", data, mime_type)