"""Raw JSON stored as bytes."""

from __future__ import annotations

import json
from typing import Any

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


def _loads(data: bytes) -> Any:
    return json.loads(data, parse_constant=_reject_constant)


class JSON(bytes):
    """An unparsed JSON document."""

    def __new__(cls, data: bytes | str = b"") -> JSON:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return super().__new__(cls, data)

    def __str__(self) -> str:
        return self.decode("utf-8", errors="replace")

    def unmarshal(self) -> Any:
        """Parse the document into Python objects."""
        return _loads(self)

    def marshal_json(self) -> bytes:
        """The document itself, as its own JSON encoding."""
        return bytes(self)

    def value(self) -> bytes:
        """The value sent to the database; the document must be valid JSON."""
        _loads(self)
        return bytes(self)


def json_from_object(obj: Any) -> JSON:
    """Encode a Python object compactly as JSON."""
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    for char, escape in _HTML_ESCAPES:
        text = text.replace(char, escape)
    return JSON(text)


def scan_json(src: object) -> JSON:
    """Read a document from a string or bytes value."""
    if isinstance(src, (str, bytes, bytearray, memoryview)):
        return JSON(src if isinstance(src, str) else bytes(src))
    raise TypeError("incompatible type for json")