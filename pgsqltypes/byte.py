"""A single-byte value stored as a one-character column."""

from __future__ import annotations

import json
from typing import Callable

NextInt = Callable[[], int]


def _trunc_mod(value: int, modulus: int) -> int:
    """Remainder whose sign follows the dividend."""
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


def _first_byte(data: bytes, what: str) -> int:
    if not data:
        raise ValueError(f"cannot convert empty {what} to byte")
    return data[0]


class Byte(int):
    """A byte that reads and writes as a one-character string."""

    def __new__(cls, value: int | str | bytes = 0) -> Byte:
        if isinstance(value, str):
            encoded = value.encode("utf-8")
            if len(encoded) != 1:
                raise ValueError(f"{value!r} is not a single byte")
            value = encoded[0]
        elif isinstance(value, (bytes, bytearray)):
            if len(value) != 1:
                raise ValueError(f"{value!r} is not a single byte")
            value = value[0]
        code = int(value)
        if not 0 <= code <= 255:
            raise ValueError(f"byte out of range: {code}")
        return super().__new__(cls, code)

    def __str__(self) -> str:
        return chr(self)

    def __repr__(self) -> str:
        return f"Byte({chr(self)!r})"

    def marshal_json(self) -> bytes:
        """Encode as a JSON string holding the raw byte."""
        return b'"' + bytes([self]) + b'"'

    def value(self) -> bytes:
        """The value sent to the database."""
        return bytes([self])


def byte_from_json(data: bytes | str) -> Byte:
    """Decode a JSON string of at most one byte."""
    try:
        text = json.loads(data)
    except ValueError as exc:
        raise ValueError(f"json: {exc}") from exc
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise ValueError(f"json: cannot unmarshal {type(text).__name__} into byte")
    encoded = text.encode("utf-8")
    if len(encoded) > 1:
        raise ValueError("json: cannot convert to byte, text len is greater than one")
    return Byte(_first_byte(encoded, "text"))


def scan_byte(src: object) -> Byte:
    """Read a byte from an integer, a string or a bytes value."""
    if isinstance(src, bool):
        raise TypeError("incompatible type for byte")
    if isinstance(src, int):
        return Byte(src)
    if isinstance(src, str):
        return Byte(_first_byte(src.encode("utf-8"), "string"))
    if isinstance(src, (bytes, bytearray, memoryview)):
        return Byte(_first_byte(bytes(src), "bytes"))
    raise TypeError("incompatible type for byte")


def random_byte(next_int: NextInt, should_be_null: bool) -> Byte:
    """A random printable ASCII byte; a byte can never be null."""
    return Byte(_trunc_mod(next_int(), 60) + 65)