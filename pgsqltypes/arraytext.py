"""Reading and writing the text form of one- and many-dimensional arrays."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from .pgtext import encode

_OPEN = ord("{")
_CLOSE = ord("}")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_NULL = b"NULL"
_BYTES_TYPES = (bytes, bytearray, memoryview)


class ArrayError(ValueError):
    """Raised when an array cannot be read or written."""


def _to_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _quote_byte(b: int) -> str:
    char = chr(b)
    if char in "'\\":
        return f"'\\{char}'"
    if b < 0x80 and char.isprintable():
        return f"'{char}'"
    return f"'\\x{b:02x}'"


def _unexpected(data: bytes, i: int) -> ArrayError:
    return ArrayError(
        f"boil: unable to parse array; unexpected {_quote_byte(data[i])} at offset {i}"
    )


def _format_dims(dims: Sequence[int]) -> str:
    return "[" + "][".join(str(d) for d in dims) + "]"


def parse_array(
    src: bytes | str, delimiter: bytes | str = b","
) -> tuple[list[int], list[bytes | None]]:
    """Split an array's text form into its dimensions and raw elements.

    Only the form the server emits is accepted: whitespace is significant
    and NULL is case-sensitive. NULL elements come back as None.
    """
    data = _to_bytes(src)
    delim = _to_bytes(delimiter)
    n = len(data)

    if n < 1 or data[0] != _OPEN:
        raise ArrayError("boil: unable to parse array; expected '{' at offset 0")

    depth = 0
    i = 0
    elems: list[bytes | None] = []
    dims: list[int] = []
    empty = False

    while i < n:
        if data[i] == _OPEN:
            depth += 1
            i += 1
        elif data[i] == _CLOSE:
            empty = True
            break
        else:
            break

    if not empty:
        dims = [0] * i
        while True:
            while i < n:
                c = data[i]
                if c == _OPEN:
                    if depth == len(dims):
                        break
                    depth += 1
                    dims[depth - 1] = 0
                    i += 1
                elif c == _QUOTE:
                    elem = bytearray()
                    escape = False
                    closed = False
                    i += 1
                    while i < n:
                        ch = data[i]
                        if escape:
                            elem.append(ch)
                            escape = False
                        elif ch == _BACKSLASH:
                            escape = True
                        elif ch == _QUOTE:
                            elems.append(bytes(elem))
                            i += 1
                            closed = True
                            break
                        else:
                            elem.append(ch)
                        i += 1
                    if closed:
                        break
                else:
                    start = i
                    found = False
                    while i < n:
                        if data.startswith(delim, i) or data[i] == _CLOSE:
                            raw = data[start:i]
                            if not raw:
                                raise _unexpected(data, i)
                            elems.append(None if raw == _NULL else raw)
                            found = True
                            break
                        i += 1
                    if found:
                        break

            next_element = False
            while i < n:
                if data.startswith(delim, i) and depth > 0:
                    dims[depth - 1] += 1
                    i += len(delim)
                    next_element = True
                    break
                if data[i] == _CLOSE and depth > 0:
                    dims[depth - 1] += 1
                    depth -= 1
                    i += 1
                else:
                    raise _unexpected(data, i)
            if not next_element:
                break

    while i < n:
        if data[i] == _CLOSE and depth > 0:
            depth -= 1
            i += 1
        else:
            raise _unexpected(data, i)

    if depth > 0:
        raise ArrayError(f"boil: unable to parse array; expected '}}' at offset {i}")
    for d in dims:
        if d == 0 or len(elems) % d != 0:
            raise ArrayError(
                "boil: multidimensional arrays must have elements with matching dimensions"
            )
    return dims, elems


def scan_linear_array(
    src: bytes | str, delimiter: bytes | str, type_name: str
) -> list[bytes | None]:
    """Parse an array that must have at most one dimension."""
    dims, elems = parse_array(src, delimiter)
    if len(dims) > 1:
        raise ArrayError(f"boil: cannot convert ARRAY{_format_dims(dims)} to {type_name}")
    return elems


def quote_array_element(v: bytes | str) -> str:
    """Double-quote an element, escaping quotes and backslashes."""
    text = v if isinstance(v, str) else bytes(v).decode("utf-8", errors="surrogateescape")
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _is_nested(v: Any) -> bool:
    return isinstance(v, (list, tuple)) and not callable(getattr(v, "value", None))


def _format_scalar(v: Any) -> tuple[str, str]:
    delim = ","
    array_delimiter = getattr(v, "array_delimiter", None)
    if callable(array_delimiter):
        delim = array_delimiter()

    value_method = getattr(v, "value", None)
    if callable(value_method):
        v = value_method()

    if v is None:
        return "NULL", delim
    if isinstance(v, _BYTES_TYPES) or isinstance(v, str):
        return quote_array_element(v if isinstance(v, str) else bytes(v)), delim
    if isinstance(v, (bool, int, float, datetime)):
        return encode(v).decode("utf-8", errors="surrogateescape"), delim
    raise ArrayError(f"boil: unsupported type {type(v).__name__}")


def _format_element(v: Any) -> tuple[str, str]:
    if _is_nested(v):
        if v:
            return _format_items(v)
        return "", ""
    return _format_scalar(v)


def _format_items(items: Sequence[Any]) -> tuple[str, str]:
    parts = ["{"]
    text, delim = _format_element(items[0])
    parts.append(text)
    for item in items[1:]:
        parts.append(delim)
        text, delim = _format_element(item)
        parts.append(text)
    parts.append("}")
    return "".join(parts), delim


def format_array(value: Any) -> str | None:
    """Write a list or tuple of any depth in the array text form; None stays None."""
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise ArrayError(f"boil: Unable to convert {type(value).__name__} to array")
    if not value:
        return "{}"
    text, _ = _format_items(value)
    return text