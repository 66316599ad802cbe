"""One-dimensional typed arrays and a generic array of any depth."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .arraytext import ArrayError, format_array, parse_array, quote_array_element, scan_linear_array
from .decimal import Decimal, DecimalError, random_decimal, scan_decimal
from .pgtext import encode, parse_bytea

NextInt = Callable[[], int]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_BYTES_TYPES = (bytes, bytearray, memoryview)


def _quote(raw: bytes | None) -> str:
    text = (raw or b"").decode("utf-8", errors="backslashreplace")
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _format_dims(dims: Sequence[int]) -> str:
    return "[" + "][".join(str(d) for d in dims) + "]"


def _source_bytes(src: object, target: str) -> bytes:
    if isinstance(src, str):
        return src.encode("utf-8")
    if isinstance(src, _BYTES_TYPES):
        return bytes(src)
    raise TypeError(f"boil: cannot convert {type(src).__name__} to {target}")


def _scan_linear(src: object, cls: type, convert: Callable[[int, bytes | None], Any]) -> Any:
    if src is None:
        return None
    data = _source_bytes(src, cls.__name__)
    elems = scan_linear_array(data, b",", cls.__name__)
    return cls(convert(i, raw) for i, raw in enumerate(elems))


class BoolArray(list):
    """An array of booleans."""

    def value(self) -> str:
        return "{" + ",".join("t" if x else "f" for x in self) + "}"


class BytesArray(list):
    """An array of bytea values, written in the hex format."""

    def value(self) -> str:
        parts = (f'"\\\\x{bytes(x or b"").hex()}"' for x in self)
        return "{" + ",".join(parts) + "}"


class Float64Array(list):
    """An array of double precision numbers."""

    def value(self) -> str:
        return "{" + ",".join(encode(float(x)).decode("ascii") for x in self) + "}"


class Int64Array(list):
    """An array of integers."""

    def value(self) -> str:
        return "{" + ",".join(str(int(x)) for x in self) + "}"


class StringArray(list):
    """An array of character strings."""

    def value(self) -> str:
        return "{" + ",".join(quote_array_element(x) for x in self) + "}"


class DecimalArray(list):
    """An array of decimals."""

    def value(self) -> str:
        return "{" + ",".join(str(d) for d in self) + "}"


@dataclass(frozen=True)
class GenericArray:
    """A list or tuple of any depth, written in the array text form."""

    a: Any = None

    def value(self) -> str | None:
        return format_array(self.a)


_TYPED: tuple[tuple[type, type], ...] = (
    (bool, BoolArray),
    (float, Float64Array),
    (int, Int64Array),
    (str, StringArray),
)
_TYPED_CLASSES = (BoolArray, BytesArray, Float64Array, Int64Array, StringArray, DecimalArray)


def array(a: Any) -> Any:
    """Wrap a sequence in the best-suited array type.

    A non-empty flat list of bools, floats, ints or strings gets its typed
    array; anything else, including an empty list, becomes a GenericArray.
    """
    if isinstance(a, _TYPED_CLASSES):
        return a
    if isinstance(a, (list, tuple)) and a:
        for kind, cls in _TYPED:
            if all(type(x) is kind for x in a):
                return cls(a)
    return GenericArray(a)


def _to_bool(i: int, raw: bytes | None) -> bool:
    first = (raw or b"")[:1]
    if first in (b"t", b"T"):
        return True
    if first in (b"f", b"F"):
        return False
    raise ArrayError(
        f"boil: could not parse boolean array index {i}: invalid boolean {_quote(raw)}"
    )


def _to_bytes(i: int, raw: bytes | None) -> bytes | None:
    if raw is None:
        return None
    try:
        return parse_bytea(raw)
    except ValueError as exc:
        raise ArrayError(f"could not parse bytea array index {i}: {exc}") from exc


def _to_float(i: int, raw: bytes | None) -> float:
    text = (raw or b"").decode("latin-1")
    if text and not any(c.isspace() or c == "_" for c in text):
        try:
            return float(text)
        except ValueError:
            pass
    raise ArrayError(f"boil: parsing array element index {i}: invalid syntax {_quote(raw)}")


def _to_int(i: int, raw: bytes | None) -> int:
    text = (raw or b"").decode("latin-1")
    if not _INT_RE.fullmatch(text):
        raise ArrayError(f"boil: parsing array element index {i}: invalid syntax {_quote(raw)}")
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ArrayError(f"boil: parsing array element index {i}: value out of range {_quote(raw)}")
    return number


def _to_str(i: int, raw: bytes | None) -> str:
    if raw is None:
        raise ArrayError(f"boil: parsing array element index {i}: cannot convert nil to string")
    return raw.decode("utf-8", errors="surrogateescape")


def _to_decimal(i: int, raw: bytes | None) -> Decimal:
    try:
        return scan_decimal(raw if raw is not None else b"")
    except (DecimalError, TypeError) as exc:
        text = (raw or b"").decode("utf-8", errors="replace")
        raise ArrayError(
            f"boil: parsing decimal element index as decimal {i}: {text}"
        ) from exc


def scan_bool_array(src: object) -> BoolArray | None:
    """Read a boolean array; None stays None."""
    return _scan_linear(src, BoolArray, _to_bool)


def scan_bytes_array(src: object) -> BytesArray | None:
    """Read a bytea array; NULL elements become None."""
    return _scan_linear(src, BytesArray, _to_bytes)


def scan_float64_array(src: object) -> Float64Array | None:
    """Read a double precision array; None stays None."""
    return _scan_linear(src, Float64Array, _to_float)


def scan_int64_array(src: object) -> Int64Array | None:
    """Read an integer array; None stays None."""
    return _scan_linear(src, Int64Array, _to_int)


def scan_string_array(src: object) -> StringArray | None:
    """Read a string array; NULL elements are refused."""
    return _scan_linear(src, StringArray, _to_str)


def scan_decimal_array(src: object) -> DecimalArray | None:
    """Read a decimal array; None stays None."""
    return _scan_linear(src, DecimalArray, _to_decimal)


def _element_delimiter(element_type: Any) -> str:
    attr = getattr(element_type, "array_delimiter", None)
    if isinstance(attr, str):
        return attr
    if callable(attr):
        return attr()
    return ","


def _describe(length: int | None) -> str:
    return "list" if length is None else f"array of length {length}"


def scan_generic_array(
    src: object, element_type: Callable[[bytes | None], Any], length: int | None = None
) -> list[Any] | None:
    """Read a one-dimensional array, building each element with element_type.

    element_type receives the raw bytes of an element, or None for NULL. It
    may carry an ``array_delimiter`` string, or a function returning one.
    With a length the array must have exactly that many elements.
    """
    target = _describe(length)
    if src is None:
        if length is None:
            return None
        raise TypeError(f"boil: cannot convert None to {target}")
    data = _source_bytes(src, target)

    dims, elems = parse_array(data, _element_delimiter(element_type))
    if len(dims) > 1:
        raise ArrayError(
            f"boil: scanning from multidimensional ARRAY{_format_dims(dims)} is not implemented"
        )
    if not dims:
        dims = [0]
    if length is not None and length != dims[0]:
        raise ArrayError(f"boil: cannot convert ARRAY{_format_dims(dims)} to {target}")

    values = []
    for i, raw in enumerate(elems):
        if not callable(element_type):
            raise ArrayError(
                f"boil: parsing array element index {i}: "
                f"scanning to {element_type!r} is not implemented; only callables"
            )
        try:
            values.append(element_type(raw))
        except (ValueError, TypeError) as exc:
            raise ArrayError(f"boil: parsing array element index {i}: {exc}") from exc
    return values


def random_bool_array(next_int: NextInt) -> BoolArray:
    """Three random booleans."""
    return BoolArray(next_int() % 2 == 0 for _ in range(3))


def random_float64_array(next_int: NextInt) -> Float64Array:
    """Two random floats."""
    return Float64Array(float(next_int()) for _ in range(2))


def random_int64_array(next_int: NextInt) -> Int64Array:
    """Two random integers."""
    return Int64Array(int(next_int()) for _ in range(2))


def random_decimal_array(next_int: NextInt) -> DecimalArray:
    """Two random one-digit decimals."""
    return DecimalArray(Decimal(random_decimal(next_int, False)) for _ in range(2))