"""Arbitrary-precision DECIMAL values, nullable and not."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Context, DecimalException, InvalidOperation
from decimal import Decimal as BigDecimal
from typing import Callable

NextInt = Callable[[], int]

_STRICT = Context(traps=[InvalidOperation])
_NULL = b"null"


@dataclass
class _Settings:
    context: Context | None = None


_settings = _Settings()


class DecimalError(ValueError):
    """Raised when a decimal cannot be read or stored."""


def set_decimal_context(context: Context | None) -> None:
    """Set the context applied to newly created decimals; None keeps them exact."""
    if context is not None and not isinstance(context, Context):
        raise TypeError(f"expected a decimal.Context or None, got {type(context).__name__}")
    _settings.context = None if context is None else context.copy()


def _trunc_mod(value: int, modulus: int) -> int:
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


def _parse_text(text: str) -> BigDecimal:
    if not text or text != text.strip() or "_" in text:
        raise DecimalError(f"invalid decimal syntax: {json.dumps(text)}")
    try:
        return BigDecimal(text, _STRICT)
    except InvalidOperation as exc:
        raise DecimalError(f"invalid decimal syntax: {json.dumps(text)}") from exc


def _apply_context(big: BigDecimal, fresh: bool) -> BigDecimal:
    context = _settings.context
    if not fresh or context is None:
        return big
    try:
        return context.create_decimal(big)
    except DecimalException as exc:
        raise DecimalError(str(exc) or type(exc).__name__) from exc


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecimalError("decimal text is not valid UTF-8") from exc


def _value(big: BigDecimal) -> str:
    if big.is_nan():
        raise DecimalError("refusing to allow NaN into database")
    if big.is_infinite():
        raise DecimalError("refusing to allow infinity into database")
    return str(big)


def _scan(src: object, current_big: BigDecimal | None, can_null: bool) -> BigDecimal | None:
    if src is None:
        if not can_null:
            raise DecimalError("null cannot be scanned into decimal")
        return None
    fresh = current_big is None
    if isinstance(src, bool):
        raise TypeError(f"cannot scan decimal value: {src!r}")
    if isinstance(src, float):
        return _apply_context(BigDecimal(src), fresh)
    if isinstance(src, int):
        return _apply_context(BigDecimal(src), True)
    if isinstance(src, (str, bytes, bytearray, memoryview)):
        text = src if isinstance(src, str) else _decode(bytes(src))
        return _apply_context(_parse_text(text), fresh)
    raise TypeError(f"cannot scan decimal value: {src!r}")


def _from_json_text(data: bytes | str) -> BigDecimal | None:
    text = _decode(data)
    if text == "null":
        return None
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return _apply_context(_parse_text(text), True)


@dataclass(frozen=True)
class Decimal:
    """A DECIMAL that is never null; a missing number counts as zero."""

    big: BigDecimal | None = None

    def __str__(self) -> str:
        return "0" if self.big is None else str(self.big)

    def value(self) -> str:
        """The value sent to the database; NaN and infinity are refused."""
        return "0" if self.big is None else _value(self.big)


@dataclass(frozen=True)
class NullDecimal:
    """A DECIMAL that may be null."""

    big: BigDecimal | None = None

    def __str__(self) -> str:
        return "nil" if self.big is None else str(self.big)

    def __format__(self, spec: str) -> str:
        return "nil" if self.big is None else format(self.big, spec)

    def value(self) -> str | None:
        """The value sent to the database; None for null."""
        return None if self.big is None else _value(self.big)

    def marshal_json(self) -> bytes:
        """Encode as a bare JSON number, or null."""
        return _NULL if self.big is None else str(self.big).encode("ascii")

    def is_zero(self) -> bool:
        """True when the value is null."""
        return self.big is None


def scan_decimal(src: object, current: Decimal | None = None) -> Decimal:
    """Read a decimal; null is refused.

    A current value that already holds a number keeps full precision;
    otherwise the context set with set_decimal_context applies.
    """
    big = _scan(src, None if current is None else current.big, False)
    return Decimal(big)


def scan_null_decimal(src: object, current: NullDecimal | None = None) -> NullDecimal:
    """Read a nullable decimal; precision follows the same rule as scan_decimal."""
    big = _scan(src, None if current is None else current.big, True)
    return NullDecimal(big)


def decimal_from_json(data: bytes | str) -> Decimal:
    """Decode a JSON number or string; null leaves the value at zero."""
    big = _from_json_text(data)
    return Decimal(BigDecimal(0) if big is None else big)


def null_decimal_from_json(data: bytes | str) -> NullDecimal:
    """Decode a JSON number or string; null gives a null decimal."""
    if _decode(data) == "null":
        return NullDecimal(None)
    return NullDecimal(_from_json_text(data))


def random_decimal(next_int: NextInt, should_be_null: bool) -> BigDecimal | None:
    """A random one-digit decimal such as 7.3, or None when it should be null."""
    if should_be_null:
        return None
    text = f"{_trunc_mod(next_int(), 10)}.{_trunc_mod(next_int(), 10)}"
    try:
        big = _parse_text(text)
    except DecimalError as exc:
        raise DecimalError("random value could not be turned into a decimal") from exc
    return _apply_context(big, True)