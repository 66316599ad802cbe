"""Text encodings of scalar values: bytea and timestamps."""

from __future__ import annotations

import binascii
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal as _Dec
from functools import lru_cache
from math import isinf, isnan

BYTEA_OID = 17

_INT_RE = re.compile(r"[+-]?[0-9]+")
_OCTAL_RE = re.compile(r"[+-]?[0-7]+")
_FRACTION_END = re.compile(r"[-+ ]")


@dataclass
class _InfinityBounds:
    enabled: bool = False
    negative: datetime | None = None
    positive: datetime | None = None


_infinity = _InfinityBounds()


class TimestampError(ValueError):
    """Raised when a timestamp cannot be read."""


@lru_cache(maxsize=None)
def _fixed_zone(offset: int) -> timezone:
    return timezone(timedelta(seconds=offset))


def _format_float(value: float) -> str:
    """Shortest fixed-point form of a float, without an exponent."""
    if isnan(value):
        return "NaN"
    if isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(_Dec(repr(value)).normalize(), "f")


def parse_bytea(s: bytes | str) -> bytes:
    """Decode a bytea value in either the hex or the escape format."""
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    if data.startswith(b"\\x"):
        try:
            return binascii.unhexlify(data[2:])
        except binascii.Error as exc:
            raise ValueError(f"invalid hex bytea: {exc}") from exc

    result = bytearray()
    while data:
        if data[0] == ord("\\"):
            if data[1:2] == b"\\":
                result.append(ord("\\"))
                data = data[2:]
                continue
            if len(data) < 4:
                raise ValueError(f"invalid bytea sequence {list(data)}")
            digits = data[1:4].decode("latin-1")
            if not _OCTAL_RE.fullmatch(digits):
                raise ValueError(f"could not parse bytea value: invalid syntax {digits!r}")
            number = int(digits, 8)
            if not -256 <= number <= 255:
                raise ValueError(f"could not parse bytea value: out of range {digits!r}")
            result.append(number & 0xFF)
            data = data[4:]
        else:
            index = data.find(b"\\")
            if index == -1:
                result.extend(data)
                break
            result.extend(data[:index])
            data = data[index:]
    return bytes(result)


def encode_bytea(server_version: int, v: bytes) -> bytes:
    """Encode bytes as bytea: hex for servers from 9.0, escape format before."""
    if server_version >= 90000:
        return b"\\x" + binascii.hexlify(bytes(v))
    out = bytearray()
    for b in bytes(v):
        if b == ord("\\"):
            out += b"\\\\"
        elif b < 0x20 or b > 0x7E:
            out += f"\\{b:03o}".encode("ascii")
        else:
            out.append(b)
    return bytes(out)


def encode(value: object, type_oid: int = 0, server_version: int = 0) -> bytes:
    """Encode a scalar in the text format the server reads."""
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, int):
        return str(value).encode("ascii")
    if isinstance(value, float):
        return _format_float(value).encode("ascii")
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        return encode_bytea(server_version, raw) if type_oid == BYTEA_OID else raw
    if isinstance(value, str):
        raw = value.encode("utf-8")
        return encode_bytea(server_version, raw) if type_oid == BYTEA_OID else raw
    if isinstance(value, datetime):
        return format_ts(value)
    raise TypeError(f"pq: encode: unknown type for {type(value).__name__}")


def enable_infinity_ts(negative: datetime, positive: datetime) -> None:
    """Map "-infinity" and "infinity" to the given bounds, once."""
    if _infinity.enabled:
        raise RuntimeError("pq: infinity timestamp enabled already")
    if not negative < positive:
        raise ValueError(
            "pq: infinity timestamp: negative value must be smaller (before) than positive"
        )
    _infinity.enabled = True
    _infinity.negative = negative
    _infinity.positive = positive


def disable_infinity_ts() -> None:
    """Stop mapping infinite timestamps and forget the bounds."""
    _infinity.enabled = False
    _infinity.negative = None
    _infinity.positive = None


def parse_ts(s: str, current_location: tzinfo | None = None) -> datetime | bytes:
    """Parse a timestamp, treating the infinities specially."""
    if s == "-infinity":
        return _infinity.negative if _infinity.enabled else s.encode("ascii")
    if s == "infinity":
        return _infinity.positive if _infinity.enabled else s.encode("ascii")
    return parse_timestamp(s, current_location)


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.err: TimestampError | None = None

    def expect(self, char: str, pos: int) -> None:
        if self.err is not None:
            return
        if pos + 1 > len(self.text):
            self.err = TimestampError("invalid timestamp")
            return
        got = self.text[pos]
        if got != char:
            self.err = TimestampError(f"expected {char!r} at position {pos}; got {got!r}")

    def atoi(self, begin: int, end: int) -> int:
        if self.err is not None:
            return 0
        if begin < 0 or end < 0 or begin > end or end > len(self.text):
            self.err = TimestampError("invalid timestamp")
            return 0
        piece = self.text[begin:end]
        if not _INT_RE.fullmatch(piece):
            self.err = TimestampError(f"expected number; got '{self.text}'")
            return 0
        return int(piece)


def parse_timestamp(s: str | bytes, current_location: tzinfo | None = None) -> datetime:
    """Parse the server's ISO text form of a timestamp or date.

    The result is in current_location when that zone agrees with the offset
    sent by the server, otherwise in a fixed zone with that offset.
    """
    text = s.decode("utf-8") if isinstance(s, (bytes, bytearray)) else s
    p = _Parser(text)

    mon_sep = text.find("-")
    year = p.atoi(0, mon_sep)
    day_sep = mon_sep + 3
    month = p.atoi(mon_sep + 1, day_sep)
    p.expect("-", day_sep)
    time_sep = day_sep + 3
    day = p.atoi(day_sep + 1, time_sep)

    hour = minute = second = 0
    if len(text) > mon_sep + len("01-01") + 1:
        p.expect(" ", time_sep)
        min_sep = time_sep + 3
        p.expect(":", min_sep)
        hour = p.atoi(time_sep + 1, min_sep)
        sec_sep = min_sep + 3
        p.expect(":", sec_sep)
        minute = p.atoi(min_sep + 1, sec_sep)
        second = p.atoi(sec_sep + 1, sec_sep + 3)

    rest = mon_sep + len("01-01 00:00:00") + 1
    nanos = 0
    tz_off = 0

    if 0 <= rest < len(text) and text[rest] == ".":
        frac_start = rest + 1
        match = _FRACTION_END.search(text, frac_start)
        frac_off = match.start() - frac_start if match else len(text) - frac_start
        frac = p.atoi(frac_start, frac_start + frac_off)
        nanos = frac * (10**9 // 10**frac_off)
        rest += frac_off + 1

    if 0 <= rest < len(text) and text[rest] in "-+":
        sign = -1 if text[rest] == "-" else 1
        tz_hours = p.atoi(rest + 1, rest + 3)
        rest += 3
        tz_min = tz_sec = 0
        if rest < len(text) and text[rest] == ":":
            tz_min = p.atoi(rest + 1, rest + 3)
            rest += 3
        if rest < len(text) and text[rest] == ":":
            tz_sec = p.atoi(rest + 1, rest + 3)
            rest += 3
        tz_off = sign * (tz_hours * 3600 + tz_min * 60 + tz_sec)

    if rest >= 0 and text[rest:rest + 3] == " BC":
        iso_year = 1 - year
        rest += 3
    else:
        iso_year = year

    if 0 <= rest < len(text):
        raise TimestampError(f"expected end of input, got {text[rest:]}")
    if p.err is not None:
        raise p.err

    zone = _fixed_zone(tz_off)
    norm_year = iso_year + (month - 1) // 12
    norm_month = (month - 1) % 12 + 1
    try:
        result = datetime(norm_year, norm_month, 1, tzinfo=zone) + timedelta(
            days=day - 1,
            hours=hour,
            minutes=minute,
            seconds=second,
            microseconds=nanos // 1000,
        )
    except (ValueError, OverflowError) as exc:
        raise TimestampError(f"timestamp out of range: {text!r}") from exc

    if current_location is not None:
        try:
            local = result.astimezone(current_location)
        except (ValueError, OverflowError):
            return result
        if local.utcoffset() == timedelta(seconds=tz_off):
            result = local
    return result


def format_ts(t: datetime) -> bytes:
    """Format a timestamp, using the infinities when they are enabled."""
    if _infinity.enabled:
        if not t > _infinity.negative:
            return b"-infinity"
        if not t < _infinity.positive:
            return b"infinity"
    return format_timestamp(t)


def format_timestamp(t: datetime) -> bytes:
    """Format a timestamp in the server's text form; naive times count as UTC."""
    text = (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    )
    if t.microsecond:
        text += "." + f"{t.microsecond:06d}".rstrip("0")

    delta = t.utcoffset()
    offset = 0 if delta is None else int(delta.total_seconds())
    if offset == 0:
        text += "Z"
    else:
        zone_minutes = abs(offset) // 60
        sign = "-" if offset < 0 and zone_minutes > 0 else "+"
        text += f"{sign}{zone_minutes // 60:02d}:{zone_minutes % 60:02d}"
        seconds = abs(offset) % 60
        if seconds:
            text += f":{seconds:02d}"
    return text.encode("ascii")