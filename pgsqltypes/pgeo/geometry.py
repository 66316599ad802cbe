"""Geometric types in the PostgreSQL text representation."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterable

NextInt = Callable[[], int]

_NUMBER = r"-?[0-9]+(?:\.[0-9]+)?"
_POINT_RE = re.compile(rf"\(({_NUMBER}),({_NUMBER})\)")
_ANY_POINT_RE = re.compile(rf"\((?:{_NUMBER}),(?:{_NUMBER})\)")
_LINE_RE = re.compile(rf"\{{({_NUMBER}),({_NUMBER}),({_NUMBER})\}}")


class GeometryError(ValueError):
    """Raised when a geometric value cannot be read."""


def _format_float(value: float) -> str:
    """Format a float the way the shortest general ("%v") form does."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    normal = Decimal(repr(abs(value))).normalize()
    _, digit_tuple, exponent = normal.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    point = len(digits) + exponent
    exp10 = point - 1

    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "+" if exp10 >= 0 else "-"
        return f"{sign}{mantissa}e{exp_sign}{abs(exp10):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _parse_float(text: str) -> float:
    if not text or any(c.isspace() or c == "_" for c in text):
        raise GeometryError(f"invalid number {text!r}")
    try:
        return float(text)
    except ValueError as exc:
        raise GeometryError(f"invalid number {text!r}") from exc


def _to_text(src: object) -> str:
    if isinstance(src, str):
        return src
    if isinstance(src, (bytes, bytearray, memoryview)):
        return bytes(src).decode("utf-8", errors="replace")
    raise GeometryError(f"incompatible type {type(src).__name__}")


def _format_point(point: Point) -> str:
    return f"({_format_float(point.x)},{_format_float(point.y)})"


def _format_points(points: Iterable[Point]) -> str:
    return ",".join(_format_point(p) for p in points)


def _parse_point(text: str) -> Point:
    match = _POINT_RE.fullmatch(text)
    if match is None:
        raise GeometryError("wrong point")
    return Point(float(match.group(1)), float(match.group(2)))


def _parse_points(text: str) -> tuple[Point, ...]:
    return tuple(_parse_point(m) for m in _ANY_POINT_RE.findall(text))


def _random_number(next_int: NextInt) -> float:
    return float(next_int())


@dataclass(frozen=True)
class Point:
    """A two-dimensional point."""

    x: float = 0.0
    y: float = 0.0

    def value(self) -> str:
        return _format_point(self)


@dataclass(frozen=True)
class Line:
    """An infinite line Ax + By + C = 0."""

    a: float = 0.0
    b: float = 0.0
    c: float = 0.0

    def value(self) -> str:
        return "{" + ",".join(_format_float(n) for n in (self.a, self.b, self.c)) + "}"


@dataclass(frozen=True)
class Lseg:
    """A line segment given by its two end points."""

    a: Point = field(default_factory=Point)
    b: Point = field(default_factory=Point)

    def value(self) -> str:
        return f"[{_format_points((self.a, self.b))}]"


@dataclass(frozen=True)
class Box:
    """A box given by two opposite corners."""

    a: Point = field(default_factory=Point)
    b: Point = field(default_factory=Point)

    def value(self) -> str:
        return f"({_format_points((self.a, self.b))})"


@dataclass(frozen=True)
class Path:
    """A list of connected points, open or closed."""

    points: tuple[Point, ...] = ()
    closed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def value(self) -> str:
        body = _format_points(self.points)
        return f"({body})" if self.closed else f"[{body}]"


@dataclass(frozen=True)
class Polygon:
    """A polygon given by its vertices."""

    points: tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def value(self) -> str:
        return f"({_format_points(self.points)})"


@dataclass(frozen=True)
class Circle:
    """A circle given by its centre and radius."""

    center: Point = field(default_factory=Point)
    radius: float = 0.0

    def value(self) -> str:
        return f"<{_format_point(self.center)},{_format_float(self.radius)}>"


def scan_point(src: object) -> Point:
    """Read a point; None gives the origin."""
    if src is None:
        return Point()
    return _parse_point(_to_text(src))


def scan_line(src: object) -> Line:
    """Read a line; None gives the zero line."""
    if src is None:
        return Line()
    match = _LINE_RE.fullmatch(_to_text(src))
    if match is None:
        raise GeometryError("wrong line")
    a, b, c = (float(g) for g in match.groups())
    return Line(a, b, c)


def _scan_pair(src: object, kind: str) -> tuple[Point, Point]:
    points = _parse_points(_to_text(src))
    if len(points) != 2:
        raise GeometryError(f"wrong {kind}")
    return points[0], points[1]


def scan_lseg(src: object) -> Lseg:
    """Read a line segment; None gives a degenerate segment at the origin."""
    if src is None:
        return Lseg()
    return Lseg(*_scan_pair(src, "lseg"))


def scan_box(src: object) -> Box:
    """Read a box; None gives a degenerate box at the origin."""
    if src is None:
        return Box()
    return Box(*_scan_pair(src, "box"))


def scan_path(src: object) -> Path:
    """Read a path of at least two points; None gives an empty path."""
    if src is None:
        return Path()
    text = _to_text(src)
    points = _parse_points(text)
    if len(points) < 2:
        raise GeometryError("wrong path")
    return Path(points, text.startswith("(("))


def scan_polygon(src: object) -> Polygon:
    """Read a polygon of at least three points; None gives an empty polygon."""
    if src is None:
        return Polygon()
    points = _parse_points(_to_text(src))
    if len(points) <= 2:
        raise GeometryError("wrong polygon")
    return Polygon(points)


def scan_circle(src: object) -> Circle:
    """Read a circle; None gives a zero circle at the origin."""
    if src is None:
        return Circle()
    text = _to_text(src)
    points = _parse_points(text)
    parts = text.split("),")
    if len(points) != 1 or len(parts) != 2:
        raise GeometryError("wrong circle")
    return Circle(points[0], _parse_float(parts[1].strip(">")))


def random_point(next_int: NextInt) -> Point:
    x = _random_number(next_int)
    y = _random_number(next_int)
    return Point(x, y)


def random_points(next_int: NextInt, n: int) -> tuple[Point, ...]:
    return tuple(random_point(next_int) for _ in range(max(n, 0)))


def random_line(next_int: NextInt) -> Line:
    a = _random_number(next_int)
    b = _random_number(next_int)
    return Line(a, b, 0.0)


def random_lseg(next_int: NextInt) -> Lseg:
    a = random_point(next_int)
    return Lseg(a, random_point(next_int))


def random_box(next_int: NextInt) -> Box:
    a = random_point(next_int)
    return Box(a, random_point(next_int))


def random_path(next_int: NextInt) -> Path:
    points = random_points(next_int, 3)
    return Path(points, _random_number(next_int) < 40)


def random_polygon(next_int: NextInt) -> Polygon:
    return Polygon(random_points(next_int, 3))


def random_circle(next_int: NextInt) -> Circle:
    center = random_point(next_int)
    return Circle(center, _random_number(next_int))