"""Geometric types that may be SQL NULL."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, TypeVar

from .geometry import (
    Box,
    Circle,
    Line,
    Lseg,
    Path,
    Point,
    Polygon,
    random_box,
    random_circle,
    random_line,
    random_lseg,
    random_path,
    random_point,
    random_polygon,
    scan_box,
    scan_circle,
    scan_line,
    scan_lseg,
    scan_path,
    scan_point,
    scan_polygon,
)

NextInt = Callable[[], int]
_T = TypeVar("_T")


@dataclass(frozen=True)
class NullPoint:
    point: Point = field(default_factory=Point)
    valid: bool = False

    def value(self) -> str | None:
        return self.point.value() if self.valid else None


@dataclass(frozen=True)
class NullLine:
    line: Line = field(default_factory=Line)
    valid: bool = False

    def value(self) -> str | None:
        return self.line.value() if self.valid else None


@dataclass(frozen=True)
class NullLseg:
    lseg: Lseg = field(default_factory=Lseg)
    valid: bool = False

    def value(self) -> str | None:
        return self.lseg.value() if self.valid else None


@dataclass(frozen=True)
class NullBox:
    box: Box = field(default_factory=Box)
    valid: bool = False

    def value(self) -> str | None:
        return self.box.value() if self.valid else None


@dataclass(frozen=True)
class NullPath:
    path: Path = field(default_factory=Path)
    valid: bool = False

    def value(self) -> str | None:
        return self.path.value() if self.valid else None


@dataclass(frozen=True)
class NullPolygon:
    polygon: Polygon = field(default_factory=Polygon)
    valid: bool = False

    def value(self) -> str | None:
        return self.polygon.value() if self.valid else None


@dataclass(frozen=True)
class NullCircle:
    circle: Circle = field(default_factory=Circle)
    valid: bool = False

    def value(self) -> str | None:
        return self.circle.value() if self.valid else None


def scan_null_point(src: object) -> NullPoint:
    if src is None:
        return NullPoint(Point(), False)
    return NullPoint(scan_point(src), True)


def scan_null_line(src: object) -> NullLine:
    if src is None:
        return NullLine(Line(), False)
    return NullLine(scan_line(src), True)


def scan_null_lseg(src: object) -> NullLseg:
    if src is None:
        return NullLseg(Lseg(), False)
    return NullLseg(scan_lseg(src), True)


def scan_null_box(src: object) -> NullBox:
    if src is None:
        return NullBox(Box(), False)
    return NullBox(scan_box(src), True)


def scan_null_path(src: object) -> NullPath:
    if src is None:
        return NullPath(Path((Point(), Point()), False), False)
    return NullPath(scan_path(src), True)


def scan_null_polygon(src: object) -> NullPolygon:
    if src is None:
        return NullPolygon(Polygon((Point(), Point(), Point(), Point())), False)
    return NullPolygon(scan_polygon(src), True)


def scan_null_circle(src: object) -> NullCircle:
    if src is None:
        return NullCircle(Circle(), False)
    return NullCircle(scan_circle(src), True)


def random_null_point(next_int: NextInt, should_be_null: bool) -> NullPoint:
    if should_be_null:
        return NullPoint()
    return NullPoint(random_point(next_int), True)


def random_null_line(next_int: NextInt, should_be_null: bool) -> NullLine:
    if should_be_null:
        return NullLine()
    return NullLine(random_line(next_int), True)


def random_null_lseg(next_int: NextInt, should_be_null: bool) -> NullLseg:
    if should_be_null:
        return NullLseg()
    return NullLseg(random_lseg(next_int), True)


def random_null_box(next_int: NextInt, should_be_null: bool) -> NullBox:
    if should_be_null:
        return NullBox()
    return NullBox(random_box(next_int), True)


def random_null_path(next_int: NextInt, should_be_null: bool) -> NullPath:
    if should_be_null:
        return NullPath()
    return NullPath(random_path(next_int), True)


def random_null_polygon(next_int: NextInt, should_be_null: bool) -> NullPolygon:
    if should_be_null:
        return NullPolygon()
    return NullPolygon(random_polygon(next_int), True)


def random_null_circle(next_int: NextInt, should_be_null: bool) -> NullCircle:
    if should_be_null:
        return NullCircle()
    return NullCircle(random_circle(next_int), True)