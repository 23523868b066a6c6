"""Outline geometry for node shapes: where a ray from the center leaves the shape."""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .positions import Point

NODE_SIZE = 30.0
ARROW_LENGTH = 15.0
ARROW_HALF_ANGLE = math.pi / 6


class ShapeKind(str, enum.Enum):
    RECT = "rect"
    CIRC = "circ"
    DIAMOND = "diamond"

    @classmethod
    def parse(cls, name: Optional[str]) -> "ShapeKind":
        """Unrecognized names are drawn as rectangles."""
        try:
            return cls(name)
        except ValueError:
            return cls.RECT


@dataclass(frozen=True)
class Shape:
    kind: ShapeKind = ShapeKind.RECT
    size: float = NODE_SIZE

    def contour_point(self, center: Point, angle: float) -> Point:
        return contour_point(center, self.kind, self.size, angle)

    def outline(self, center: Point) -> Optional[List[Point]]:
        return outline(self.kind, center, self.size)


def _along(center: Point, t: float, dx: float, dy: float) -> Point:
    return Point(center.x + t * dx, center.y + t * dy)


def _circle(center: Point, size: float, angle: float) -> Point:
    r = size / 2
    return Point(center.x + r * math.cos(angle), center.y + r * math.sin(angle))


def _rect(center: Point, size: float, angle: float) -> Point:
    hw, hh = size, size / 2
    dx, dy = math.cos(angle), math.sin(angle)
    t = math.inf
    if dx > 0:
        t = min(t, hw / dx)
    if dx < 0:
        t = min(t, -hw / dx)
    if dy > 0:
        t = min(t, hh / dy)
    if dy < 0:
        t = min(t, -hh / dy)
    return _along(center, t, dx, dy)


def _diamond(center: Point, size: float, angle: float) -> Point:
    # edges ±dx ± dy = size/2; only edges the ray faces are candidates
    half = size / 2
    dx, dy = math.cos(angle), math.sin(angle)
    t = math.inf
    for k in (dx + dy, dx - dy, -dx - dy, -dx + dy):
        if k > 0:
            t = min(t, half / k)
    return _along(center, t, dx, dy)


def contour_point(center: Point, kind: ShapeKind, size: float, angle: float) -> Point:
    kind = ShapeKind.parse(kind)
    if kind is ShapeKind.CIRC:
        return _circle(center, size, angle)
    if kind is ShapeKind.DIAMOND:
        return _diamond(center, size, angle)
    return _rect(center, size, angle)


def outline(kind: ShapeKind, center: Point, size: float) -> Optional[List[Point]]:
    """Polygon vertices of the shape, clockwise from the top; None for a circle."""
    kind = ShapeKind.parse(kind)
    x, y = center
    if kind is ShapeKind.CIRC:
        return None
    if kind is ShapeKind.DIAMOND:
        return [Point(x, y - size / 2), Point(x + size, y), Point(x, y + size / 2), Point(x - size, y)]
    return [
        Point(x - size, y - size / 2),
        Point(x + size, y - size / 2),
        Point(x + size, y + size / 2),
        Point(x - size, y + size / 2),
    ]


def bearing(a: Point, b: Point) -> float:
    return math.atan2(b.y - a.y, b.x - a.x)


def arrowhead(
    tip: Point, angle: float, length: float = ARROW_LENGTH, half_angle: float = ARROW_HALF_ANGLE
) -> Tuple[Point, Point, Point]:
    """Triangle with its apex at `tip`, pointing along `angle`."""
    left = Point(tip.x - length * math.cos(angle - half_angle), tip.y - length * math.sin(angle - half_angle))
    right = Point(tip.x - length * math.cos(angle + half_angle), tip.y - length * math.sin(angle + half_angle))
    return tip, left, right
