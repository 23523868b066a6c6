from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, NamedTuple, Tuple

from ..dsl.dsl_parser import PositionDirective
from ..errors import DuplicateNode, InvalidDirection, UnknownAnchor

logger = logging.getLogger(__name__)

ORIGIN = "CENTER"
GRID_UNIT = 20.0  # scene units per grid unit


class Point(NamedTuple):
    x: float
    y: float


# unit vectors, screen coordinates (y grows downward)
DIRECTIONS: Dict[str, Tuple[float, float]] = {
    "l": (-1.0, 0.0),
    "r": (1.0, 0.0),
    "u": (0.0, -1.0),
    "d": (0.0, 1.0),
}


def offset_for(directive: PositionDirective) -> Point:
    """Scene-unit offset of `new_node` from `known_node`."""
    d = directive.distance * GRID_UNIT
    if directive.is_angular:
        theta = math.radians(directive.angle)
        return Point(d * math.cos(theta), d * math.sin(theta))
    unit = DIRECTIONS.get(directive.direction)
    if unit is None:
        raise InvalidDirection(
            f"Invalid position argument {directive.direction!r}: {directive.source}",
            directive=directive.source,
            lineno=directive.lineno,
        )
    return Point(d * unit[0], d * unit[1])


def resolve(directives: Iterable[PositionDirective], origin: Point = Point(0.0, 0.0)) -> Dict[str, Point]:
    """
    Place nodes in input order. Each directive may only reference anchors placed
    before it; the origin anchor is seeded first.
    """
    positions: Dict[str, Point] = {ORIGIN: Point(*origin)}
    for directive in directives:
        known = positions.get(directive.known_node)
        if known is None:
            raise UnknownAnchor(
                f"Node {directive.known_node} is not known at this line: {directive.source}",
                directive=directive.source,
                lineno=directive.lineno,
            )
        off = offset_for(directive)
        if directive.new_node in positions:
            raise DuplicateNode(
                f"Node {directive.new_node} is already placed: {directive.source}",
                directive=directive.source,
                lineno=directive.lineno,
            )
        placed = Point(known.x + off.x, known.y + off.y)
        positions[directive.new_node] = placed
        logger.debug("placed %s at (%.3f, %.3f) from %s", directive.new_node, placed.x, placed.y, directive.known_node)
    return positions


def to_grid(point: Point, origin: Point) -> Point:
    """Express a scene point in grid units relative to the origin anchor."""
    return Point((point.x - origin.x) / GRID_UNIT, (point.y - origin.y) / GRID_UNIT)
