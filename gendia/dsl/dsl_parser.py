"""
GenDia text → directive lists.

POSITION_MAP
r{5}CENTER|A          # direction l/r/u/d, distance in grid units, known|new
45deg{3}A|B           # angle in degrees instead of a direction
CONNECTION_MAP
CENTER:A|arrow        # from:to|plain/dotted/arrow/doublearrow
SHAPE_MAP
A:circ                # rect/circ/diamond

(The '#' notes above are documentation only; the format has no comments.)
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import MalformedDirective


class Section(enum.Enum):
    NONE = "none"
    POSITION = "position"
    CONNECTION = "connection"
    SHAPE = "shape"


MARKERS: Dict[str, Section] = {
    "POSITION_MAP": Section.POSITION,
    "CONNECTION_MAP": Section.CONNECTION,
    "SHAPE_MAP": Section.SHAPE,
}

ANGLE_SUFFIX = "deg"


class LineStyle(str, enum.Enum):
    PLAIN = "plain"
    DOTTED = "dotted"
    ARROW = "arrow"
    DOUBLEARROW = "doublearrow"


@dataclass(frozen=True)
class PositionDirective:
    direction: Optional[str]
    angle: Optional[float]
    distance: float
    known_node: str
    new_node: str
    source: str = ""
    lineno: int = 0

    @property
    def is_angular(self) -> bool:
        return self.angle is not None


@dataclass(frozen=True)
class ConnectionDirective:
    from_node: str
    to_node: str
    line_style: str
    source: str = ""
    lineno: int = 0


@dataclass(frozen=True)
class ShapeDirective:
    node_name: str
    shape_kind: str
    source: str = ""
    lineno: int = 0


@dataclass(frozen=True)
class ParsedDiagram:
    positions: Tuple[PositionDirective, ...] = ()
    connections: Tuple[ConnectionDirective, ...] = ()
    shapes: Tuple[ShapeDirective, ...] = ()

    def __iter__(self) -> Iterator[tuple]:
        # allows `positions, connections, shapes = parse(text)`
        return iter((self.positions, self.connections, self.shapes))


Line = Tuple[int, str]


def split_sections(text: str) -> Dict[Section, List[Line]]:
    """Group trimmed, non-blank lines by the section marker that precedes them."""
    sections: Dict[Section, List[Line]] = {
        Section.POSITION: [],
        Section.CONNECTION: [],
        Section.SHAPE: [],
    }
    current = Section.NONE
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line in MARKERS:
            current = MARKERS[line]
            continue
        if current is Section.NONE:
            continue
        sections[current].append((lineno, line))
    return sections


def _malformed(kind: str, line: str, lineno: int, reason: str) -> MalformedDirective:
    return MalformedDirective(
        f"Invalid {kind} instruction (line {lineno}, {reason}): {line}",
        directive=line,
        lineno=lineno,
    )


def _number(token: str, kind: str, line: str, lineno: int, what: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise _malformed(kind, line, lineno, f"{what} is not a number") from None
    if not math.isfinite(value):
        raise _malformed(kind, line, lineno, f"{what} is not finite")
    return value


def parse_position(line: str, lineno: int = 0) -> PositionDirective:
    # <mode>{<distance>}<known>|<new>
    parts = line.split("{", 1)
    if len(parts) != 2:
        raise _malformed("position", line, lineno, "missing '{'")
    mode, rest = parts[0].strip(), parts[1]
    parts = rest.split("}", 1)
    if len(parts) != 2:
        raise _malformed("position", line, lineno, "missing '}'")
    distance_token, nodes = parts
    parts = nodes.split("|", 1)
    if len(parts) != 2:
        raise _malformed("position", line, lineno, "missing '|'")
    known, new = parts[0].strip(), parts[1].strip()
    if not known or not new:
        raise _malformed("position", line, lineno, "empty node name")

    distance = _number(distance_token.strip(), "position", line, lineno, "distance")
    if distance < 0:
        raise _malformed("position", line, lineno, "distance is negative")

    direction: Optional[str] = None
    angle: Optional[float] = None
    if mode.endswith(ANGLE_SUFFIX):
        angle = _number(mode[: -len(ANGLE_SUFFIX)].strip(), "position", line, lineno, "angle")
    else:
        direction = mode

    return PositionDirective(
        direction=direction,
        angle=angle,
        distance=distance,
        known_node=known,
        new_node=new,
        source=line,
        lineno=lineno,
    )


def parse_connection(line: str, lineno: int = 0) -> ConnectionDirective:
    # <from>:<to>|<style>
    parts = line.split("|", 1)
    if len(parts) != 2:
        raise _malformed("connection", line, lineno, "missing '|'")
    nodes, style = parts
    ends = nodes.split(":", 1)
    if len(ends) != 2:
        raise _malformed("connection", line, lineno, "missing ':'")
    from_node, to_node = ends[0].strip(), ends[1].strip()
    if not from_node or not to_node:
        raise _malformed("connection", line, lineno, "empty node name")
    return ConnectionDirective(from_node, to_node, style.strip(), source=line, lineno=lineno)


def parse_shape(line: str, lineno: int = 0) -> ShapeDirective:
    # <node>:<kind>
    parts = line.split(":", 1)
    if len(parts) != 2:
        raise _malformed("shape", line, lineno, "missing ':'")
    node, kind = parts[0].strip(), parts[1].strip()
    if not node:
        raise _malformed("shape", line, lineno, "empty node name")
    return ShapeDirective(node, kind, source=line, lineno=lineno)


def parse(text: str) -> ParsedDiagram:
    sections = split_sections(text)
    return ParsedDiagram(
        positions=tuple(parse_position(line, n) for n, line in sections[Section.POSITION]),
        connections=tuple(parse_connection(line, n) for n, line in sections[Section.CONNECTION]),
        shapes=tuple(parse_shape(line, n) for n, line in sections[Section.SHAPE]),
    )
