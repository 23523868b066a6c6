from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..config import RenderOptions
from ..dsl.dsl_parser import ConnectionDirective, LineStyle, ShapeDirective
from ..geometry.contour import NODE_SIZE, ShapeKind, arrowhead, bearing, contour_point
from ..geometry.positions import Point
from .surface import Surface

logger = logging.getLogger(__name__)


def shape_assignment(shapes: Iterable[ShapeDirective]) -> Dict[str, ShapeKind]:
    """Node name -> shape kind; a later assignment for the same node wins."""
    return {s.node_name: ShapeKind.parse(s.shape_kind) for s in shapes}


def connection_segment(
    from_pos: Point,
    to_pos: Point,
    from_kind: ShapeKind = ShapeKind.RECT,
    to_kind: ShapeKind = ShapeKind.RECT,
    size: float = NODE_SIZE,
) -> Tuple[Point, Point]:
    """The two contour points facing each other."""
    start = contour_point(from_pos, from_kind, size, bearing(from_pos, to_pos))
    end = contour_point(to_pos, to_kind, size, bearing(to_pos, from_pos))
    return start, end


def draw_arrowhead(surface: Surface, tail: Point, tip: Point, length: float) -> None:
    apex, left, right = arrowhead(tip, bearing(tail, tip), length)
    surface.begin_path()
    surface.move_to(apex.x, apex.y)
    surface.line_to(left.x, left.y)
    surface.line_to(right.x, right.y)
    surface.close_path()
    surface.fill()


def draw_connection(
    surface: Surface,
    start: Point,
    end: Point,
    line_style: str,
    options: RenderOptions,
) -> None:
    surface.save()
    surface.set_style(fill=options.line_color, stroke=options.line_color, line_width=options.line_width)
    surface.set_line_dash(options.dash_pattern if line_style == LineStyle.DOTTED.value else ())

    surface.begin_path()
    surface.move_to(start.x, start.y)
    surface.line_to(end.x, end.y)
    surface.stroke()

    if line_style in (LineStyle.ARROW.value, LineStyle.DOUBLEARROW.value):
        draw_arrowhead(surface, start, end, options.arrow_length)
    if line_style == LineStyle.DOUBLEARROW.value:
        draw_arrowhead(surface, end, start, options.arrow_length)

    surface.restore()


def draw_connections(
    surface: Surface,
    connections: Iterable[ConnectionDirective],
    positions: Mapping[str, Point],
    shapes: Mapping[str, ShapeKind],
    options: Optional[RenderOptions] = None,
) -> int:
    """Draw every connection whose two ends are placed. Returns how many were drawn."""
    options = options or RenderOptions()
    drawn = 0
    for conn in connections:
        from_pos = positions.get(conn.from_node)
        to_pos = positions.get(conn.to_node)
        if from_pos is None or to_pos is None:
            logger.debug("skipping connection with unplaced endpoint: %s", conn.source)
            continue
        start, end = connection_segment(
            from_pos,
            to_pos,
            shapes.get(conn.from_node, ShapeKind.RECT),
            shapes.get(conn.to_node, ShapeKind.RECT),
            options.node_size,
        )
        draw_connection(surface, start, end, conn.line_style, options)
        drawn += 1
    return drawn
