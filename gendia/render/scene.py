"""
Full render pass: parse, place, then draw grid, connections and nodes.

The pass owns nothing between calls; positions are rebuilt from the text on
every call and the surface belongs to the caller.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Tuple

from ..config import RenderOptions
from ..dsl.dsl_parser import parse
from ..errors import GendiaError, MissingCenter
from ..geometry.contour import ShapeKind, outline
from ..geometry.positions import GRID_UNIT, ORIGIN, Point, resolve
from .connections import draw_connections, shape_assignment
from .surface import Surface

logger = logging.getLogger(__name__)

MIN_ZOOM = 0.1
MAX_ZOOM = 5.0
MAJOR_EVERY = 5  # grid units between major lines
MIN_GRID_SPACING = 2.0  # surface units; denser tiers are skipped
ORIGIN_DOT_RADIUS = 5.0

StatusCallback = Callable[[str], None]


@dataclass(frozen=True)
class ViewTransform:
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def __post_init__(self):
        if not (self.zoom > 0 and math.isfinite(self.zoom)):
            raise ValueError(f"zoom must be a positive number, got {self.zoom!r}")

    def as_matrix(self) -> Tuple[float, float, float, float, float, float]:
        return (self.zoom, 0.0, 0.0, self.zoom, self.pan_x, self.pan_y)

    def to_surface(self, x: float, y: float) -> Point:
        return Point(x * self.zoom + self.pan_x, y * self.zoom + self.pan_y)

    def to_scene(self, x: float, y: float) -> Point:
        return Point((x - self.pan_x) / self.zoom, (y - self.pan_y) / self.zoom)

    def zoom_at(self, x: float, y: float, factor: float) -> "ViewTransform":
        """Scale by `factor` keeping surface point (x, y) fixed; zoom stays within [0.1, 5]."""
        anchor = self.to_scene(x, y)
        zoom = max(MIN_ZOOM, min(MAX_ZOOM, self.zoom * factor))
        return ViewTransform(zoom, x - anchor.x * zoom, y - anchor.y * zoom)

    def pan_by(self, dx: float, dy: float) -> "ViewTransform":
        return ViewTransform(self.zoom, self.pan_x + dx, self.pan_y + dy)

    def reset(self) -> "ViewTransform":
        return ViewTransform()


def pointer_grid_position(view: ViewTransform, origin: Point, x: float, y: float) -> Tuple[int, int]:
    """Grid cell under a surface point, relative to the origin anchor."""
    scene = view.to_scene(x, y)
    return round((scene.x - origin.x) / GRID_UNIT), round((scene.y - origin.y) / GRID_UNIT)


@dataclass(frozen=True)
class RenderSummary:
    node_count: int
    connection_count: int
    drawn_connection_count: int
    positions: Dict[str, Point] = field(default_factory=dict)

    @property
    def status_text(self) -> str:
        return f"Rendered {self.node_count} nodes, {self.connection_count} connections"


def _grid_tier(surface: Surface, start_x: float, start_y: float, spacing: float, width: float, height: float) -> None:
    surface.begin_path()
    x = start_x
    while x <= width:
        surface.move_to(x, 0)
        surface.line_to(x, height)
        x += spacing
    y = start_y
    while y <= height:
        surface.move_to(0, y)
        surface.line_to(width, y)
        y += spacing
    surface.stroke()


def draw_grid(
    surface: Surface,
    positions: Mapping[str, Point],
    view: ViewTransform,
    width: float,
    height: float,
    options: RenderOptions,
) -> None:
    """Minor and major grid lines in surface space, passing through the origin anchor."""
    if ORIGIN not in positions:
        raise MissingCenter(f"Cannot draw grid: {ORIGIN} is not placed")
    ox, oy = view.to_surface(*positions[ORIGIN])
    minor = GRID_UNIT * view.zoom
    tiers = (
        (minor, options.grid_minor, 0.5, 0.3),
        (minor * MAJOR_EVERY, options.grid_major, 1.0, 0.5),
    )
    surface.save()
    surface.set_transform(1, 0, 0, 1, 0, 0)
    surface.set_line_dash(())
    for spacing, color, line_width, alpha in tiers:
        if spacing < MIN_GRID_SPACING:
            continue
        surface.set_style(stroke=color, line_width=line_width, alpha=alpha)
        _grid_tier(surface, ox % spacing, oy % spacing, spacing, width, height)
    surface.restore()


def draw_node(surface: Surface, center: Point, kind: ShapeKind, label: str, options: RenderOptions) -> None:
    surface.save()
    surface.set_style(fill=options.node_fill, stroke=options.node_stroke, line_width=options.node_line_width, alpha=1.0)
    surface.set_line_dash(())
    surface.begin_path()
    vertices = outline(kind, center, options.node_size)
    if vertices is None:
        surface.arc(center.x, center.y, options.node_size / 2, 0, 2 * math.pi)
    else:
        surface.move_to(vertices[0].x, vertices[0].y)
        for v in vertices[1:]:
            surface.line_to(v.x, v.y)
    surface.close_path()
    surface.fill()
    surface.stroke()

    surface.set_style(fill=options.label_fill, font=options.label_font)
    surface.fill_text(label, center.x, center.y, "center", "middle")
    surface.restore()


def draw_origin_indicator(surface: Surface, positions: Mapping[str, Point], options: RenderOptions) -> None:
    if ORIGIN not in positions:
        raise MissingCenter(f"Cannot draw origin indicator: {ORIGIN} is not placed")
    center = positions[ORIGIN]
    surface.save()
    surface.set_style(fill=options.origin_color, alpha=0.9, font=options.origin_font)
    surface.begin_path()
    surface.arc(center.x, center.y, ORIGIN_DOT_RADIUS, 0, 2 * math.pi)
    surface.fill()
    surface.fill_text("(0,0)", center.x + 8, center.y - 8, "left", "bottom")
    surface.restore()


class SceneRenderer:
    def __init__(
        self,
        surface: Surface,
        width: Optional[float] = None,
        height: Optional[float] = None,
        options: Optional[RenderOptions] = None,
        on_status: Optional[StatusCallback] = None,
        on_error: Optional[StatusCallback] = None,
    ):
        self.surface = surface
        self.options = options or RenderOptions()
        self.width = width if width is not None else self.options.width
        self.height = height if height is not None else self.options.height
        self.on_status = on_status
        self.on_error = on_error

    def _status(self, message: str) -> None:
        if self.on_status:
            self.on_status(message)

    def clear(self) -> None:
        self.surface.set_transform(1, 0, 0, 1, 0, 0)
        self.surface.clear_region(0, 0, self.width, self.height)

    def render(self, source: str, view: ViewTransform = ViewTransform()) -> RenderSummary:
        surface, options = self.surface, self.options
        self.clear()

        try:
            self._status("Parsing...")
            diagram = parse(source)
            self._status("Calculating positions...")
            positions = resolve(diagram.positions, origin=Point(self.width / 2, self.height / 2))
        except GendiaError as exc:
            logger.info("render aborted: %s", exc)
            if self.on_error:
                self.on_error(str(exc))
            raise

        if options.show_grid:
            draw_grid(surface, positions, view, self.width, self.height, options)
        surface.set_transform(*view.as_matrix())

        self._status("Drawing connections...")
        shapes = shape_assignment(diagram.shapes)
        drawn = draw_connections(surface, diagram.connections, positions, shapes, options)

        self._status("Drawing nodes...")
        for name, pos in positions.items():
            if name == ORIGIN and ORIGIN not in shapes:
                continue
            draw_node(surface, pos, shapes.get(name, ShapeKind.RECT), name, options)
        draw_origin_indicator(surface, positions, options)

        summary = RenderSummary(
            node_count=sum(1 for name in positions if name != ORIGIN),
            connection_count=len(diagram.connections),
            drawn_connection_count=drawn,
            positions=positions,
        )
        logger.info("%s (%d drawn)", summary.status_text, drawn)
        self._status(summary.status_text)
        return summary


def render(
    source: str,
    surface: Surface,
    view: ViewTransform = ViewTransform(),
    *,
    width: Optional[float] = None,
    height: Optional[float] = None,
    options: Optional[RenderOptions] = None,
    on_status: Optional[StatusCallback] = None,
    on_error: Optional[StatusCallback] = None,
) -> RenderSummary:
    return SceneRenderer(surface, width, height, options, on_status, on_error).render(source, view)
