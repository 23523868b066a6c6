"""
DXF exporter (AC1018) for resolved diagrams.

- One DXF per call; the origin anchor sits at (0, 0).
- DXF's y axis points up, so scene y is negated.
- Layers: NODE / CONNECTION / ARROW / TEXT / ORIGIN.
  * rect/diamond nodes as closed LWPOLYLINE, circles as CIRCLE.
  * dotted connections use the DASHED linetype.

Requires: ezdxf
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import ezdxf
from ezdxf.enums import TextEntityAlignment

from ..config import RenderOptions
from ..dsl.dsl_parser import LineStyle, parse
from ..geometry.contour import ShapeKind, arrowhead, bearing, outline
from ..geometry.positions import ORIGIN, Point, resolve
from ..render.connections import connection_segment, shape_assignment

logger = logging.getLogger(__name__)

UNITS = {"mm": 4, "in": 1, "unitless": 0}

DEFAULT_LAYERS = {
    "NODE": {"color": 5},
    "CONNECTION": {"color": 7},
    "ARROW": {"color": 7},
    "TEXT": {"color": 8},
    "ORIGIN": {"color": 1},
}


def _flip(p: Point) -> Tuple[float, float]:
    return (p.x, -p.y)


def export_dxf(
    source: str,
    out_path: str,
    options: Optional[RenderOptions] = None,
    units: str = "unitless",
    layer_map: Optional[Dict[str, str]] = None,
) -> str:
    options = options or RenderOptions()
    if units.lower() not in UNITS:
        raise ValueError(f"Unsupported units: {units} (expected one of {', '.join(UNITS)})")

    diagram = parse(source)
    positions = resolve(diagram.positions)
    shapes = shape_assignment(diagram.shapes)

    doc = ezdxf.new(dxfversion="AC1018", setup=True)
    doc.header["$INSUNITS"] = UNITS[units.lower()]
    msp = doc.modelspace()

    layers = {name: (layer_map or {}).get(name, name) for name in DEFAULT_LAYERS}
    for key, opts in DEFAULT_LAYERS.items():
        if layers[key] not in doc.layers:
            doc.layers.add(layers[key], color=opts["color"])

    for conn in diagram.connections:
        a, b = positions.get(conn.from_node), positions.get(conn.to_node)
        if a is None or b is None:
            continue
        start, end = connection_segment(
            a, b, shapes.get(conn.from_node, ShapeKind.RECT), shapes.get(conn.to_node, ShapeKind.RECT), options.node_size
        )
        attribs = {"layer": layers["CONNECTION"]}
        if conn.line_style == LineStyle.DOTTED.value:
            attribs["linetype"] = "DASHED"
        msp.add_line(_flip(start), _flip(end), dxfattribs=attribs)

        heads: List[Tuple[Point, Point]] = []
        if conn.line_style in (LineStyle.ARROW.value, LineStyle.DOUBLEARROW.value):
            heads.append((start, end))
        if conn.line_style == LineStyle.DOUBLEARROW.value:
            heads.append((end, start))
        for tail, tip in heads:
            tri = [_flip(p) for p in arrowhead(tip, bearing(tail, tip), options.arrow_length)]
            msp.add_lwpolyline(tri, format="xy", close=True, dxfattribs={"layer": layers["ARROW"]})

    for name, pos in positions.items():
        if name == ORIGIN and ORIGIN not in shapes:
            continue
        kind = shapes.get(name, ShapeKind.RECT)
        vertices = outline(kind, pos, options.node_size)
        if vertices is None:
            msp.add_circle(_flip(pos), radius=options.node_size / 2, dxfattribs={"layer": layers["NODE"]})
        else:
            msp.add_lwpolyline([_flip(v) for v in vertices], format="xy", close=True, dxfattribs={"layer": layers["NODE"]})
        msp.add_text(name, height=options.node_size / 3, dxfattribs={"layer": layers["TEXT"]}).set_placement(
            _flip(pos), align=TextEntityAlignment.MIDDLE_CENTER
        )

    msp.add_point(_flip(positions[ORIGIN]), dxfattribs={"layer": layers["ORIGIN"]})

    doc.saveas(out_path)
    logger.info("wrote %d nodes to %s", len(positions) - 1, out_path)
    return out_path
