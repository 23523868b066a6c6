import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import typer

# Engine imports
from ..config import RenderOptions, load_options
from ..dsl.dsl_parser import ParsedDiagram, parse
from ..errors import GendiaError, OptionsError
from ..geometry.positions import ORIGIN, Point, resolve, to_grid
from ..packaging.dxf_exporter import export_dxf
from ..render.scene import ViewTransform, render
from ..render.svg_surface import SvgSurface

app = typer.Typer(help="GenDia diagram CLI")


# ---------------------------
# Helpers
# ---------------------------

def _diagram_to_json(diagram: ParsedDiagram) -> Dict[str, Any]:
    """Convert parsed directives to a plain JSON-able dict."""
    return {
        "positions": [
            {
                "direction": p.direction,
                "angle": p.angle,
                "distance": p.distance,
                "known": p.known_node,
                "new": p.new_node,
                "line": p.lineno,
            }
            for p in diagram.positions
        ],
        "connections": [
            {"from": c.from_node, "to": c.to_node, "style": c.line_style, "line": c.lineno}
            for c in diagram.connections
        ],
        "shapes": [{"node": s.node_name, "shape": s.shape_kind, "line": s.lineno} for s in diagram.shapes],
    }


def _positions_to_json(positions: Dict[str, Point]) -> Dict[str, Any]:
    origin = positions[ORIGIN]
    out = {}
    for name, p in positions.items():
        g = to_grid(p, origin)
        out[name] = {"x": round(p.x, 3), "y": round(p.y, 3), "grid": [round(g.x, 3), round(g.y, 3)]}
    return out


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _options(path: Optional[Path], width: Optional[int], height: Optional[int]) -> RenderOptions:
    try:
        opts = load_options(path)
        overrides = {k: v for k, v in (("width", width), ("height", height)) if v is not None}
        if overrides:
            opts = _with(opts, overrides)
    except OptionsError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    return opts


def _with(opts: RenderOptions, overrides: Dict[str, Any]) -> RenderOptions:
    return RenderOptions.from_mapping({**asdict(opts), **overrides})


def _fail(exc: GendiaError) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------
# Commands
# ---------------------------

@app.command("parse")
def parse_cmd(
    src: Path = typer.Argument(..., exists=True, dir_okay=False, help="GenDia source file"),
    out: Optional[Path] = typer.Option(None, help="Write directives JSON here instead of stdout"),
):
    """Parse a diagram and dump its position/connection/shape directives as JSON."""
    try:
        diagram = parse(_read(src))
    except GendiaError as exc:
        _fail(exc)
    payload = json.dumps(_diagram_to_json(diagram), indent=2)
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload)
        typer.echo(f"Wrote directives to {out}")
    else:
        typer.echo(payload)


@app.command()
def layout(
    src: Path = typer.Argument(..., exists=True, dir_okay=False, help="GenDia source file"),
    out: Optional[Path] = typer.Option(None, help="Write positions JSON here instead of stdout"),
    width: int = typer.Option(800, help="Surface width; the origin sits at its center"),
    height: int = typer.Option(600, help="Surface height"),
):
    """
    Resolve node positions.
    Each node gets scene coordinates and grid coordinates relative to CENTER.
    """
    try:
        diagram = parse(_read(src))
        positions = resolve(diagram.positions, origin=Point(width / 2, height / 2))
    except GendiaError as exc:
        _fail(exc)
    payload = json.dumps(_positions_to_json(positions), indent=2)
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload)
        typer.echo(f"Wrote positions to {out}")
    else:
        typer.echo(payload)


@app.command("render")
def render_cmd(
    src: Path = typer.Argument(..., exists=True, dir_okay=False, help="GenDia source file"),
    out: Path = typer.Option(..., help="Output SVG path"),
    options: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Render options YAML"),
    width: Optional[int] = typer.Option(None, help="Surface width (overrides options)"),
    height: Optional[int] = typer.Option(None, help="Surface height (overrides options)"),
    zoom: float = typer.Option(1.0, help="View zoom factor"),
    pan_x: float = typer.Option(0.0, help="Horizontal pan in surface units"),
    pan_y: float = typer.Option(0.0, help="Vertical pan in surface units"),
):
    """Render a diagram to SVG."""
    opts = _options(options, width, height)
    try:
        view = ViewTransform(zoom, pan_x, pan_y)
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)

    surface = SvgSurface(str(out), size=(opts.width, opts.height), background=opts.background)
    try:
        summary = render(_read(src), surface, view, options=opts)
    except GendiaError as exc:
        _fail(exc)
    out.parent.mkdir(parents=True, exist_ok=True)
    surface.write()
    typer.echo(f"{summary.status_text}")
    typer.echo(f"Wrote {out}")


@app.command("export-dxf")
def export_dxf_cmd(
    src: Path = typer.Argument(..., exists=True, dir_okay=False, help="GenDia source file"),
    out: Path = typer.Option(..., help="Output DXF path"),
    options: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Render options YAML"),
    units: str = typer.Option("unitless", help="Units for $INSUNITS (mm|in|unitless)"),
):
    """
    Export a diagram to DXF (AC1018) with layers:
    NODE / CONNECTION / ARROW / TEXT / ORIGIN
    """
    opts = _options(options, None, None)
    out.parent.mkdir(parents=True, exist_ok=True)
    try:
        path = export_dxf(_read(src), str(out), options=opts, units=units)
    except GendiaError as exc:
        _fail(exc)
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Wrote DXF: {path}")


if __name__ == "__main__":
    app()
