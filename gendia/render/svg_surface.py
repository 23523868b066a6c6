from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

import svgwrite

TEXT_ANCHORS = {"start": "start", "left": "start", "center": "middle", "right": "end", "end": "end"}
BASELINES = {
    "alphabetic": "alphabetic",
    "middle": "middle",
    "top": "hanging",
    "hanging": "hanging",
    "bottom": "text-after-edge",
}


def _fmt(v: float) -> str:
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


def _split_font(font: str):
    size, _, family = font.strip().partition(" ")
    return size, (family.strip() or "sans-serif")


class SvgSurface:
    """
    Surface backed by an svgwrite.Drawing.

    Each set_transform opens a new <g transform="matrix(...)"> that receives
    subsequent shapes. A full-size clear_region drops everything drawn so far.
    """

    def __init__(self, filename: str = "diagram.svg", size=(800, 600), background: Optional[str] = "white"):
        self.width, self.height = size
        self.background = background
        self.dwg = svgwrite.Drawing(filename, size=(self.width, self.height), profile="full")
        self._state: Dict[str, Any] = {
            "fill": "black",
            "stroke": "black",
            "line_width": 1.0,
            "alpha": 1.0,
            "font": "10px sans-serif",
            "dash": (),
            "target": self.dwg,
        }
        self._stack: List[Dict[str, Any]] = []
        self._path: List[str] = []
        self._pen = None

    # ---- state ----

    def save(self):
        self._stack.append(dict(self._state))

    def restore(self):
        if self._stack:
            self._state = self._stack.pop()

    def set_style(self, fill=None, stroke=None, line_width=None, alpha=None, font=None):
        for key, value in (("fill", fill), ("stroke", stroke), ("line_width", line_width), ("alpha", alpha), ("font", font)):
            if value is not None:
                self._state[key] = value

    def set_line_dash(self, pattern: Sequence[float]):
        self._state["dash"] = tuple(pattern)

    def set_transform(self, a, b, c, d, e, f):
        if (a, b, c, d, e, f) == (1, 0, 0, 1, 0, 0):
            self._state["target"] = self.dwg
            return
        g = self.dwg.g(transform="matrix(%s)" % " ".join(_fmt(v) for v in (a, b, c, d, e, f)))
        self.dwg.add(g)
        self._state["target"] = g

    def clear_region(self, x, y, width, height):
        if x <= 0 and y <= 0 and x + width >= self.width and y + height >= self.height:
            self.dwg.elements[:] = [self.dwg.defs]
            self._state["target"] = self.dwg
            self._stack.clear()
        if self.background:
            self._state["target"].add(
                self.dwg.rect(insert=(x, y), size=(width, height), fill=self.background, stroke="none")
            )

    # ---- paths ----

    def begin_path(self):
        self._path = []
        self._pen = None

    def move_to(self, x, y):
        self._path.append(f"M {_fmt(x)} {_fmt(y)}")
        self._pen = (x, y)

    def line_to(self, x, y):
        if self._pen is None:
            self.move_to(x, y)
            return
        self._path.append(f"L {_fmt(x)} {_fmt(y)}")
        self._pen = (x, y)

    def arc(self, cx, cy, radius, start, end):
        sx, sy = cx + radius * math.cos(start), cy + radius * math.sin(start)
        self.line_to(sx, sy)
        r = _fmt(radius)
        sweep = end - start
        if sweep >= 2 * math.pi:
            mx, my = cx - (sx - cx), cy - (sy - cy)
            self._path.append(f"A {r} {r} 0 1 1 {_fmt(mx)} {_fmt(my)}")
            self._path.append(f"A {r} {r} 0 1 1 {_fmt(sx)} {_fmt(sy)}")
            self._pen = (sx, sy)
            return
        sweep %= 2 * math.pi
        ex, ey = cx + radius * math.cos(start + sweep), cy + radius * math.sin(start + sweep)
        large = 1 if sweep > math.pi else 0
        self._path.append(f"A {r} {r} 0 {large} 1 {_fmt(ex)} {_fmt(ey)}")
        self._pen = (ex, ey)

    def close_path(self):
        self._path.append("Z")

    def fill(self):
        if not self._path:
            return
        self._state["target"].add(
            self.dwg.path(d=" ".join(self._path), fill=self._state["fill"], stroke="none", opacity=self._state["alpha"])
        )

    def stroke(self):
        if not self._path:
            return
        attrs = {
            "fill": "none",
            "stroke": self._state["stroke"],
            "stroke_width": self._state["line_width"],
            "opacity": self._state["alpha"],
        }
        if self._state["dash"]:
            attrs["stroke_dasharray"] = ",".join(_fmt(v) for v in self._state["dash"])
        self._state["target"].add(self.dwg.path(d=" ".join(self._path), **attrs))

    # ---- text ----

    def fill_text(self, text, x, y, align="start", baseline="alphabetic"):
        size, family = _split_font(self._state["font"])
        self._state["target"].add(
            self.dwg.text(
                text,
                insert=(x, y),
                fill=self._state["fill"],
                opacity=self._state["alpha"],
                font_size=size,
                font_family=family,
                text_anchor=TEXT_ANCHORS.get(align, "start"),
                dominant_baseline=BASELINES.get(baseline, "alphabetic"),
            )
        )

    # ---- output ----

    def tostring(self) -> str:
        return self.dwg.tostring()

    def write(self, filename: Optional[str] = None) -> str:
        if filename:
            self.dwg.filename = filename
        self.dwg.save()
        return self.dwg.filename
