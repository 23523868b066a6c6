"""
Drawing surface contract used by the renderers.

The renderers only issue these calls and never read anything back, so any
backend that implements them (SVG, a canvas bridge, a recorder) can be drawn on.
"""
from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, Tuple


class Surface(Protocol):
    def set_transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None: ...

    def clear_region(self, x: float, y: float, width: float, height: float) -> None: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def set_style(
        self,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: Optional[float] = None,
        alpha: Optional[float] = None,
        font: Optional[str] = None,
    ) -> None: ...

    def set_line_dash(self, pattern: Sequence[float]) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self) -> None: ...

    def stroke(self) -> None: ...

    def fill_text(self, text: str, x: float, y: float, align: str = "start", baseline: str = "alphabetic") -> None: ...


Call = Tuple[str, Tuple[Any, ...]]


class RecordingSurface:
    """Keeps every call as a (name, args) tuple, in order."""

    def __init__(self) -> None:
        self.calls: List[Call] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def named(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for n, args in self.calls if n == name]

    def reset(self) -> None:
        self.calls.clear()

    def set_transform(self, a, b, c, d, e, f):
        self._record("set_transform", a, b, c, d, e, f)

    def clear_region(self, x, y, width, height):
        self._record("clear_region", x, y, width, height)

    def save(self):
        self._record("save")

    def restore(self):
        self._record("restore")

    def set_style(self, fill=None, stroke=None, line_width=None, alpha=None, font=None):
        self._record("set_style", fill, stroke, line_width, alpha, font)

    def set_line_dash(self, pattern):
        self._record("set_line_dash", tuple(pattern))

    def begin_path(self):
        self._record("begin_path")

    def move_to(self, x, y):
        self._record("move_to", x, y)

    def line_to(self, x, y):
        self._record("line_to", x, y)

    def arc(self, cx, cy, radius, start, end):
        self._record("arc", cx, cy, radius, start, end)

    def close_path(self):
        self._record("close_path")

    def fill(self):
        self._record("fill")

    def stroke(self):
        self._record("stroke")

    def fill_text(self, text, x, y, align="start", baseline="alphabetic"):
        self._record("fill_text", text, x, y, align, baseline)
