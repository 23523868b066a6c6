from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

from .errors import OptionsError
from .geometry.contour import ARROW_LENGTH, NODE_SIZE


@dataclass(frozen=True)
class RenderOptions:
    width: int = 800
    height: int = 600
    node_size: float = NODE_SIZE
    node_fill: str = "#3498db"
    node_stroke: str = "#2980b9"
    node_line_width: float = 2.0
    label_fill: str = "white"
    label_font: str = "12px Arial"
    line_color: str = "#34495e"
    line_width: float = 2.0
    dash_pattern: Tuple[float, ...] = (5.0, 5.0)
    arrow_length: float = ARROW_LENGTH
    show_grid: bool = True
    grid_minor: str = "#e5e7eb"
    grid_major: str = "#d1d5db"
    origin_color: str = "#ff4444"
    origin_font: str = "12px Courier New"
    background: str = "white"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderOptions":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise OptionsError(f"Unknown render options: {', '.join(unknown)}")

        defaults = cls()
        values: Dict[str, Any] = {}
        for key, raw in data.items():
            current = getattr(defaults, key)
            try:
                if isinstance(current, bool):
                    if not isinstance(raw, bool):
                        raise TypeError(key)
                    values[key] = raw
                elif isinstance(current, tuple):
                    values[key] = tuple(float(v) for v in raw)
                elif isinstance(current, (int, float)):
                    if isinstance(raw, bool):
                        raise TypeError(key)
                    values[key] = type(current)(raw)
                else:
                    values[key] = str(raw)
            except (TypeError, ValueError):
                raise OptionsError(f"Invalid value for option {key}: {raw!r}") from None

        opts = replace(defaults, **values)
        if opts.width <= 0 or opts.height <= 0:
            raise OptionsError("width and height must be > 0")
        if opts.node_size <= 0:
            raise OptionsError("node_size must be > 0")
        return opts


def load_options(path: Path | str | None) -> RenderOptions:
    """Read render options from YAML; a missing path or empty file gives defaults."""
    if path is None:
        return RenderOptions()
    try:
        data = yaml.safe_load(Path(path).read_text()) or {}
    except OSError as exc:
        raise OptionsError(f"Failed to read options file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OptionsError(f"Failed to parse options file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise OptionsError(f"Options file {path} must contain a mapping")
    return RenderOptions.from_mapping(data)
