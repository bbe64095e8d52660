"""Per-pixel color functions usable with :class:`RenderDriver`."""

from __future__ import annotations

import math
from typing import Mapping

from ..display.base import Color
from ..display.image import parse_color
from .driver import ColorFunction


def _to_byte(value: float) -> int:
    return math.trunc(255.99 * value)


def gradient(x: int, y: int, width: int, height: int) -> tuple[int, int, int]:
    """Red grows left to right, green bottom to top, blue is fixed."""

    return _to_byte(x / width), _to_byte(y / height), _to_byte(0.2)


def solid(color: Color) -> ColorFunction:
    """Return a color function painting every pixel with ``color``."""

    r, g, b, _ = parse_color(color)

    def shade(x: int, y: int, width: int, height: int) -> tuple[int, int, int]:
        return r, g, b

    return shade


SHADERS: Mapping[str, ColorFunction] = {
    "gradient": gradient,
    "black": solid("black"),
    "white": solid("white"),
}


def get_shader(name: str) -> ColorFunction:
    try:
        return SHADERS[name]
    except KeyError:
        raise ValueError(f"Unknown shader {name!r}; choose from {', '.join(sorted(SHADERS))}") from None
