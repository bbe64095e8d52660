"""Display targets the framebuffer surface can bind to."""
from __future__ import annotations

from .base import Color, DisplayTarget, DrawingContext, FillStyle, LinearGradient
from .image import ImageContext, ImageTarget, check_fill_style, parse_color

__all__ = [
    "Color",
    "DisplayTarget",
    "DrawingContext",
    "FillStyle",
    "ImageContext",
    "ImageTarget",
    "LinearGradient",
    "check_fill_style",
    "parse_color",
]
