"""Render driver and per-pixel color functions."""

from .driver import ColorFunction, FrameStats, PixelComputeError, RenderDriver
from .shaders import SHADERS, get_shader, gradient, solid

__all__ = [
    "ColorFunction",
    "FrameStats",
    "PixelComputeError",
    "RenderDriver",
    "SHADERS",
    "get_shader",
    "gradient",
    "solid",
]
