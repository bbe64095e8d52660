"""Top-level package for the scanline viewport renderer."""

from __future__ import annotations

from .pixels import PixelBuffer
from .rendering import PixelComputeError, RenderDriver
from .surface import DimensionMismatchError, InvalidTargetError, Viewport, ViewportError

__all__ = [
    "__version__",
    "DimensionMismatchError",
    "InvalidTargetError",
    "PixelBuffer",
    "PixelComputeError",
    "RenderDriver",
    "Viewport",
    "ViewportError",
]

__version__ = "0.1.0"
