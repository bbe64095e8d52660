"""Framebuffer surface over a host display target.

A :class:`Viewport` binds to a :class:`~scanline_viewport.display.DisplayTarget`
and makes access to its pixel data slightly easier. Callers work in logical
units while the target's backing store is allocated at ``pixel_ratio`` times
that resolution so high-DPI displays stay sharp.

Pixel-level changes follow a checkout/commit discipline: take a snapshot with
:meth:`Viewport.acquire_pixel_buffer`, mutate it in memory, then push the whole
buffer back with :meth:`Viewport.commit_pixel_buffer`. Each commit is a full
surface copy, so batch every pixel change of a frame into a single commit.
"""

from __future__ import annotations

import logging
from typing import Any

from .display.base import DisplayTarget, DrawingContext, FillStyle
from .display.image import check_fill_style
from .pixels import CHANNELS, PixelBuffer

LOGGER = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "white"


class ViewportError(RuntimeError):
    """Base class for framebuffer and render failures."""


class InvalidTargetError(ViewportError):
    """Raised when no usable display target is available at initialization."""


class DimensionMismatchError(ViewportError):
    """Raised when a committed buffer does not match the backing store."""


def _parse_px(value: str | None) -> int:
    return int((value or "").strip().removesuffix("px"))


def _coerce_ratio(pixel_ratio: float) -> int:
    try:
        ratio = float(pixel_ratio)
    except (TypeError, ValueError):
        raise ValueError(f"Pixel ratio must be a number, got {pixel_ratio!r}") from None
    if ratio <= 0 or not ratio.is_integer():
        raise ValueError(f"Pixel ratio must be a positive whole number, got {pixel_ratio!r}")
    return int(ratio)


class Viewport:
    """Logical-resolution framebuffer bound to a display target."""

    def __init__(
        self,
        target: DisplayTarget | None,
        width: int,
        height: int,
        pixel_ratio: float = 1,
        *,
        background: FillStyle = DEFAULT_BACKGROUND,
        logger: logging.Logger | None = None,
    ) -> None:
        if target is None:
            raise InvalidTargetError("You must provide a valid display target to the Viewport")
        for size in (width, height):
            if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
                raise ValueError(f"Viewport size must be positive integers, got {width!r}x{height!r}")
        ratio = _coerce_ratio(pixel_ratio)
        check_fill_style(background)

        ctx = target.get_context()
        if ctx is None:
            raise InvalidTargetError("Could not get a valid drawing context for the display target")

        self._target = target
        self._ctx: DrawingContext = ctx
        self._pixel_ratio = ratio
        self._logger = logger or LOGGER
        self._set_size(width, height, ratio)
        self.fill(background)

    @classmethod
    def create(
        cls,
        target: DisplayTarget | None,
        width: int,
        height: int,
        pixel_ratio: float = 1,
        **kwargs: Any,
    ) -> "Viewport":
        return cls(target, width, height, pixel_ratio, **kwargs)

    @property
    def width(self) -> int:
        """Logical width, read back from the target's styled size."""

        return _parse_px(self._target.style.get("width"))

    @property
    def height(self) -> int:
        """Logical height, read back from the target's styled size."""

        return _parse_px(self._target.style.get("height"))

    @property
    def pixel_ratio(self) -> int:
        return self._pixel_ratio

    @property
    def backing_size(self) -> tuple[int, int]:
        return self._target.backing_size

    @property
    def target(self) -> DisplayTarget:
        return self._target

    def clear(self) -> None:
        """Erase the whole surface to transparent black."""

        self._ctx.clear_rect(0, 0, self.width, self.height)

    def fill(self, style: FillStyle) -> None:
        """Fill the entire surface with a color, gradient, or pattern image."""

        self._logger.debug("Filling surface with %r", style)
        self._ctx.fill_rect(0, 0, self.width, self.height, style)

    def acquire_pixel_buffer(self) -> PixelBuffer:
        """Return an independent snapshot of the full backing store."""

        return self._ctx.get_image_data()

    def commit_pixel_buffer(self, buffer: PixelBuffer) -> None:
        """Replace the visible content of the target with ``buffer``."""

        backing_width, backing_height = self.backing_size
        expected = backing_width * backing_height * CHANNELS
        if (buffer.width, buffer.height) != (backing_width, backing_height) or len(buffer.data) != expected:
            raise DimensionMismatchError(
                f"Pixel buffer is {buffer.width}x{buffer.height} with {len(buffer.data)} bytes, "
                f"expected {backing_width}x{backing_height} with {expected} bytes"
            )
        self._logger.debug("Committing %dx%d pixel buffer", backing_width, backing_height)
        self._ctx.put_image_data(buffer)

    @property
    def image_data(self) -> PixelBuffer:
        return self.acquire_pixel_buffer()

    @image_data.setter
    def image_data(self, buffer: PixelBuffer) -> None:
        self.commit_pixel_buffer(buffer)

    def _set_size(self, width: int, height: int, pixel_ratio: int) -> None:
        # Display size is logical; the backing store is scaled by the pixel ratio.
        self._target.style["width"] = f"{width}px"
        self._target.style["height"] = f"{height}px"
        self._target.resize_backing(width * pixel_ratio, height * pixel_ratio)
        self._ctx.scale(pixel_ratio, pixel_ratio)
        self._logger.debug(
            "Viewport sized to %dx%d (backing store %dx%d, ratio %d)",
            width,
            height,
            width * pixel_ratio,
            height * pixel_ratio,
            pixel_ratio,
        )
