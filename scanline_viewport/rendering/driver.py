"""Scanline render loop that draws one full frame into a viewport."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..pixels import CHANNELS
from ..surface import Viewport, ViewportError

LOGGER = logging.getLogger(__name__)

ColorFunction = Callable[[int, int, int, int], Sequence[int]]
ProgressCallback = Callable[[int, int], None]

OPAQUE = 255


class PixelComputeError(ViewportError):
    """Raised when the color function fails for a pixel; nothing is committed."""

    def __init__(self, x: int, y: int, reason: str) -> None:
        super().__init__(f"Color function failed at pixel ({x}, {y}): {reason}")
        self.x = x
        self.y = y


@dataclass(frozen=True)
class FrameStats:
    """Summary of a committed frame."""

    width: int
    height: int
    pixels: int
    elapsed: float


def _checked_color(color: Sequence[int], x: int, y: int) -> tuple[int, int, int]:
    try:
        r, g, b = color
    except (TypeError, ValueError):
        raise PixelComputeError(x, y, f"expected an (r, g, b) triple, got {color!r}") from None
    for channel in (r, g, b):
        if not isinstance(channel, int) or isinstance(channel, bool) or not 0 <= channel <= 255:
            raise PixelComputeError(x, y, f"channel values must be integers in [0, 255], got {color!r}")
    return r, g, b


class RenderDriver:
    """Drive full-frame render passes against a :class:`Viewport`.

    The driver renders at backing-store resolution. The color function is
    called once per physical pixel as ``color_fn(x, y, width, height)`` where
    ``width`` and ``height`` are the backing-store dimensions and ``y`` grows
    upwards from the bottom row. Rows are visited from ``height - 1`` down to
    ``0`` and pixels left to right, but colors must depend only on their
    coordinates.

    With a pixel ratio above 1 the coordinates and sizes passed to the color
    function are physical, not the logical ``Viewport.width``/``height``:
    a 640x480 viewport at ratio 2 calls ``color_fn(x, y, 1280, 960)``.
    Normalize by the given size rather than the logical one.
    """

    def __init__(self, viewport: Viewport, *, logger: logging.Logger | None = None) -> None:
        self.viewport = viewport
        self.logger = logger or LOGGER

    def render_frame(
        self,
        color_fn: ColorFunction,
        *,
        progress: Optional[ProgressCallback] = None,
    ) -> FrameStats:
        """Compute every pixel with ``color_fn`` and commit the frame once.

        Raises :class:`PixelComputeError` if ``color_fn`` raises or returns an
        invalid color for any pixel. In that case the viewport keeps its
        previous contents.
        """

        started = time.perf_counter()
        nx, ny = self.viewport.backing_size
        buffer = self.viewport.acquire_pixel_buffer()
        data = buffer.data
        self.logger.debug("Rendering %dx%d frame", nx, ny)

        for y in range(ny - 1, -1, -1):
            row = ny - 1 - y
            for x in range(nx):
                try:
                    color = color_fn(x, y, nx, ny)
                except Exception as exc:
                    raise PixelComputeError(x, y, str(exc) or type(exc).__name__) from exc
                r, g, b = _checked_color(color, x, y)
                i = buffer.index(x, row)
                data[i : i + CHANNELS] = bytes((r, g, b, OPAQUE))
            if progress is not None:
                progress(row + 1, ny)

        self.viewport.commit_pixel_buffer(buffer)
        stats = FrameStats(width=nx, height=ny, pixels=nx * ny, elapsed=time.perf_counter() - started)
        self.logger.debug("Committed %d pixels in %.3f seconds", stats.pixels, stats.elapsed)
        return stats
