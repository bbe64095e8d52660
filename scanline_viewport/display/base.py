"""Abstract display target interfaces used by the framebuffer surface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, MutableMapping

from PIL import Image

if TYPE_CHECKING:
    from ..pixels import PixelBuffer

Color = str | tuple[int, int, int] | tuple[int, int, int, int]


@dataclass(frozen=True)
class LinearGradient:
    """Two-color linear gradient spanning the filled rectangle."""

    start: Color
    end: Color
    direction: str = "vertical"

    def __post_init__(self) -> None:
        if self.direction not in ("vertical", "horizontal"):
            raise ValueError(
                f"Unknown gradient direction {self.direction!r}; expected 'vertical' or 'horizontal'."
            )


FillStyle = Color | LinearGradient | Image.Image


class DrawingContext(ABC):
    """Drawing operations against a target's backing store."""

    @abstractmethod
    def scale(self, sx: float, sy: float) -> None:
        """Scale the current transform so later drawing uses logical units."""

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, style: FillStyle) -> None:
        """Paint a rectangle given in logical units."""

    @abstractmethod
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Erase a rectangle given in logical units to transparent black."""

    @abstractmethod
    def get_image_data(self) -> "PixelBuffer":
        """Return a copy of the whole backing store."""

    @abstractmethod
    def put_image_data(self, buffer: "PixelBuffer") -> None:
        """Replace the whole backing store. Ignores the current transform."""


class DisplayTarget(ABC):
    """A drawable surface owned by the host environment."""

    style: MutableMapping[str, str]

    @property
    @abstractmethod
    def backing_size(self) -> tuple[int, int]:
        """Return the (width, height) of the backing store in physical pixels."""

    @abstractmethod
    def resize_backing(self, width: int, height: int) -> None:
        """Reallocate the backing store. Existing contents are discarded."""

    @abstractmethod
    def get_context(self) -> DrawingContext | None:
        """Return the drawing context, or None when the target cannot draw."""

    def close(self) -> None:
        """Release the target. Later context requests may return None."""
