"""In-memory Pillow display target with optional frame capture."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import MutableMapping, Optional

from PIL import Image, ImageColor

from ..pixels import PixelBuffer
from .base import Color, DisplayTarget, DrawingContext, FillStyle, LinearGradient

# Same initial backing store size as an unsized HTML canvas.
DEFAULT_BACKING_SIZE: tuple[int, int] = (300, 150)
TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)


def parse_color(color: Color) -> tuple[int, int, int, int]:
    """Normalize a Pillow color description to an RGBA tuple."""

    if isinstance(color, str):
        return ImageColor.getcolor(color, "RGBA")  # type: ignore[return-value]
    if len(color) == 3:
        return (*color, 255)  # type: ignore[return-value]
    if len(color) == 4:
        return tuple(color)  # type: ignore[return-value]
    raise ValueError(f"Color tuples need 3 or 4 channels, got {color!r}")


def check_fill_style(style: FillStyle) -> None:
    """Raise ValueError if ``style`` cannot be painted."""

    if isinstance(style, Image.Image):
        if style.width <= 0 or style.height <= 0:
            raise ValueError(f"Pattern images must not be empty, got size {style.size}")
    elif isinstance(style, LinearGradient):
        parse_color(style.start)
        parse_color(style.end)
    else:
        parse_color(style)


def _paint_layer(style: FillStyle, size: tuple[int, int]) -> Image.Image:
    if isinstance(style, Image.Image):
        pattern = style.convert("RGBA")
        layer = Image.new("RGBA", size, TRANSPARENT)
        for top in range(0, size[1], pattern.height):
            for left in range(0, size[0], pattern.width):
                layer.paste(pattern, (left, top))
        return layer
    if isinstance(style, LinearGradient):
        mask = Image.linear_gradient("L")
        if style.direction == "horizontal":
            mask = mask.transpose(Image.Transpose.ROTATE_90)
        mask = mask.resize(size)
        start = Image.new("RGBA", size, parse_color(style.start))
        end = Image.new("RGBA", size, parse_color(style.end))
        return Image.composite(end, start, mask)
    return Image.new("RGBA", size, parse_color(style))


class ImageContext(DrawingContext):
    """Drawing context that paints into an :class:`ImageTarget`."""

    def __init__(self, target: "ImageTarget") -> None:
        self._target = target
        self._sx = 1.0
        self._sy = 1.0

    @property
    def transform(self) -> tuple[float, float]:
        return self._sx, self._sy

    def reset_transform(self) -> None:
        self._sx = 1.0
        self._sy = 1.0

    def scale(self, sx: float, sy: float) -> None:
        self._sx *= sx
        self._sy *= sy

    def _to_box(self, x: float, y: float, width: float, height: float) -> tuple[int, int, int, int] | None:
        image_width, image_height = self._target.backing_size
        left = max(0, round(x * self._sx))
        top = max(0, round(y * self._sy))
        right = min(image_width, round((x + width) * self._sx))
        bottom = min(image_height, round((y + height) * self._sy))
        if left >= right or top >= bottom:
            return None
        return left, top, right, bottom

    def fill_rect(self, x: float, y: float, width: float, height: float, style: FillStyle) -> None:
        box = self._to_box(x, y, width, height)
        if box is None:
            return
        size = (box[2] - box[0], box[3] - box[1])
        layer = _paint_layer(style, size)
        image = self._target.image
        region = image.crop(box)
        image.paste(Image.alpha_composite(region, layer), box[:2])

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        box = self._to_box(x, y, width, height)
        if box is None:
            return
        size = (box[2] - box[0], box[3] - box[1])
        self._target.image.paste(Image.new("RGBA", size, TRANSPARENT), box[:2])

    def get_image_data(self) -> PixelBuffer:
        return PixelBuffer.from_image(self._target.image)

    def put_image_data(self, buffer: PixelBuffer) -> None:
        if (buffer.width, buffer.height) != self._target.backing_size:
            raise ValueError(
                f"Pixel data is {buffer.width}x{buffer.height}, expected "
                f"{self._target.backing_size[0]}x{self._target.backing_size[1]}."
            )
        self._target.present(buffer.to_image())


@dataclass
class ImageTarget(DisplayTarget):
    """Display target backed by a Pillow ``RGBA`` image.

    Every frame put through :meth:`ImageContext.put_image_data` is presented
    atomically; when ``output_dir`` is set each presented frame is also written
    to disk as a PNG.
    """

    output_dir: Optional[Path] = None
    keep_history: bool = False
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def __post_init__(self) -> None:
        self.style: MutableMapping[str, str] = {}
        self._image = Image.new("RGBA", DEFAULT_BACKING_SIZE, TRANSPARENT)
        self._context = ImageContext(self)
        self._closed = False
        self._history: list[Image.Image] = []
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
            self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def backing_size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def image(self) -> Image.Image:
        """The live backing store. Mutations are visible immediately."""

        return self._image

    def resize_backing(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Backing store size must be positive, got {width}x{height}")
        self.logger.debug("Resizing backing store to %dx%d", width, height)
        self._image = Image.new("RGBA", (width, height), TRANSPARENT)
        self._context.reset_transform()

    def get_context(self) -> ImageContext | None:
        if self._closed:
            return None
        return self._context

    def close(self) -> None:
        """Detach the target; later context requests return None."""

        self._closed = True

    def present(self, image: Image.Image) -> None:
        """Swap ``image`` in as the visible backing store."""

        if image.size != self._image.size:
            raise ValueError(f"Image has size {image.size}, expected {self._image.size}")
        self._image = image.convert("RGBA")
        if self.keep_history:
            self._history.append(self._image.copy())
        if self.output_dir is not None:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%fZ")
            output_path = self.output_dir / f"frame-{timestamp}.png"
            self._image.save(output_path)
            self.logger.debug("Saved frame to %s", output_path)

    def snapshot(self) -> Image.Image:
        return self._image.copy()

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._image.save(path)
        self.logger.info("Wrote frame to %s", path)
        return path

    @property
    def history(self) -> list[Image.Image]:
        """Return copies of the presented frames (if enabled)."""

        return [frame.copy() for frame in self._history]
