"""Row-major RGBA pixel storage exchanged between surfaces and renderers."""
from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image

CHANNELS = 4

Pixel = tuple[int, int, int, int]


@dataclass(slots=True)
class PixelBuffer:
    """Flat RGBA bytes, four 8-bit channels per pixel, rows top to bottom.

    The buffer is not validated on construction; a surface checks that the
    declared dimensions and the data length agree when the buffer is committed.
    """

    width: int
    height: int
    data: bytearray = field(repr=False)

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        return cls(width, height, bytearray(width * height * CHANNELS))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(width, height, bytearray(image.tobytes()))

    @property
    def expected_length(self) -> int:
        return self.width * self.height * CHANNELS

    def __len__(self) -> int:
        return len(self.data)

    def index(self, x: int, y: int) -> int:
        """Return the offset of the red channel of pixel ``(x, y)``."""

        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} buffer")
        return y * self.width * CHANNELS + x * CHANNELS

    def get_pixel(self, x: int, y: int) -> Pixel:
        i = self.index(x, y)
        r, g, b, a = self.data[i : i + CHANNELS]
        return r, g, b, a

    def set_pixel(self, x: int, y: int, pixel: Pixel) -> None:
        i = self.index(x, y)
        self.data[i : i + CHANNELS] = bytes(pixel)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, bytearray(self.data))

    def to_image(self) -> Image.Image:
        """Return a Pillow ``RGBA`` image holding a copy of the pixels."""

        if len(self.data) != self.expected_length:
            raise ValueError(
                f"Pixel data has {len(self.data)} bytes, expected {self.expected_length} "
                f"for {self.width}x{self.height}"
            )
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))
