from __future__ import annotations

import pytest
from PIL import Image

from scanline_viewport.display import ImageTarget, LinearGradient
from scanline_viewport.pixels import PixelBuffer
from scanline_viewport.surface import (
    DimensionMismatchError,
    InvalidTargetError,
    Viewport,
)

WHITE = (255, 255, 255, 255)


@pytest.mark.parametrize(
    "width, height, ratio",
    [(640, 480, 1), (10, 7, 2), (3, 5, 3), (4, 4, 2.0)],
)
def test_logical_size_is_independent_of_pixel_ratio(width: int, height: int, ratio: float) -> None:
    target = ImageTarget()
    viewport = Viewport.create(target, width, height, ratio)

    assert viewport.width == width
    assert viewport.height == height
    assert viewport.pixel_ratio == int(ratio)
    assert viewport.backing_size == (width * int(ratio), height * int(ratio))
    assert target.style == {"width": f"{width}px", "height": f"{height}px"}


def test_initial_buffer_matches_default_background() -> None:
    viewport = Viewport(ImageTarget(), 12, 8, 2)

    buffer = viewport.acquire_pixel_buffer()

    assert (buffer.width, buffer.height) == (24, 16)
    assert buffer.data == bytearray(bytes(WHITE) * 24 * 16)


def test_acquired_buffer_is_independent_snapshot() -> None:
    target = ImageTarget()
    viewport = Viewport(target, 4, 4)

    buffer = viewport.acquire_pixel_buffer()
    buffer.set_pixel(1, 1, (255, 0, 0, 255))

    assert viewport.acquire_pixel_buffer().get_pixel(1, 1) == WHITE
    assert target.snapshot().getpixel((1, 1)) == WHITE


def test_commit_replaces_visible_content() -> None:
    target = ImageTarget()
    viewport = Viewport(target, 4, 3)

    buffer = viewport.acquire_pixel_buffer()
    buffer.set_pixel(2, 1, (10, 20, 30, 255))
    viewport.commit_pixel_buffer(buffer)

    assert target.snapshot().getpixel((2, 1)) == (10, 20, 30, 255)
    assert viewport.acquire_pixel_buffer().data == buffer.data


@pytest.mark.parametrize(
    "buffer",
    [
        PixelBuffer(4, 3, bytearray(4 * 3 * 4 - 1)),
        PixelBuffer(3, 4, bytearray(4 * 3 * 4)),
        PixelBuffer.blank(8, 6),
    ],
    ids=["short-data", "swapped-dimensions", "stale-size"],
)
def test_commit_rejects_mismatched_buffers(buffer: PixelBuffer) -> None:
    target = ImageTarget(keep_history=True)
    viewport = Viewport(target, 4, 3)
    before = viewport.acquire_pixel_buffer()

    with pytest.raises(DimensionMismatchError):
        viewport.commit_pixel_buffer(buffer)

    assert viewport.acquire_pixel_buffer().data == before.data
    assert target.history == []


def test_missing_target_raises() -> None:
    with pytest.raises(InvalidTargetError):
        Viewport(None, 640, 480)


def test_closed_target_raises_without_touching_it() -> None:
    target = ImageTarget()
    target.close()

    with pytest.raises(InvalidTargetError):
        Viewport(target, 640, 480)

    assert target.style == {}
    assert target.backing_size == (300, 150)


@pytest.mark.parametrize(
    "background",
    ["not-a-color", (1, 2), LinearGradient("red", "nope")],
    ids=["unknown-name", "short-tuple", "bad-gradient-stop"],
)
def test_bad_background_raises_without_touching_target(background) -> None:
    target = ImageTarget()
    ctx = target.get_context()
    assert ctx is not None

    with pytest.raises(ValueError):
        Viewport(target, 4, 4, 2, background=background)

    assert target.style == {}
    assert target.backing_size == (300, 150)
    assert ctx.transform == (1.0, 1.0)
    assert target.snapshot().getpixel((0, 0)) == (0, 0, 0, 0)


@pytest.mark.parametrize(
    "width, height",
    [(0, 3), (-1, 3), (2.5, 3), (True, 3), (3, 0), (3, 2.0), ("4", 3)],
)
def test_rejects_invalid_size(width, height) -> None:
    target = ImageTarget()

    with pytest.raises(ValueError):
        Viewport(target, width, height)

    assert target.style == {}


@pytest.mark.parametrize("ratio", [0, -1, 1.5])
def test_rejects_fractional_or_non_positive_ratio(ratio: float) -> None:
    with pytest.raises(ValueError):
        Viewport(ImageTarget(), 10, 10, ratio)


def test_clear_makes_surface_transparent() -> None:
    viewport = Viewport(ImageTarget(), 5, 5, 2)

    viewport.clear()

    assert viewport.acquire_pixel_buffer().data == bytearray(10 * 10 * 4)


@pytest.mark.parametrize(
    "style, expected",
    [
        ("red", (255, 0, 0, 255)),
        ("#00ff00", (0, 255, 0, 255)),
        ((0, 0, 255), (0, 0, 255, 255)),
    ],
)
def test_fill_with_solid_color_covers_backing_store(style, expected) -> None:
    viewport = Viewport(ImageTarget(), 6, 4, 2)

    viewport.fill(style)

    buffer = viewport.acquire_pixel_buffer()
    assert buffer.data == bytearray(bytes(expected) * 12 * 8)


def test_fill_blends_translucent_color_over_existing_content() -> None:
    viewport = Viewport(ImageTarget(), 2, 2)

    viewport.fill((0, 0, 0, 128))

    r, g, b, a = viewport.acquire_pixel_buffer().get_pixel(0, 0)
    assert 120 <= r <= 135
    assert r == g == b
    assert a == 255


def test_fill_with_vertical_gradient() -> None:
    viewport = Viewport(ImageTarget(), 8, 32)

    viewport.fill(LinearGradient(start=(255, 0, 0), end=(0, 0, 255)))

    buffer = viewport.acquire_pixel_buffer()
    top = buffer.get_pixel(0, 0)
    bottom = buffer.get_pixel(0, 31)
    assert top[0] > top[2]
    assert bottom[2] > bottom[0]


def test_fill_with_pattern_tiles_image() -> None:
    pattern = Image.new("RGB", (2, 1))
    pattern.putpixel((0, 0), (255, 0, 0))
    pattern.putpixel((1, 0), (0, 0, 255))
    viewport = Viewport(ImageTarget(), 5, 2)

    viewport.fill(pattern)

    buffer = viewport.acquire_pixel_buffer()
    assert buffer.get_pixel(0, 0) == (255, 0, 0, 255)
    assert buffer.get_pixel(1, 1) == (0, 0, 255, 255)
    assert buffer.get_pixel(4, 1) == (255, 0, 0, 255)


def test_unknown_color_name_is_rejected() -> None:
    viewport = Viewport(ImageTarget(), 2, 2)

    with pytest.raises(ValueError):
        viewport.fill("not-a-color")


def test_image_data_property_round_trips_through_commit() -> None:
    target = ImageTarget()
    viewport = Viewport(target, 3, 3)

    data = viewport.image_data
    data.set_pixel(0, 2, (1, 2, 3, 255))
    viewport.image_data = data

    assert target.snapshot().getpixel((0, 2)) == (1, 2, 3, 255)
