#!/usr/bin/env python3
"""Render the sample gradient frame and write it to a PNG."""

from __future__ import annotations

import argparse
from pathlib import Path

from scanline_viewport.display import ImageTarget
from scanline_viewport.rendering import RenderDriver, gradient
from scanline_viewport.surface import Viewport

PREVIEWS_DIR = Path(__file__).resolve().parents[1] / "previews"
DEFAULT_OUTPUT = PREVIEWS_DIR / "gradient_sample.png"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to write the PNG (defaults to previews/gradient_sample.png).",
    )
    parser.add_argument("--width", type=int, default=640)
    parser.add_argument("--height", type=int, default=480)
    parser.add_argument("--pixel-ratio", type=float, default=1)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    target = ImageTarget()
    viewport = Viewport.create(target, args.width, args.height, args.pixel_ratio)
    stats = RenderDriver(viewport).render_frame(gradient)
    target.save(args.output)
    print(f"Wrote {stats.width}x{stats.height} frame to {args.output}")


if __name__ == "__main__":
    main()
