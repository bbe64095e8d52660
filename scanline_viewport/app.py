"""Command line entry point that renders a single frame into a viewport."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .config import ConfigError, ViewportConfig, load_env_file
from .display import DisplayTarget, ImageTarget
from .rendering import SHADERS, FrameStats, RenderDriver, get_shader
from .surface import Viewport

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scanline viewport renderer")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before the app starts.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the rendered frame to this PNG path.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (defaults to VIEWPORT_LOG_LEVEL or INFO).",
    )

    surface_group = parser.add_argument_group("Surface options")
    surface_group.add_argument("--width", type=int, default=None, help="Logical width in pixels.")
    surface_group.add_argument("--height", type=int, default=None, help="Logical height in pixels.")
    surface_group.add_argument(
        "--pixel-ratio",
        type=float,
        default=None,
        help="Device pixel ratio; the backing store is scaled by this factor.",
    )
    surface_group.add_argument(
        "--background",
        type=str,
        default=None,
        help="Color the surface is filled with before the first frame.",
    )
    surface_group.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory where every committed frame is captured as a PNG.",
    )

    parser.add_argument(
        "--shader",
        choices=sorted(SHADERS),
        default=None,
        help="Per-pixel color function used for the frame.",
    )

    return parser


@dataclass
class AppSettings:
    width: int
    height: int
    pixel_ratio: float
    background: str
    shader: str
    output: Path | None
    output_dir: Path | None
    log_level: str


class AppRuntime:
    """Owns the display target, the viewport bound to it, and the render driver."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        target_factory: Callable[..., DisplayTarget] = ImageTarget,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.target_factory = target_factory
        self.logger = logger or LOGGER

        self._target: DisplayTarget | None = None
        self._viewport: Viewport | None = None
        self._driver: RenderDriver | None = None
        self._started = False

    @property
    def viewport(self) -> Viewport | None:
        return self._viewport

    def start(self) -> None:
        """Bind the viewport to a fresh display target."""

        if self._started:
            return

        try:
            self._target = self.target_factory(output_dir=self.settings.output_dir, logger=self.logger)
            self._viewport = Viewport(
                self._target,
                self.settings.width,
                self.settings.height,
                self.settings.pixel_ratio,
                background=self.settings.background,
                logger=self.logger,
            )
            self._driver = RenderDriver(self._viewport, logger=self.logger)
            self._started = True
        except Exception:
            self.close()
            raise

    def render_once(self) -> FrameStats:
        if not self._driver or not self._target:
            raise RuntimeError("Runtime has not been started")

        shader = get_shader(self.settings.shader)
        self.logger.info(
            "Rendering %dx%d frame with %r shader", self.settings.width, self.settings.height, self.settings.shader
        )
        stats = self._driver.render_frame(shader)
        self.logger.info("Frame committed in %.2f seconds", stats.elapsed)

        if self.settings.output is not None:
            if not isinstance(self._target, ImageTarget):
                raise RuntimeError("--output requires an image-backed display target")
            self._target.save(self.settings.output)
        return stats

    def close(self) -> None:
        if self._target:
            try:
                self._target.close()
            except Exception:
                self.logger.exception("Error while closing display target")
            finally:
                self._target = None

        self._viewport = None
        self._driver = None
        self._started = False


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    load_env_file(args.env_file)
    config = ViewportConfig.from_env()

    def pick(value, default):
        return default if value is None else value

    log_level = pick(args.log_level, config.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown log level {log_level!r}")

    return AppSettings(
        width=pick(args.width, config.width),
        height=pick(args.height, config.height),
        pixel_ratio=pick(args.pixel_ratio, config.pixel_ratio),
        background=pick(args.background, config.background),
        shader=pick(args.shader, config.shader),
        output=args.output,
        output_dir=args.output_dir,
        log_level=log_level,
    )


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    target_factory: Callable[..., DisplayTarget] = ImageTarget,
) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))

    logging.basicConfig(level=settings.log_level)
    runtime = AppRuntime(settings=settings, target_factory=target_factory)

    try:
        runtime.start()
        runtime.render_once()
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")
    finally:
        runtime.close()


if __name__ == "__main__":
    main()
