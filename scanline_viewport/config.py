"""Environment-driven settings for the viewport application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

__all__ = [
    "ConfigError",
    "ViewportConfig",
    "env_float",
    "env_int",
    "load_env_file",
]

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.exists() or not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value


def env_int(name: str, default: int, environ: Mapping[str, str] | None = None) -> int:
    raw = (environ if environ is not None else os.environ).get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def env_float(name: str, default: float, environ: Mapping[str, str] | None = None) -> float:
    raw = (environ if environ is not None else os.environ).get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ViewportConfig:
    """Surface and render defaults resolved from the environment."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    pixel_ratio: float = 1
    background: str = "white"
    shader: str = "gradient"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ViewportConfig":
        env = environ if environ is not None else os.environ
        config = cls(
            width=env_int("VIEWPORT_WIDTH", DEFAULT_WIDTH, env),
            height=env_int("VIEWPORT_HEIGHT", DEFAULT_HEIGHT, env),
            pixel_ratio=env_float("VIEWPORT_PIXEL_RATIO", 1, env),
            background=env.get("VIEWPORT_BACKGROUND") or "white",
            shader=env.get("VIEWPORT_SHADER") or "gradient",
            log_level=(env.get("VIEWPORT_LOG_LEVEL") or "INFO").upper(),
        )
        if config.width <= 0 or config.height <= 0:
            raise ConfigError(f"Viewport size must be positive, got {config.width}x{config.height}")
        if config.pixel_ratio <= 0:
            raise ConfigError(f"VIEWPORT_PIXEL_RATIO must be positive, got {config.pixel_ratio}")
        return config
