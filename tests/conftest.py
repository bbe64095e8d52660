from __future__ import annotations

import pytest

VIEWPORT_ENV_VARS = (
    "VIEWPORT_WIDTH",
    "VIEWPORT_HEIGHT",
    "VIEWPORT_PIXEL_RATIO",
    "VIEWPORT_BACKGROUND",
    "VIEWPORT_SHADER",
    "VIEWPORT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_viewport_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Registering each variable first means values written by load_env_file are undone too.
    for name in VIEWPORT_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
