"""
Expectacle configuration: environment-driven knobs for failure rendering.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _getenv(name: str, default: str = "") -> str:
    v = os.environ.get(name)
    return v if v is not None else default


def _getenv_int(name: str, default: int = 0) -> int:
    v = os.environ.get(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {v!r}") from None


@dataclass(frozen=True)
class Settings:
    """Rendering configuration. Read once at import; see load_settings()."""
    max_render_length: int  # 0 disables truncation
    fail_message: str


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        max_render_length=max(0, _getenv_int("EXPECTACLE_MAX_RENDER_LENGTH", 0)),
        fail_message=_getenv("EXPECTACLE_FAIL_MESSAGE", "Force failed."),
    )


settings = load_settings()
