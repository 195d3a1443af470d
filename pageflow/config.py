"""Configuration utilities for the pageflow engine and service."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator


def _env_flag(name: str, default: bool) -> bool:
    """Return a boolean flag derived from environment variables."""

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Return a float from the environment, ignoring unparsable values."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent

PAGINATION_TRACE: bool = _env_flag("PAGINATION_TRACE", False)
PAGINATION_TRACE_DIR: str = os.getenv("PAGINATION_TRACE_DIR", "pageflow/logs/passes")
PAGEFLOW_LOG_LEVEL: str = os.getenv("PAGEFLOW_LOG_LEVEL", "INFO")


def _load_environment() -> None:
    """Load environment variables from a ``.env`` file if present."""

    explicit_path = os.getenv("PAGEFLOW_ENV_FILE")
    candidates = []

    if explicit_path:
        candidates.append(Path(explicit_path))

    candidates.append(PROJECT_ROOT / ".env")

    for candidate in candidates:
        try_path = candidate.expanduser()
        if try_path.exists():
            load_dotenv(try_path, override=False)


_load_environment()


def _cors_origin_regex_default() -> str | None:
    """Return the default CORS origin regex allowing local network hosts."""

    raw = os.getenv(
        "CORS_ALLOW_ORIGIN_REGEX",
        r"http://(?:localhost|127\.0\.0\.1|0\.0\.0\.0|(?:\d{1,3}\.){3}\d{1,3})(?::\d{1,5})?",
    )
    raw = raw.strip()
    return raw or None


def _split_csv(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Settings(BaseModel):
    """Engine and service configuration loaded from environment variables."""

    page_width: float = Field(default_factory=lambda: _env_float("PAGE_WIDTH", 816.0))
    page_height: float = Field(
        default_factory=lambda: _env_float("PAGE_HEIGHT", 1056.0)
    )
    page_gap: float = Field(default_factory=lambda: _env_float("PAGE_GAP", 32.0))
    header_height: float = Field(
        default_factory=lambda: _env_float("HEADER_HEIGHT", 72.0)
    )
    footer_height: float = Field(
        default_factory=lambda: _env_float("FOOTER_HEIGHT", 60.0)
    )
    line_height_buffer: float = Field(
        default_factory=lambda: _env_float("LINE_HEIGHT_BUFFER", 24.0)
    )
    break_epsilon: float = Field(
        default_factory=lambda: _env_float("BREAK_EPSILON", 1.0)
    )
    coords_fallback_radius: int = Field(
        default_factory=lambda: int(os.getenv("COORDS_FALLBACK_RADIUS", "8"))
    )
    frame_interval_s: float = Field(
        default_factory=lambda: _env_float("FRAME_INTERVAL_S", 1.0 / 60.0)
    )
    max_settle_passes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_SETTLE_PASSES", "4"))
    )
    pagination_trace: bool = Field(
        default_factory=lambda: _env_flag("PAGINATION_TRACE", PAGINATION_TRACE)
    )
    pagination_trace_dir: Path = Field(
        default_factory=lambda: Path(
            os.getenv("PAGINATION_TRACE_DIR", PAGINATION_TRACE_DIR)
        )
    )
    cors_allow_origins: Tuple[str, ...] = Field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ALLOW_ORIGINS"))
    )
    cors_allow_origin_regex: str | None = Field(default_factory=_cors_origin_regex_default)
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))

    @field_validator(
        "page_width",
        "page_height",
        "page_gap",
        "header_height",
        "footer_height",
        "line_height_buffer",
        mode="after",
    )
    @classmethod
    def _clamp_geometry(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("break_epsilon", mode="after")
    @classmethod
    def _clamp_epsilon(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("coords_fallback_radius", mode="after")
    @classmethod
    def _clamp_radius(cls, value: int) -> int:
        return max(0, value)

    @field_validator("frame_interval_s", mode="after")
    @classmethod
    def _clamp_frame_interval(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("max_settle_passes", mode="after")
    @classmethod
    def _clamp_passes(cls, value: int) -> int:
        return max(1, value)

    @model_validator(mode="after")
    def _require_usable_page(self) -> "Settings":
        usable = (
            self.page_height
            - self.header_height
            - self.footer_height
            - self.line_height_buffer
        )
        if usable <= 0:
            raise ValueError(
                "page height must exceed header, footer and line buffer combined"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached settings so that subsequent calls reload from the environment."""

    get_settings.cache_clear()
