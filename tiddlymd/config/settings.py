"""Configuration settings for tiddlymd with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from tiddlymd.tiddlers.models import ConversionOptions


class Settings(BaseSettings):
    """tiddlymd settings, read from TIDDLYMD_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="TIDDLYMD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
    log_file: Path | None = None

    # Conversion defaults (CLI flags are applied on top)
    keep_drafts: bool = False
    highlight_links: bool = False
    frontmatter: bool = False
    # Comma separated in the environment: TIDDLYMD_OUTPUT_CATEGORIES=Work,Ideas
    output_categories: Annotated[list[str], NoDecode] = []
    dated_tag: str = "Journal"
    default_category: str = "Others"

    @field_validator("output_categories", mode="before")
    @classmethod
    def split_categories(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {v!r}")
        return v.lower()

    def to_options(self) -> ConversionOptions:
        """Conversion options described by these settings"""
        return ConversionOptions(
            keep_drafts=self.keep_drafts,
            highlight_links=self.highlight_links,
            frontmatter=self.frontmatter,
            output_categories=tuple(self.output_categories),
            dated_tag=self.dated_tag,
            default_category=self.default_category,
        )


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
