"""Configuration models for the web scraper tool."""

from __future__ import annotations

import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import EngineKind


class BrowserConfig(BaseModel):
    """Settings for launching browser sessions."""

    default_engine: EngineKind = EngineKind.CHROMIUM
    headless: bool = True
    launch_args: list[str] = Field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
        ],
        description="Extra command line switches, only passed to chromium.",
    )
    viewport_width: int = 1280
    viewport_height: int = 720
    navigation_wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = (
        "networkidle"
    )
    navigation_timeout_ms: float = Field(default=30000, gt=0)


class TimeoutConfig(BaseModel):
    """Default deadlines (milliseconds) applied when a request omits one."""

    action_ms: float = Field(default=5000, gt=0)
    wait_for_element_ms: float = Field(default=10000, gt=0)
    scrape_wait_for_ms: float = Field(default=10000, gt=0)


class ArtifactConfig(BaseModel):
    """Where screenshots are written."""

    screenshot_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))


class ServiceConfig(BaseModel):
    """Settings for the HTTP tool service."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8765)


class ToolConfig(BaseSettings):
    """Top-level configuration for the scraping tools."""

    model_config = SettingsConfigDict(
        env_prefix="WEB_SCRAPER_TOOL_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> ToolConfig:
    """Load configuration from an optional YAML file and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = ToolConfig(**data, **settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return ToolConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
