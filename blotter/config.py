"""Pydantic v2 configuration for the blotter apps, loadable from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class FeedConfig(BaseModel):
    model_config = {"extra": "forbid"}

    rows: int = Field(default=50, ge=1, le=100_000)
    tick_interval_ms: int = Field(default=100, ge=1)
    queue_size: int = Field(default=256, ge=1)
    seed: int | None = None


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    refresh_interval_ms: int = Field(default=100, ge=16)  # Re-samples the fill highlight


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str | None = None


class BlotterConfig(BaseModel):
    model_config = {"extra": "forbid"}

    feed: FeedConfig = Field(default_factory=FeedConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> BlotterConfig:
    """Load and validate config from a YAML file. No path means defaults."""
    if path is None:
        return BlotterConfig()
    with open(Path(path)) as f:
        raw = yaml.safe_load(f) or {}
    return BlotterConfig(**raw)


def with_overrides(config: BlotterConfig, **feed_overrides: object) -> BlotterConfig:
    """Return a copy with non-None feed settings replaced (CLI flags win over the file)."""
    updates = {k: v for k, v in feed_overrides.items() if v is not None}
    if not updates:
        return config
    feed = FeedConfig(**{**config.feed.model_dump(), **updates})
    return config.model_copy(update={"feed": feed})


def configure_logging(config: LoggingConfig, *, stderr: bool = True) -> None:
    """
    Set up root logging once at startup.

    The terminal UI owns the screen, so it passes stderr=False: records go to
    the configured file or nowhere.
    """
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if config.file:
        logging.basicConfig(level=config.level, format=fmt, filename=config.file)
    elif stderr:
        logging.basicConfig(level=config.level, format=fmt)
    else:
        logging.basicConfig(level=config.level, handlers=[logging.NullHandler()])
