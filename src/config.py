"""Unified configuration loaded from .mediahub.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, Field

from mediahub.media.models import Dimension

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mediahub.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "mediahub" / "config.toml"

T = TypeVar("T")


def resolve_option(override: T | None, default: T) -> T:
    """Return ``override`` when it is set, otherwise ``default``.

    Falsy overrides (``None``, ``""``, empty collections) fall back too,
    so an empty ``--path`` means "use the configured path".
    """
    return override if override else default


def _default_dimensions() -> dict[str, Dimension]:
    return {
        "S": Dimension(width=200, height=200),
        "M": Dimension(width=400, height=400),
        "L": Dimension(width=800, height=800),
    }


class StorageConfig(BaseModel):
    """[storage] section."""

    root: str = "./media"
    default_disk: str = "local"


class ThumbnailConfig(BaseModel):
    """[thumbnail] section — defaults for thumbnail creation."""

    type: str = "fit"
    path: str = "thumbnails"
    disk: str = "local"
    dimensions: dict[str, Dimension] = Field(default_factory=_default_dimensions)


class MediaHubConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    thumbnail: ThumbnailConfig = Field(default_factory=ThumbnailConfig)


def load_config(path: str | Path | None = None) -> MediaHubConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .mediahub.toml in CWD
    3. ~/.config/mediahub/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged MediaHubConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = MediaHubConfig.model_validate(data) if data else MediaHubConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: MediaHubConfig, **cli_kwargs: object) -> MediaHubConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "storage_root": ("storage", "root"),
        "thumbnail_type": ("thumbnail", "type"),
        "thumbnail_path": ("thumbnail", "path"),
        "thumbnail_disk": ("thumbnail", "disk"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return MediaHubConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: MediaHubConfig) -> MediaHubConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "MEDIAHUB_STORAGE_ROOT": ("storage", "root"),
        "MEDIAHUB_STORAGE_DISK": ("storage", "default_disk"),
        "MEDIAHUB_THUMBNAIL_TYPE": ("thumbnail", "type"),
        "MEDIAHUB_THUMBNAIL_PATH": ("thumbnail", "path"),
        "MEDIAHUB_THUMBNAIL_DISK": ("thumbnail", "disk"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return MediaHubConfig.model_validate(data)
