"""Configuration loaded from .mindmate.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mindmate.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "mindmate" / "config.toml"

DEFAULT_API_URL = "https://aiapi-production-b62b.up.railway.app/query/"
DEFAULT_STORAGE_KEY = "mindmate_entries"


class ApiConfig(BaseModel):
    """[api] section."""

    url: str = DEFAULT_API_URL
    # None leaves the HTTP client's own default in place.
    timeout: float | None = None


class StorageConfig(BaseModel):
    """[storage] section."""

    directory: str = str(Path.home() / ".config" / "mindmate")
    key: str = DEFAULT_STORAGE_KEY

    @property
    def path(self) -> Path:
        return Path(self.directory).expanduser()


class MindMateConfig(BaseModel):
    """Top-level configuration."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> MindMateConfig:
    """Load configuration from a TOML file, then overlay env vars.

    Search order:
    1. Explicit path (if provided)
    2. .mindmate.toml in CWD
    3. ~/.config/mindmate/config.toml

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged MindMateConfig.
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
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = MindMateConfig.model_validate(data) if data else MindMateConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: MindMateConfig, **cli_kwargs: object) -> MindMateConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only values that are not None override the config.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "api_url": ("api", "url"),
        "api_timeout": ("api", "timeout"),
        "data_dir": ("storage", "directory"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return MindMateConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: MindMateConfig) -> MindMateConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "MINDMATE_API_URL": ("api", "url"),
        "MINDMATE_DATA_DIR": ("storage", "directory"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    timeout_raw = os.environ.get("MINDMATE_API_TIMEOUT")
    if timeout_raw is not None:
        data["api"]["timeout"] = float(timeout_raw) if timeout_raw.strip() else None

    return MindMateConfig.model_validate(data)
