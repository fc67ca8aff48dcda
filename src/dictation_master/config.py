"""Configuration loading and management for dictation-master.

Settings live in ``config.json`` inside the data directory. The data
directory is ``$DICTATION_MASTER_HOME`` or ``~/.dictation-master``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from dictation_master.errors import ConfigurationError
from dictation_master.storage import atomic_write_json

HOME_ENV_VAR = "DICTATION_MASTER_HOME"
CONFIG_FILENAME = "config.json"


class AppConfig(BaseModel):
    """User-tunable application settings."""

    # Sessions shown per page in `session list`
    items_per_page: int = Field(default=25, ge=1)
    # Notes featured by `notes featured` once at least this many exist
    featured_notes: int = Field(default=3, ge=1)
    # Colored diff output
    color: bool = True


def get_data_root() -> Path:
    """Get the directory holding sessions, notes and proper nouns."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".dictation-master"


def get_config_path(data_root: Path | None = None) -> Path:
    return (data_root or get_data_root()) / CONFIG_FILENAME


def load_app_config(data_root: Path | None = None) -> AppConfig:
    """Load settings, falling back to defaults when no file exists.

    Args:
        data_root: Data directory; defaults to ``get_data_root()``

    Returns:
        AppConfig with the saved settings

    Raises:
        ConfigurationError: If the file is not valid JSON or has bad values
    """
    config_path = get_config_path(data_root)
    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
        return AppConfig(**data)
    except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
        raise ConfigurationError(
            f"Invalid config file: {config_path}",
            context={"error": str(e).splitlines()[0]},
        ) from e


def save_app_config(config: AppConfig, data_root: Path | None = None) -> Path:
    """Save settings to JSON file with atomic write.

    Returns:
        Path to the saved config file

    Raises:
        StorageError: If the file can't be written
    """
    config_path = get_config_path(data_root)
    atomic_write_json(config_path, config.model_dump())
    return config_path
