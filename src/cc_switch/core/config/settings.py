"""Engine settings: where the config lives and how many backups to keep.

Resolution order (later wins):
    1. Built-in defaults (~/.cc-switch, config.json, 10 backups).
    2. CC_SWITCH_CONFIG_DIR environment variable for the directory.
    3. Optional settings.yaml inside that directory.
    4. Keyword overrides passed to load_settings().

Example settings.yaml::

    max_backups: 20
    config_file_name: config.json
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cc_switch.core.backup.store import BACKUP_DIR_NAME, DEFAULT_MAX_BACKUPS
from cc_switch.core.config.constants import (
    CONFIG_DIR_ENV,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_DIR,
    MAX_SETTINGS_SIZE,
    SETTINGS_FILE_NAME,
)
from cc_switch.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    """Settings of the persistence engine itself (not the managed document).

    Attributes:
        config_dir: Directory holding the config file and its backups.
        config_file_name: File name of the live config inside config_dir.
        max_backups: Number of rotating backups retained.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    config_file_name: str = Field(default=CONFIG_FILE_NAME, min_length=1)
    max_backups: int = Field(default=DEFAULT_MAX_BACKUPS, ge=1)

    @field_validator("config_dir", mode="after")
    @classmethod
    def expand_config_dir(cls, value: Path) -> Path:
        """Expand ~ to the user home directory."""
        return value.expanduser()

    @field_validator("config_file_name")
    @classmethod
    def reject_path_separators(cls, value: str) -> str:
        """Config file name must be a bare name inside config_dir."""
        if Path(value).name != value:
            raise ValueError(f"config_file_name must be a file name, got {value!r}")
        return value

    @property
    def config_path(self) -> Path:
        """Full path of the live config file."""
        return self.config_dir / self.config_file_name

    @property
    def backup_dir(self) -> Path:
        """Directory holding rotating backups."""
        return self.config_dir / BACKUP_DIR_NAME


def resolve_config_dir() -> Path:
    """Return the config directory, honouring CC_SWITCH_CONFIG_DIR."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        logger.debug("Using config dir from env: %s", override)
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load and parse a YAML settings file with safety checks.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed YAML mapping (empty dict for an empty file).

    Raises:
        ConfigError: If file cannot be read, is too large, is a directory,
            is not a mapping, or YAML is invalid.

    """
    try:
        # Read with size limit to avoid TOCTOU vulnerability
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_SETTINGS_SIZE + 1)

        if len(content) > MAX_SETTINGS_SIZE:
            raise ConfigError(f"Settings file {path} exceeds 1MB limit.")

        parsed = yaml.safe_load(content)

        if parsed is None:
            return {}

        if not isinstance(parsed, dict):
            raise ConfigError(
                f"Settings file {path} must contain a YAML mapping, got {type(parsed).__name__}."
            )

        return parsed
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except IsADirectoryError as e:
        raise ConfigError(f"{path} is a directory, not a settings file.") from e
    except PermissionError as e:
        raise ConfigError(f"Permission denied reading {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e


def load_settings(config_dir: Path | None = None, **overrides: Any) -> EngineSettings:
    """Resolve engine settings.

    Args:
        config_dir: Explicit config directory. Defaults to resolve_config_dir().
        **overrides: Field values that win over the settings file.

    Returns:
        Validated EngineSettings.

    Raises:
        ConfigError: If settings.yaml is unreadable or any value is invalid.

    """
    directory = config_dir.expanduser() if config_dir is not None else resolve_config_dir()

    data: dict[str, Any] = {}
    settings_file = directory / SETTINGS_FILE_NAME
    if settings_file.exists():
        data = _load_yaml_file(settings_file)
        logger.debug("Loaded engine settings from %s", settings_file)

    # The directory is fixed by the caller/env, a settings file cannot move itself
    data["config_dir"] = directory
    data.update(overrides)

    try:
        return EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid engine settings: {e}") from e
