"""Shared constants for configuration modules.

This module provides constants used across config submodules to avoid
duplication and circular import issues.
"""

from pathlib import Path

# Schema version written by this release
CURRENT_CONFIG_VERSION: int = 2

# Default locations
DEFAULT_CONFIG_DIR: Path = Path.home() / ".cc-switch"
CONFIG_FILE_NAME: str = "config.json"
SETTINGS_FILE_NAME: str = "settings.yaml"

# Environment variable overriding DEFAULT_CONFIG_DIR
CONFIG_DIR_ENV: str = "CC_SWITCH_CONFIG_DIR"

MAX_SETTINGS_SIZE: int = 1_048_576  # 1MB - protection against YAML bombs

# Raw v1 file is copied here (next to the live file, named after its stem)
V1_BACKUP_NAME_TEMPLATE: str = "{stem}.v1.backup.{timestamp}.json"
