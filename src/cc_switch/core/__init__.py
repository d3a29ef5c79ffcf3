"""Core module for the cc-switch configuration engine.

This module provides:
- The versioned config document and its ConfigStore handle
- Rotating backups and the safe-save protocol
- Custom exception hierarchy with CcSwitchError as base

NOTE: Config and backup names are loaded lazily so that importing the
exceptions (e.g. from a thin UI layer) does not pull in pydantic/yaml.
"""

from typing import TYPE_CHECKING

# Light imports - exceptions are always fast
from cc_switch.core.exceptions import (
    BackupCleanupError,
    CcSwitchError,
    ConfigError,
    ConfigFileError,
    ConfigFormatError,
    ConfigIOError,
    ConfigNotFoundError,
    NoBackupsAvailableError,
    SchemaUnrecognizedError,
)

# Type hints only - no runtime import for heavy modules
if TYPE_CHECKING:
    from cc_switch.core.backup import (
        BackupManager as BackupManager,
        BackupMetadata as BackupMetadata,
        BackupStore as BackupStore,
    )
    from cc_switch.core.config import (
        AppType as AppType,
        ConfigStore as ConfigStore,
        EngineSettings as EngineSettings,
        MultiAppConfig as MultiAppConfig,
        ProviderRegistry as ProviderRegistry,
        list_backups as list_backups,
        load_config as load_config,
        load_settings as load_settings,
        restore_from_backup as restore_from_backup,
        save_config as save_config,
    )

__all__ = [
    # Exceptions
    "BackupCleanupError",
    "CcSwitchError",
    "ConfigError",
    "ConfigFileError",
    "ConfigFormatError",
    "ConfigIOError",
    "ConfigNotFoundError",
    "NoBackupsAvailableError",
    "SchemaUnrecognizedError",
    # Backups
    "BackupManager",
    "BackupMetadata",
    "BackupStore",
    # Config
    "AppType",
    "ConfigStore",
    "EngineSettings",
    "MultiAppConfig",
    "ProviderRegistry",
    "list_backups",
    "load_config",
    "load_settings",
    "restore_from_backup",
    "save_config",
]

# Lazy loading mapping
_lazy_imports = {
    "BackupManager": ".backup",
    "BackupMetadata": ".backup",
    "BackupStore": ".backup",
    "AppType": ".config",
    "ConfigStore": ".config",
    "EngineSettings": ".config",
    "MultiAppConfig": ".config",
    "ProviderRegistry": ".config",
    "list_backups": ".config",
    "load_config": ".config",
    "load_settings": ".config",
    "restore_from_backup": ".config",
    "save_config": ".config",
}


def __getattr__(name: str) -> object:
    """Lazy load attributes on first access."""
    if name in _lazy_imports:
        import importlib

        module = importlib.import_module(_lazy_imports[name], __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
