"""Config document models, migration and persistence for cc-switch.

Usage:
    from cc_switch.core.config import AppType, ConfigStore

    store = ConfigStore.from_settings()  # ~/.cc-switch/config.json
    config = store.load()                # recovers / migrates as needed

    config.ensure_app(AppType.CODEX)
    config.mcp_for(AppType.CLAUDE).servers["fs"] = {"enabled": True}
    store.save(config)                   # explicit, nothing auto-saves
"""

# Constants
from cc_switch.core.config.constants import (
    CONFIG_DIR_ENV,
    CONFIG_FILE_NAME,
    CURRENT_CONFIG_VERSION,
    DEFAULT_CONFIG_DIR,
    SETTINGS_FILE_NAME,
)
from cc_switch.core.config.loaders import (
    ConfigStore,
    list_backups,
    load_config,
    restore_from_backup,
    save_config,
)
from cc_switch.core.config.migration import backup_v1_file, migrate_v1, parse_v1, v1_backup_path
from cc_switch.core.config.models import (
    RESERVED_KEYS,
    AppType,
    DroidManagerConfig,
    DroidProvider,
    McpConfig,
    McpRoot,
    MultiAppConfig,
    ProviderRegistry,
)
from cc_switch.core.config.settings import EngineSettings, load_settings, resolve_config_dir

# Re-export ConfigError for convenience (it's from exceptions, not config)
from cc_switch.core.exceptions import ConfigError

__all__ = [
    # Constants
    "CONFIG_DIR_ENV",
    "CONFIG_FILE_NAME",
    "CURRENT_CONFIG_VERSION",
    "DEFAULT_CONFIG_DIR",
    "RESERVED_KEYS",
    "SETTINGS_FILE_NAME",
    # Exceptions (re-exported for convenience)
    "ConfigError",
    # Models
    "AppType",
    "DroidManagerConfig",
    "DroidProvider",
    "McpConfig",
    "McpRoot",
    "MultiAppConfig",
    "ProviderRegistry",
    # Settings
    "EngineSettings",
    "load_settings",
    "resolve_config_dir",
    # Migration
    "backup_v1_file",
    "migrate_v1",
    "parse_v1",
    "v1_backup_path",
    # Loaders
    "ConfigStore",
    "list_backups",
    "load_config",
    "restore_from_backup",
    "save_config",
]
