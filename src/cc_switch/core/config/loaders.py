"""Loading, migrating and saving the shared config document.

ConfigStore is the single handle through which the host application reads
and writes the config. It is created once per process and passed to every
consumer; mutations of the returned MultiAppConfig are only persisted by an
explicit save().

Load state machine::

    file absent                -> defaults (not written)
    file present, not JSON     -> restore newest valid backup and continue,
                                  or defaults if there is none
    file present, v1 layout    -> migrate, back up raw v1 file, save
    file present, v2 layout    -> loaded
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from cc_switch.core.backup.manager import BackupManager
from cc_switch.core.backup.store import DEFAULT_MAX_BACKUPS, BackupMetadata
from cc_switch.core.config.constants import CURRENT_CONFIG_VERSION
from cc_switch.core.config.migration import backup_v1_file, migrate_v1, parse_v1
from cc_switch.core.config.models import AppType, MultiAppConfig, ProviderRegistry
from cc_switch.core.config.settings import EngineSettings, load_settings
from cc_switch.core.exceptions import ConfigError, SchemaUnrecognizedError
from cc_switch.core.io import read_json

logger = logging.getLogger(__name__)


class ConfigStore:
    """Owns the live config file and its backups.

    Thread Safety:
        ConfigStore is NOT thread-safe. Hosts running concurrent command
        handlers must guard it with their own lock.

    Attributes:
        config_path: Live config file.
        backup_manager: Safe-save and recovery manager for config_path.

    """

    def __init__(self, config_path: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> None:
        self.config_path = config_path
        self.backup_manager = BackupManager(config_path, max_backups=max_backups)

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> "ConfigStore":
        """Create a store from engine settings (resolved from env/files if None)."""
        if settings is None:
            settings = load_settings()
        return cls(settings.config_path, max_backups=settings.max_backups)

    def load(self) -> MultiAppConfig:
        """Load the config, recovering and migrating as needed.

        Returns:
            Config with both canonical apps present.

        Raises:
            ConfigIOError: If the file exists but cannot be read.
            SchemaUnrecognizedError: If the file is valid JSON but neither a
                v1 nor a v2 document.
            ConfigError: If migration or a version bump cannot be saved.

        """
        if not self.config_path.exists():
            logger.info("Config file %s not found, using defaults", self.config_path)
            return MultiAppConfig()

        if not self.backup_manager.verify():
            logger.warning("Config file %s is corrupted, restoring from backup", self.config_path)
            try:
                restored = self.backup_manager.recover()
            except ConfigError as e:
                logger.error("Restoring config from backup failed: %s; using defaults", e)
                return MultiAppConfig()
            logger.info("Recovered config from backup %s", restored.backup_path)

        raw = read_json(self.config_path)

        registry = parse_v1(raw)
        if registry is not None:
            return self._migrate_v1(registry)

        try:
            config = MultiAppConfig.from_document(raw)
        except ValidationError as e:
            raise SchemaUnrecognizedError(
                f"not a v1 or v2 config document: {e}",
                operation="parse config",
                path=self.config_path,
            ) from e

        for app in AppType:
            config.ensure_app(app)

        if config.version < CURRENT_CONFIG_VERSION:
            logger.warning(
                "Config %s has version %d, upgrading to %d",
                self.config_path,
                config.version,
                CURRENT_CONFIG_VERSION,
            )
            config.version = CURRENT_CONFIG_VERSION
            self.save(config)

        return config

    def _migrate_v1(self, registry: ProviderRegistry) -> MultiAppConfig:
        logger.info("Detected v1 config at %s, migrating to v2", self.config_path)
        config = migrate_v1(registry)
        backup_v1_file(self.config_path)
        self.save(config)
        return config

    def save(self, config: MultiAppConfig) -> BackupMetadata | None:
        """Persist config through the safe-save protocol.

        Returns:
            Metadata of the backup taken of the previous file, if any.

        Raises:
            ConfigFormatError: If the document cannot be serialized.
            ConfigIOError: If backing up or writing fails. The previous
                file is left untouched.

        """
        return self.backup_manager.safe_save(config.to_document())

    def list_backups(self) -> list[BackupMetadata]:
        """List backups of the config file, newest first."""
        return self.backup_manager.store.list_backups()

    def restore_from_backup(self, backup_path: Path | str) -> None:
        """Replace the live config with a backup payload."""
        self.backup_manager.store.restore_from_backup(backup_path)


def _store_for(config_path: Path | None) -> ConfigStore:
    if config_path is None:
        return ConfigStore.from_settings()
    settings = load_settings(config_path.parent, config_file_name=config_path.name)
    return ConfigStore.from_settings(settings)


def load_config(config_path: Path | None = None) -> MultiAppConfig:
    """Load the config at config_path (default location if None)."""
    return _store_for(config_path).load()


def save_config(config: MultiAppConfig, config_path: Path | None = None) -> None:
    """Save config to config_path (default location if None)."""
    _store_for(config_path).save(config)


def list_backups(config_path: Path | None = None) -> list[BackupMetadata]:
    """List backups of the config at config_path, newest first."""
    return _store_for(config_path).list_backups()


def restore_from_backup(backup_path: Path | str, config_path: Path | None = None) -> None:
    """Restore the config at config_path from backup_path."""
    _store_for(config_path).restore_from_backup(backup_path)
