"""Crash-safe writes and self-healing reads for the live config file.

Safe-save protocol:
    1. If the live file exists, back it up (pre-write state).
    2. Serialize the new document to pretty JSON.
    3. Write it to a sibling temp file, never to the target directly.
    4. Re-read and re-parse the temp file.
    5. os.replace() the temp file onto the target.

A failure at any step raises and leaves the previous live file untouched.
The backup of the old state always happens before the new state is written.
"""

import logging
from pathlib import Path
from typing import Any

from cc_switch.core.backup.store import DEFAULT_MAX_BACKUPS, BackupMetadata, BackupStore
from cc_switch.core.exceptions import ConfigIOError, NoBackupsAvailableError
from cc_switch.core.io import atomic_write, dump_json, read_json

logger = logging.getLogger(__name__)


def _validate_written(path: Path) -> None:
    """Re-read a freshly written file and make sure it is valid JSON."""
    read_json(path)


class BackupManager:
    """Orchestrates BackupStore for safe saves and recovery.

    Attributes:
        store: Underlying backup store for the live file.

    """

    def __init__(self, config_path: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> None:
        self.store = BackupStore(config_path, max_backups=max_backups)

    @property
    def config_path(self) -> Path:
        """Live config file path."""
        return self.store.config_path

    def verify(self) -> bool:
        """Return True if the live file exists and is well-formed JSON."""
        return self.store.verify()

    def safe_save(self, data: Any) -> BackupMetadata | None:
        """Persist data to the live file using the safe-save protocol.

        Args:
            data: JSON-serializable document.

        Returns:
            Metadata of the backup taken of the previous state, or None when
            there was no previous file.

        Raises:
            ConfigFormatError: If data cannot be serialized or the written
                temp file does not parse back.
            ConfigIOError: If the backup, the temp write or the rename fails.

        """
        backup: BackupMetadata | None = None
        if self.config_path.exists():
            backup = self.store.create_backup()

        content = dump_json(data)

        try:
            atomic_write(self.config_path, content, validate=_validate_written)
        except OSError as e:
            raise ConfigIOError(str(e), operation="write config", path=self.config_path) from e

        logger.info("Saved config safely: %s", self.config_path)
        return backup

    def recover(self) -> BackupMetadata:
        """Restore the live file from the newest backup that is valid JSON.

        Backups whose payload is missing or malformed are skipped.

        Returns:
            Metadata of the backup that was restored.

        Raises:
            NoBackupsAvailableError: If no backup has a valid payload.
            ConfigIOError: If restoring the chosen backup fails.

        """
        for backup in self.store.list_backups():
            if not self.store.verify(backup.path):
                logger.warning("Skipping invalid backup %s", backup.path)
                continue
            self.store.restore_from_backup(backup.path)
            return backup

        raise NoBackupsAvailableError(f"No valid backup available in {self.store.backup_dir}")
