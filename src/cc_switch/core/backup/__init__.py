"""Backup store and safe-save manager for the cc-switch config file."""

from cc_switch.core.backup.manager import BackupManager
from cc_switch.core.backup.store import (
    DEFAULT_MAX_BACKUPS,
    BackupMetadata,
    BackupStore,
    compute_checksum,
)

__all__ = [
    "DEFAULT_MAX_BACKUPS",
    "BackupManager",
    "BackupMetadata",
    "BackupStore",
    "compute_checksum",
]
