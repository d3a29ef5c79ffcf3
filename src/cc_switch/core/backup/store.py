"""Timestamped snapshots of a single config file.

BackupStore knows nothing about what the file means. It copies the live file
into a sibling ``backups/`` directory, records a JSON metadata sidecar for
every copy, keeps only the newest ``max_backups`` copies, and can put any
copy back in place of the live file.

Layout next to the live file (``config.json``)::

    backups/config_backup_1760875200.json        payload
    backups/config_backup_1760875200.meta.json   BackupMetadata sidecar
    config.emergency_backup.json                 pre-restore snapshot

All names derive from the live file's stem, so several config files can
share one directory without mixing their backups.
"""

import hashlib
import logging
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from cc_switch.core.exceptions import (
    BackupCleanupError,
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    NoBackupsAvailableError,
)
from cc_switch.core.io import epoch_seconds, read_json

logger = logging.getLogger(__name__)

# Default number of backups kept by retention cleanup
DEFAULT_MAX_BACKUPS = 10

BACKUP_DIR_NAME = "backups"
BACKUP_INFIX = "_backup_"
META_SUFFIX = ".meta.json"
EMERGENCY_SUFFIX = ".emergency_backup.json"

_CHECKSUM_CHUNK = 64 * 1024


class BackupMetadata(BaseModel):
    """Metadata sidecar describing one stored backup.

    Attributes:
        timestamp: Seconds since epoch; unique per backup directory and used
            as the sort key (newest first).
        file_size: Size in bytes of the payload at backup time.
        checksum: Content digest for change detection. Not a security feature.
        backup_path: Location of the payload file.

    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    file_size: int
    checksum: str
    backup_path: str

    @property
    def path(self) -> Path:
        """Payload location as a Path."""
        return Path(self.backup_path)

    @property
    def meta_path(self) -> Path:
        """Sidecar location derived from the payload path."""
        return meta_path_for(self.path)


def meta_path_for(backup_path: Path) -> Path:
    """Return the sidecar path for a payload (``x.json`` -> ``x.meta.json``)."""
    return backup_path.with_suffix(META_SUFFIX)


def compute_checksum(path: Path) -> str:
    """Compute a fast 64-bit content digest of a file.

    Args:
        path: File to hash.

    Returns:
        16 lowercase hex characters.

    Raises:
        OSError: If the file cannot be read.

    """
    digest = hashlib.blake2b(digest_size=8)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHECKSUM_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


class BackupStore:
    """Create, list, prune and restore backups of one target file.

    Thread Safety:
        BackupStore is NOT thread-safe and assumes a single writer process.

    Attributes:
        config_path: Live file being protected.
        backup_dir: Directory holding payloads and sidecars.
        max_backups: Number of backups retained by cleanup().

    """

    def __init__(self, config_path: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> None:
        if max_backups < 1:
            raise ValueError(f"max_backups must be >= 1, got {max_backups}")
        self.config_path = config_path
        self.backup_dir = config_path.parent / BACKUP_DIR_NAME
        self.max_backups = max_backups

    @property
    def emergency_path(self) -> Path:
        """Snapshot of the live file taken right before a restore."""
        return self.config_path.with_name(self.config_path.stem + EMERGENCY_SUFFIX)

    @property
    def backup_prefix(self) -> str:
        """File name prefix of this file's payloads and sidecars."""
        return f"{self.config_path.stem}{BACKUP_INFIX}"

    def _payload_path(self, timestamp: int) -> Path:
        return self.backup_dir / f"{self.backup_prefix}{timestamp}.json"

    def _timestamp_of(self, path: Path) -> int | None:
        """Parse the timestamp out of a payload or sidecar name of this store."""
        name = path.name
        if not name.startswith(self.backup_prefix):
            return None
        stamp = name[len(self.backup_prefix) :].removesuffix(META_SUFFIX).removesuffix(".json")
        return int(stamp) if stamp.isdigit() else None

    def _next_timestamp(self) -> int:
        """Return a timestamp that sorts after every existing backup.

        Normally the current second. When that second (or a later one, after
        rapid saves or a clock step back) is taken, the newest used second + 1.
        """
        timestamp = epoch_seconds()
        if not self.backup_dir.is_dir():
            return timestamp
        for path in self.backup_dir.glob(f"{self.backup_prefix}*.json"):
            stamp = self._timestamp_of(path)
            if stamp is not None and stamp >= timestamp:
                timestamp = stamp + 1
        return timestamp

    def create_backup(self) -> BackupMetadata:
        """Copy the live file into the backup directory.

        Writes the payload and its metadata sidecar, then runs retention
        cleanup, which may delete older backups.

        Returns:
            Metadata of the new backup.

        Raises:
            ConfigNotFoundError: If the live file does not exist.
            ConfigIOError: If copying, hashing or writing the sidecar fails,
                or if cleanup could not delete an old backup.

        """
        if not self.config_path.exists():
            raise ConfigNotFoundError(
                "config file does not exist", operation="create backup", path=self.config_path
            )

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOError(
                str(e), operation="create backup directory", path=self.backup_dir
            ) from e

        timestamp = self._next_timestamp()
        backup_path = self._payload_path(timestamp)

        try:
            shutil.copy2(self.config_path, backup_path)
            file_size = backup_path.stat().st_size
            checksum = compute_checksum(backup_path)
        except OSError as e:
            raise ConfigIOError(str(e), operation="create backup", path=backup_path) from e

        metadata = BackupMetadata(
            timestamp=timestamp,
            file_size=file_size,
            checksum=checksum,
            backup_path=str(backup_path),
        )

        meta_path = meta_path_for(backup_path)
        try:
            meta_path.write_text(metadata.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(str(e), operation="write backup metadata", path=meta_path) from e

        logger.info("Created config backup: %s", backup_path)

        self.cleanup()
        return metadata

    def list_backups(self) -> list[BackupMetadata]:
        """List backups, newest first.

        Only this file's ``<stem>_backup_<ts>.meta.json`` sidecars are read.
        Sidecars that cannot be read or parsed are skipped, so a single
        corrupt entry never fails the listing.

        Returns:
            Metadata sorted by timestamp descending; empty if the backup
            directory does not exist.

        """
        if not self.backup_dir.is_dir():
            return []

        backups: list[BackupMetadata] = []
        for meta_path in self.backup_dir.glob(f"{self.backup_prefix}*{META_SUFFIX}"):
            if self._timestamp_of(meta_path) is None:
                continue
            try:
                backups.append(BackupMetadata.model_validate(read_json(meta_path)))
            except (ConfigError, ValidationError) as e:
                logger.debug("Skipping unreadable backup metadata %s: %s", meta_path, e)
                continue

        backups.sort(key=lambda b: b.timestamp, reverse=True)
        return backups

    def cleanup(self) -> list[BackupMetadata]:
        """Delete backups beyond the newest max_backups.

        Each surplus backup is handled independently: payload first, then
        sidecar. A failure on one entry does not stop the pass.

        Returns:
            Metadata of the backups that were removed.

        Raises:
            BackupCleanupError: After the pass, if any file could not be deleted.

        """
        surplus = self.list_backups()[self.max_backups :]
        removed: list[BackupMetadata] = []
        failed: list[Path] = []

        for backup in surplus:
            entry_ok = True
            for path in (backup.path, backup.meta_path):
                try:
                    path.unlink(missing_ok=True)
                except OSError as e:
                    logger.warning("Failed to delete old backup file %s: %s", path, e)
                    failed.append(path)
                    entry_ok = False
            if entry_ok:
                removed.append(backup)
                logger.info("Removed old backup: %s", backup.path)

        if failed:
            raise BackupCleanupError(
                f"could not delete {len(failed)} old backup file(s)",
                failed_paths=failed,
            )
        return removed

    def restore_from_backup(self, backup_path: Path | str) -> None:
        """Copy a backup payload over the live file.

        If the live file exists it is first copied to emergency_path. The
        restore itself is a plain overwrite, not an atomic rename.

        Args:
            backup_path: Payload to restore.

        Raises:
            ConfigNotFoundError: If the payload does not exist.
            ConfigIOError: If the emergency copy or the restore copy fails.

        """
        backup_path = Path(backup_path)
        if not backup_path.exists():
            raise ConfigNotFoundError(
                "backup file does not exist", operation="restore backup", path=backup_path
            )

        if self.config_path.exists():
            try:
                shutil.copy2(self.config_path, self.emergency_path)
            except OSError as e:
                raise ConfigIOError(
                    str(e), operation="create emergency backup", path=self.emergency_path
                ) from e
            logger.info("Created emergency backup: %s", self.emergency_path)

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(backup_path, self.config_path)
        except OSError as e:
            raise ConfigIOError(str(e), operation="restore backup", path=backup_path) from e

        logger.info("Restored config from backup: %s", backup_path)

    def restore_from_latest(self) -> BackupMetadata:
        """Restore the newest backup.

        Returns:
            Metadata of the restored backup.

        Raises:
            NoBackupsAvailableError: If there are no backups.

        """
        backups = self.list_backups()
        if not backups:
            raise NoBackupsAvailableError(f"No backups available in {self.backup_dir}")

        latest = backups[0]
        self.restore_from_backup(latest.path)
        return latest

    def check(self, path: Path | None = None) -> None:
        """Strictly check that a file holds well-formed JSON.

        Only the syntax is checked, not the config schema.

        Args:
            path: File to check; defaults to the live config file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigIOError: If the file cannot be read.
            ConfigFormatError: If the content is not valid JSON.

        """
        read_json(path if path is not None else self.config_path)

    def verify(self, path: Path | None = None) -> bool:
        """Return True if the file exists and parses as JSON."""
        target = path if path is not None else self.config_path
        try:
            self.check(target)
        except ConfigNotFoundError:
            return False
        except ConfigError as e:
            logger.warning("Config integrity check failed: %s", e)
            return False
        return True
