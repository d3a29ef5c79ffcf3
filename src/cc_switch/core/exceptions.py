"""Custom exception hierarchy for cc-switch.

All exceptions raised by the configuration engine derive from CcSwitchError,
so host applications can catch a single base type. File-level failures carry
the operation that failed and the path involved.
"""

from pathlib import Path


class CcSwitchError(Exception):
    """Base exception for all cc-switch errors."""


class ConfigError(CcSwitchError):
    """Configuration loading, validation or persistence failed."""


class ConfigFileError(ConfigError):
    """A configuration file operation failed.

    Attributes:
        operation: Short description of what was being done (e.g. "read config").
        path: File the operation was applied to, if known.

    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        self.operation = operation
        self.path = Path(path) if path is not None else None
        parts = []
        if operation:
            parts.append(f"{operation} failed")
        if self.path is not None:
            parts.append(f"({self.path})")
        prefix = " ".join(parts)
        super().__init__(f"{prefix}: {message}" if prefix else message)


class ConfigNotFoundError(ConfigFileError):
    """An expected config or backup file does not exist."""


class ConfigIOError(ConfigFileError):
    """Reading, writing, copying or renaming a file failed at the OS level."""


class BackupCleanupError(ConfigIOError):
    """One or more old backups could not be deleted during retention cleanup.

    Attributes:
        failed_paths: Files that could not be removed.

    """

    def __init__(self, message: str, failed_paths: list[Path]) -> None:
        self.failed_paths = failed_paths
        super().__init__(message, operation="cleanup backups")


class ConfigFormatError(ConfigFileError):
    """File content is not well-formed JSON."""


class SchemaUnrecognizedError(ConfigFileError):
    """Content parses as JSON but matches neither the v1 nor the v2 layout."""


class NoBackupsAvailableError(ConfigError):
    """Recovery was requested but there is no usable backup."""
