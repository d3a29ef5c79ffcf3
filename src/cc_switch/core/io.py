"""Shared I/O utilities for atomic file operations and JSON handling.

This module provides reusable utilities for:
- Atomic file writes (temp file + validation hook + os.replace pattern)
- Reading and parsing JSON files with contextual errors
- Stable JSON serialization for persisted documents
- Epoch-second timestamps used in backup file names

The backup store, backup manager and config loaders all go through these
helpers so that every file touched by cc-switch is written the same way.
"""

import contextlib
import json
import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from cc_switch.core.exceptions import ConfigFormatError, ConfigIOError, ConfigNotFoundError

__all__ = [
    "atomic_write",
    "dump_json",
    "epoch_seconds",
    "read_json",
    "temp_path_for",
]

logger = logging.getLogger(__name__)


def epoch_seconds(dt: datetime | None = None) -> int:
    """Return whole seconds since the Unix epoch.

    Args:
        dt: Datetime to convert. If None, uses current UTC time.

    Returns:
        Integer timestamp, e.g. 1760875200.

    Examples:
        >>> epoch_seconds(datetime(2025, 1, 1, tzinfo=UTC))
        1735689600

    """
    if dt is None:
        dt = datetime.now(UTC)
    return int(dt.timestamp())


def dump_json(data: Any) -> str:
    """Serialize data as pretty, stable JSON text.

    Two-space indentation, non-ASCII characters kept as-is and a trailing
    newline, so diffs between saves stay small.

    Raises:
        ConfigFormatError: If data is not JSON serializable.

    """
    try:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        raise ConfigFormatError(str(e), operation="serialize config") from e


def read_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Args:
        path: File to read.

    Returns:
        Parsed JSON value (any JSON type, not only objects).

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigIOError: If the file cannot be read or decoded as UTF-8.
        ConfigFormatError: If the content is not well-formed JSON.

    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError("file does not exist", operation="read", path=path) from e
    except UnicodeDecodeError as e:
        raise ConfigIOError(f"not valid UTF-8: {e}", operation="read", path=path) from e
    except OSError as e:
        raise ConfigIOError(str(e), operation="read", path=path) from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigFormatError(f"invalid JSON: {e}", operation="parse", path=path) from e


def temp_path_for(path: Path) -> Path:
    """Return the sibling temp path used while atomically writing path.

    Uses PID in the name to prevent collisions when multiple processes
    write simultaneously.
    """
    return path.parent / f".{path.name}.{os.getpid()}.tmp"


def atomic_write(
    path: Path,
    content: str,
    *,
    validate: Callable[[Path], None] | None = None,
) -> None:
    """Write content to path atomically using temp file + os.replace.

    The content is written and fsynced to a sibling temp file. If validate is
    given it is called with the temp path before the rename; any exception it
    raises aborts the write. The target is only ever replaced in a single
    os.replace call, so readers see either the old or the new file.

    Args:
        path: Target file path.
        content: Content to write.
        validate: Optional check run against the written temp file.

    Raises:
        OSError: If write or rename fails.
        Exception: Whatever validate raises.

    """
    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = temp_path_for(path)
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if validate is not None:
            validate(temp_path)
        os.replace(temp_path, path)
    except Exception:
        # Cleanup temp file if it exists, ignoring errors
        with contextlib.suppress(OSError):
            if temp_path.exists():
                temp_path.unlink()
                logger.debug("Removed stale temp file %s", temp_path)
        raise
