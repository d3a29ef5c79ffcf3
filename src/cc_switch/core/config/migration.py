"""Migration from the single-app (v1) layout to the multi-app (v2) layout.

A v1 file is a bare provider registry for Claude::

    {"providers": {"p1": {...}}, "current": "p1"}

Detection is structural, not version-tagged: any JSON object whose
``providers`` member is an object is treated as v1, whatever else it holds.
The loader tries this shape first and only falls back to v2 when it fails,
so an app entry literally named "providers" in a v2 document would be
misread as v1.
"""

import logging
import shutil
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cc_switch.core.config.constants import CURRENT_CONFIG_VERSION, V1_BACKUP_NAME_TEMPLATE
from cc_switch.core.config.models import AppType, McpRoot, MultiAppConfig, ProviderRegistry
from cc_switch.core.io import epoch_seconds

logger = logging.getLogger(__name__)


def parse_v1(raw: Any) -> ProviderRegistry | None:
    """Return the v1 registry held by raw, or None if raw is not v1-shaped."""
    if not isinstance(raw, dict) or not isinstance(raw.get("providers"), dict):
        return None
    try:
        return ProviderRegistry.model_validate(raw)
    except ValidationError:
        return None


def migrate_v1(registry: ProviderRegistry) -> MultiAppConfig:
    """Wrap a v1 registry as the claude app of a fresh v2 document."""
    return MultiAppConfig(
        version=CURRENT_CONFIG_VERSION,
        apps={
            AppType.CLAUDE.value: registry,
            AppType.CODEX.value: ProviderRegistry(),
        },
        mcp=McpRoot(),
        droid_manager=None,
    )


def v1_backup_path(config_path: Path, timestamp: int | None = None) -> Path:
    """Return the sidecar path the raw v1 file is copied to."""
    if timestamp is None:
        timestamp = epoch_seconds()
    return config_path.parent / V1_BACKUP_NAME_TEMPLATE.format(
        stem=config_path.stem, timestamp=timestamp
    )


def backup_v1_file(config_path: Path) -> Path | None:
    """Copy the raw v1 file aside before it is overwritten.

    Best-effort: a failure is logged and None is returned, migration goes on.
    """
    backup_path = v1_backup_path(config_path)
    try:
        shutil.copy2(config_path, backup_path)
    except OSError as e:
        logger.warning("Failed to back up v1 config %s: %s", config_path, e)
        return None

    logger.info("Backed up v1 config: %s -> %s", config_path, backup_path)
    return backup_path
