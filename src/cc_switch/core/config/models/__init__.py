"""Pydantic models of the cc-switch config document."""

from cc_switch.core.config.models.apps import AppType, ProviderRegistry
from cc_switch.core.config.models.droid import DroidManagerConfig, DroidProvider
from cc_switch.core.config.models.main import RESERVED_KEYS, MultiAppConfig
from cc_switch.core.config.models.mcp import McpConfig, McpRoot

__all__ = [
    "AppType",
    "DroidManagerConfig",
    "DroidProvider",
    "McpConfig",
    "McpRoot",
    "MultiAppConfig",
    "ProviderRegistry",
    "RESERVED_KEYS",
]
