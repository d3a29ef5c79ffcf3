"""Root multi-app config document."""

from typing import Any, Self

from pydantic import BaseModel, Field, field_validator

from cc_switch.core.config.constants import CURRENT_CONFIG_VERSION
from cc_switch.core.config.models.apps import AppType, ProviderRegistry
from cc_switch.core.config.models.droid import DroidManagerConfig
from cc_switch.core.config.models.mcp import McpConfig, McpRoot

# Top-level document keys that are not app entries
RESERVED_KEYS: frozenset[str] = frozenset({"version", "mcp", "droid_manager"})


def _default_apps() -> dict[str, ProviderRegistry]:
    return {app.value: ProviderRegistry() for app in AppType}


class MultiAppConfig(BaseModel):
    """Versioned configuration shared by all client applications.

    The model is mutable: callers change it in place through the accessors
    and persist it explicitly with ConfigStore.save(). Nothing is written
    automatically.

    On disk, app entries are flattened into the top-level JSON object next
    to the reserved keys::

        {"version": 2, "claude": {...}, "codex": {...}, "mcp": {...}}

    Use from_document() / to_document() to convert between that layout and
    the model.

    Attributes:
        version: Schema version, CURRENT_CONFIG_VERSION for new documents.
        apps: App id to provider registry. Keys are free-form; "claude" and
            "codex" are always present after a successful load.
        mcp: MCP server registries, one fixed slot per client.
        droid_manager: Droid integration section, None until configured.

    """

    version: int = CURRENT_CONFIG_VERSION
    apps: dict[str, ProviderRegistry] = Field(default_factory=_default_apps)
    mcp: McpRoot = Field(default_factory=McpRoot)
    droid_manager: DroidManagerConfig | None = None

    @field_validator("apps")
    @classmethod
    def reject_reserved_app_ids(
        cls, value: dict[str, ProviderRegistry]
    ) -> dict[str, ProviderRegistry]:
        """App ids must not collide with reserved top-level document keys."""
        clashes = sorted(RESERVED_KEYS.intersection(value))
        if clashes:
            raise ValueError(f"app ids clash with reserved keys: {', '.join(clashes)}")
        return value

    @classmethod
    def from_document(cls, raw: Any) -> Self:
        """Build a config from the flattened on-disk JSON layout.

        Raises:
            pydantic.ValidationError: If raw does not match the v2 layout.

        """
        if not isinstance(raw, dict):
            # Let pydantic produce the usual "valid dictionary" error
            return cls.model_validate(raw)

        data: dict[str, Any] = {key: raw[key] for key in RESERVED_KEYS if key in raw}
        data["apps"] = {key: value for key, value in raw.items() if key not in RESERVED_KEYS}
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Return the flattened, JSON-ready on-disk representation."""
        document: dict[str, Any] = {"version": self.version}
        for app_id, registry in self.apps.items():
            document[app_id] = registry.model_dump(mode="json")
        document["mcp"] = self.mcp.model_dump(mode="json")
        if self.droid_manager is not None:
            document["droid_manager"] = self.droid_manager.model_dump(mode="json")
        return document

    def get_manager(self, app: AppType | str) -> ProviderRegistry | None:
        """Return the provider registry of an app, or None if never ensured.

        The returned object is live; mutating it mutates this config.
        """
        return self.apps.get(str(app))

    def ensure_app(self, app: AppType | str) -> ProviderRegistry:
        """Add an empty registry for app if missing and return the registry.

        Existing registries are never replaced.
        """
        key = str(app)
        if key not in self.apps:
            self.apps[key] = ProviderRegistry()
        return self.apps[key]

    def mcp_for(self, app: AppType | str) -> McpConfig:
        """Return the MCP slot of a known client (live object).

        Raises:
            ValueError: If app is not a known client.

        """
        if AppType(app) is AppType.CODEX:
            return self.mcp.codex
        return self.mcp.claude
