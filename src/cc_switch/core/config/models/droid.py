"""Droid integration section (provider list plus selected id)."""

from pydantic import BaseModel, ConfigDict, Field


class DroidProvider(BaseModel):
    """One provider managed for the Droid integration.

    Only the identifying fields are typed. Everything else the Droid manager
    stores (``api_keys``, ``base_url``, ``model``, ``balance``, ...) is kept
    as extra fields and written back unchanged.

    Attributes:
        id: Provider id, referenced by DroidManagerConfig.current.
        name: Display name.
        api_key: Active API key.

    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    api_key: str = ""


class DroidManagerConfig(BaseModel):
    """Providers managed for the Droid integration.

    Only present in the document once the integration has been configured.
    """

    model_config = ConfigDict(extra="allow")

    providers: list[DroidProvider] = Field(default_factory=list)
    current: str = ""
