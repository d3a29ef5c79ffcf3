"""Client application identifiers and their provider registries."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AppType(StrEnum):
    """Client applications with a slot in the shared config."""

    CLAUDE = "claude"
    CODEX = "codex"

    @classmethod
    def parse(cls, name: str) -> "AppType":
        """Map a free-form name to an AppType.

        Matching is case-insensitive; anything other than "codex" maps to
        CLAUDE, the historical default client.
        """
        if name.strip().lower() == cls.CODEX.value:
            return cls.CODEX
        return cls.CLAUDE


class ProviderRegistry(BaseModel):
    """Provider definitions of one client application.

    Provider entries are opaque: they are round-tripped exactly as read and
    never interpreted by the engine. Unknown top-level keys are kept too.

    Attributes:
        providers: Provider id to provider definition (loose JSON).
        current: Id of the selected provider, empty when none is selected.

    """

    model_config = ConfigDict(extra="allow")

    providers: dict[str, Any] = Field(default_factory=dict)
    current: str = ""
