"""MCP server registries, one fixed slot per client application."""

from typing import Any

from pydantic import BaseModel, Field


class McpConfig(BaseModel):
    """MCP servers of a single client.

    Attributes:
        servers: Server id to server definition. Definitions are loose JSON
            objects carrying UI fields such as ``enabled`` and ``source``.

    """

    servers: dict[str, Any] = Field(default_factory=dict)


class McpRoot(BaseModel):
    """Exactly two MCP slots, one for claude and one for codex."""

    claude: McpConfig = Field(default_factory=McpConfig)
    codex: McpConfig = Field(default_factory=McpConfig)
