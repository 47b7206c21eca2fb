from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

import structlog

from src.infra.errors import ConfigurationError
from src.tools.base import BaseTool

logger = structlog.get_logger()


class ToolCatalog:
    """Immutable name -> tool table, assembled once at startup.

    There is no register() after construction: every session reads the same
    table, so it needs no locking.
    """

    def __init__(self, tools: Iterable[BaseTool]) -> None:
        table: dict[str, BaseTool] = {}
        for tool in tools:
            if tool.name in table:
                raise ConfigurationError(f"Tool already registered: {tool.name}")
            table[tool.name] = tool
            logger.info("tool_registered", tool_name=tool.name)
        self._order: tuple[BaseTool, ...] = tuple(table.values())
        self._tools = MappingProxyType(table)

    def resolve(self, name: str) -> BaseTool | None:
        """Get a tool by name. Returns None if not found."""
        return self._tools.get(name)

    def list_tools(self) -> tuple[BaseTool, ...]:
        """Tools in registration order (display order only)."""
        return self._order

    def describe(self) -> list[dict]:
        """Return catalog entries in MCP tools/list format.

        Output format:
        [{"name": ..., "description": ..., "inputSchema": ...}]
        """
        return [tool.describe() for tool in self._order]

    def names(self) -> list[str]:
        return [tool.name for tool in self._order]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._order)
