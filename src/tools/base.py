from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import structlog

from src.infra.errors import MapsMCPError
from src.tools.result import ToolResult

if TYPE_CHECKING:
    from src.tools.context import ToolContext

logger = structlog.get_logger()


class BaseTool(ABC):
    """Abstract base class for gateway tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name used as the dispatch key."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        ...

    @property
    @abstractmethod
    def parameters(self) -> dict:
        """JSON Schema describing the tool's input parameters (discovery only)."""
        ...

    @abstractmethod
    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> Any:
        """Run the tool and return a JSON-serializable payload.

        Failures are raised as MapsMCPError subclasses; invoke() turns them
        into failure envelopes.
        """
        ...

    def describe(self) -> dict:
        """Catalog entry as announced to clients."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }

    async def invoke(
        self, arguments: dict, context: ToolContext | None = None
    ) -> ToolResult:
        """Execute and wrap the outcome in a response envelope. Never raises."""
        try:
            payload = await self.execute(arguments, context)
        except MapsMCPError as e:
            logger.warning(
                "tool_failed",
                tool_name=self.name,
                code=e.code,
                error=str(e),
                session_id=context.session_id if context else None,
            )
            return ToolResult.failure(str(e))
        except Exception as e:
            logger.exception(
                "tool_crashed",
                tool_name=self.name,
                session_id=context.session_id if context else None,
            )
            return ToolResult.failure(str(e))
        return ToolResult.success(payload)
