from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ValidationError

from src.infra.errors import InvalidArgumentsError
from src.tools.base import BaseTool

if TYPE_CHECKING:
    from src.tools.builtins.maps_client import GoogleMapsClient
    from src.tools.context import ToolContext


def format_validation_error(tool_name: str, exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(parts)


class MapsTool(BaseTool):
    """Base for Google Maps tools: validate with args_model, then call()."""

    args_model: ClassVar[type[BaseModel]]

    def __init__(self, client: GoogleMapsClient) -> None:
        self._client = client

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> Any:
        try:
            args = self.args_model.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentsError(format_validation_error(self.name, e)) from e
        api_key = context.credential if context else None
        return await self.call(args, api_key)

    @abstractmethod
    async def call(self, args: Any, api_key: str | None) -> Any:
        """Issue the upstream request for validated args and reshape the reply."""
        ...
