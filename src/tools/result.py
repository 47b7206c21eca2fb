"""Response envelope returned by every tool invocation.

Wire shape (callers depend on it field for field):
    success: {"content": [{"type": "text", "text": "<json>"}]}
    failure: {"isError": true, "content": [{"type": "text", "text": "<message>"}]}
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool | None = Field(default=None, alias="isError")

    @classmethod
    def success(cls, data: Any) -> ToolResult:
        return cls(content=[TextContent(text=json.dumps(data, indent=2, ensure_ascii=False))])

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls(
            content=[TextContent(text=message or "Unknown error occurred")],
            is_error=True,
        )

    @property
    def failed(self) -> bool:
        return bool(self.is_error)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the envelope dict (isError omitted on success)."""
        return self.model_dump(by_alias=True, exclude_none=True)
