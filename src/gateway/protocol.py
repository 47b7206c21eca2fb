from __future__ import annotations

import json
import re
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from src.infra.errors import GatewayError

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

# JSON-RPC 2.0 error codes sent on the stream
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

RequestId = str | int

_SSE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class RPCMessage(BaseModel):
    """Inbound JSON-RPC message. A missing id marks a notification."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None = None
    method: str
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.id is None


class ToolCallParams(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class RPCResult(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId
    result: dict[str, Any]


class RPCErrorData(BaseModel):
    code: int
    message: str


class RPCError(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None
    error: RPCErrorData


def parse_rpc_message(raw: str | bytes) -> RPCMessage:
    """Parse a raw JSON body into an RPCMessage.

    Raises GatewayError(code="PARSE_ERROR") on invalid JSON or schema mismatch.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise GatewayError(f"Invalid JSON: {e}", code="PARSE_ERROR") from e
    try:
        return RPCMessage.model_validate(data)
    except ValidationError as e:
        raise GatewayError(f"Invalid JSON-RPC message: {e}", code="PARSE_ERROR") from e


def rpc_result(request_id: RequestId, result: dict[str, Any]) -> str:
    return RPCResult(id=request_id, result=result).model_dump_json()


def rpc_error(request_id: RequestId | None, code: int, message: str) -> str:
    error = RPCError(id=request_id, error=RPCErrorData(code=code, message=message))
    return error.model_dump_json()


def sse_frame(event: str, data: str) -> str:
    """Encode one Server-Sent Events frame. Multi-line data becomes several data: lines."""
    # Only CR, LF and CRLF end an SSE line (not U+2028, U+2029 or U+0085).
    lines = "".join(f"data: {line}\n" for line in _SSE_LINE_BREAK.split(data))
    return f"event: {event}\n{lines}\n"


SSE_KEEPALIVE = ": ping\n\n"
