"""Custom exception hierarchy for the Maps MCP gateway.

All application-specific exceptions inherit from MapsMCPError,
which carries an error code for HTTP / JSON-RPC error mapping.
"""

from __future__ import annotations


class MapsMCPError(Exception):
    """Base exception for all gateway errors."""

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code


class GatewayError(MapsMCPError):
    """Errors in the Gateway / HTTP+SSE layer."""

    def __init__(self, message: str, *, code: str = "GATEWAY_ERROR") -> None:
        super().__init__(message, code=code)


class SessionNotFoundError(GatewayError):
    """Request addressed a session id with no live stream."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Could not find session: {session_id}", code="SESSION_NOT_FOUND")
        self.session_id = session_id


class ToolNotFoundError(GatewayError):
    """Request named a tool that is not in the catalog."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", code="TOOL_NOT_FOUND")
        self.tool_name = tool_name


class SessionError(MapsMCPError):
    """Errors in session bookkeeping."""

    def __init__(self, message: str, *, code: str = "SESSION_ERROR") -> None:
        super().__init__(message, code=code)


class SessionCollisionError(SessionError):
    """A session id was registered twice. Never silently overwritten."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session already registered: {session_id}", code="SESSION_COLLISION")
        self.session_id = session_id


class ConfigurationError(MapsMCPError):
    """Startup-time invariant violations (duplicate tool names, ...)."""

    def __init__(self, message: str, *, code: str = "CONFIGURATION_ERROR") -> None:
        super().__init__(message, code=code)


class ToolError(MapsMCPError):
    """Errors during tool execution."""

    def __init__(self, message: str, *, code: str = "TOOL_ERROR") -> None:
        super().__init__(message, code=code)


class InvalidArgumentsError(ToolError):
    """Caller-supplied arguments failed the tool's own validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_ARGUMENTS")


class MissingCredentialError(ToolError):
    """No session credential was bound and no process default exists."""

    def __init__(
        self, message: str = "No Google Maps API key provided. Cannot authorize Maps API."
    ) -> None:
        super().__init__(message, code="MISSING_CREDENTIAL")


class UpstreamError(ToolError):
    """The remote API answered, but with a non-success status."""

    def __init__(self, message: str, *, status: str | None = None) -> None:
        super().__init__(message, code="UPSTREAM_ERROR")
        self.status = status


class TransportError(ToolError):
    """The outbound call itself could not complete (network error, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
