from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ToolContext:
    """Runtime context injected into tool execution by MessageRouter.

    session_id: originating session (None for non-session callers).
    credential: already resolved by the router (session binding, then the
    process default). Tools MUST NOT look credentials up themselves.
    """

    session_id: str | None = None
    credential: str | None = field(default=None, repr=False)
