"""MessageRouter: received → validated → dispatched → completed (or failed).

Each tools/call becomes its own asyncio task so a slow upstream call never
holds up other sessions. Results go back through SessionRegistry.send();
a session that disappeared mid-call simply loses its result.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog
from pydantic import ValidationError

from src.gateway.protocol import RequestId, ToolCallParams, rpc_result, sse_frame
from src.infra.errors import GatewayError, SessionNotFoundError, ToolNotFoundError
from src.session.credentials import CredentialStore
from src.session.registry import SessionRegistry
from src.tools.base import BaseTool
from src.tools.catalog import ToolCatalog
from src.tools.context import ToolContext
from src.tools.result import ToolResult

logger = structlog.get_logger()


class RouteState(StrEnum):
    received = "received"
    validated = "validated"
    dispatched = "dispatched"
    completed = "completed"
    failed = "failed"


@dataclass(frozen=True)
class RouteOutcome:
    """Terminal state of one routed request."""

    state: RouteState
    error_code: str | None = None
    delivered: bool = False
    result: ToolResult | None = None


class MessageRouter:
    def __init__(
        self,
        sessions: SessionRegistry,
        credentials: CredentialStore,
        catalog: ToolCatalog,
        *,
        default_credential: str | None = None,
        tool_timeout_s: float | None = None,
    ) -> None:
        self._sessions = sessions
        self._credentials = credentials
        self._catalog = catalog
        self._default_credential = default_credential or None
        self._tool_timeout_s = tool_timeout_s
        self._tasks: set[asyncio.Task[RouteOutcome]] = set()

    def validate(self, session_id: str, tool_name: str) -> BaseTool:
        """Resolve session and tool. Raises SessionNotFoundError / ToolNotFoundError."""
        if not self._sessions.is_open(session_id):
            raise SessionNotFoundError(session_id)
        tool = self._catalog.resolve(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)
        return tool

    def resolve_credential(self, session_id: str | None) -> str | None:
        """Session binding first, then the process-wide default."""
        return self._credentials.get(session_id) or self._default_credential

    def submit(
        self,
        session_id: str,
        request_id: RequestId,
        tool_name: str,
        arguments: dict[str, Any],
    ) -> asyncio.Task[RouteOutcome]:
        """Schedule dispatch() as an independent task and return it."""
        task = asyncio.create_task(
            self.dispatch(session_id, request_id, tool_name, arguments),
            name=f"tool_call:{session_id}:{request_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def dispatch(
        self,
        session_id: str,
        request_id: RequestId,
        tool_name: str,
        arguments: dict[str, Any],
    ) -> RouteOutcome:
        log = logger.bind(session_id=session_id, request_id=request_id, tool_name=tool_name)
        log.debug("route_received")

        try:
            tool = self.validate(session_id, tool_name)
        except SessionNotFoundError as e:
            # Nobody left to tell; no side effects.
            log.info("route_failed", state=RouteState.validated, code=e.code)
            return RouteOutcome(state=RouteState.failed, error_code=e.code)
        except ToolNotFoundError as e:
            log.warning("route_failed", state=RouteState.validated, code=e.code)
            result = ToolResult.failure(str(e))
            delivered = self._deliver(session_id, request_id, result)
            return RouteOutcome(
                state=RouteState.failed, error_code=e.code, delivered=delivered, result=result,
            )

        context = ToolContext(
            session_id=session_id,
            credential=self.resolve_credential(session_id),
        )
        log.info("route_dispatched", has_credential=context.credential is not None)
        result = await self._invoke(tool, arguments, context)

        delivered = self._deliver(session_id, request_id, result)
        if delivered:
            log.info("route_completed", is_error=result.failed)
        else:
            log.info("route_result_dropped", reason="session_closed")
        return RouteOutcome(state=RouteState.completed, delivered=delivered, result=result)

    async def _invoke(
        self, tool: BaseTool, arguments: dict[str, Any], context: ToolContext
    ) -> ToolResult:
        if self._tool_timeout_s is None:
            return await tool.invoke(arguments, context)
        try:
            return await asyncio.wait_for(
                tool.invoke(arguments, context), timeout=self._tool_timeout_s,
            )
        except TimeoutError:
            logger.warning(
                "tool_timeout",
                tool_name=tool.name,
                session_id=context.session_id,
                timeout_s=self._tool_timeout_s,
            )
            return ToolResult.failure(
                f"{tool.name} timed out after {self._tool_timeout_s:g} seconds"
            )

    def _deliver(self, session_id: str, request_id: RequestId, result: ToolResult) -> bool:
        frame = sse_frame("message", rpc_result(request_id, result.to_wire()))
        return self._sessions.send(session_id, frame)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def aclose(self) -> None:
        """Cancel in-flight dispatches (server shutdown)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("router_closed", cancelled=len(tasks))


def require_tool_call(params: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Extract (name, arguments) from tools/call params. Raises GatewayError."""
    try:
        parsed = ToolCallParams.model_validate(params)
    except ValidationError as e:
        raise GatewayError(str(e), code="INVALID_PARAMS") from e
    return parsed.name, parsed.arguments
