from __future__ import annotations

import asyncio
import json
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import FrameType
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.datastructures import State

from src.config.settings import get_settings
from src.gateway.protocol import (
    INVALID_PARAMS,
    MCP_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    SSE_KEEPALIVE,
    RPCMessage,
    parse_rpc_message,
    rpc_error,
    rpc_result,
    sse_frame,
)
from src.gateway.router import MessageRouter, require_tool_call
from src.infra.errors import GatewayError, SessionNotFoundError
from src.infra.logging import setup_logging
from src.session.credentials import CredentialStore
from src.session.registry import SessionRegistry, SessionStream
from src.tools.builtins import build_catalog
from src.tools.builtins.maps_client import GoogleMapsClient

logger = structlog.get_logger()

MESSAGES_PATH = "/messages"

_STATUS_BY_CODE = {
    "SESSION_NOT_FOUND": 404,
    "MISSING_SESSION_ID": 400,
    "PARSE_ERROR": 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: build catalog and registries on startup."""
    settings = get_settings()
    setup_logging(json_output=settings.logging.json_output, log_level=settings.logging.level)

    maps_client = GoogleMapsClient(
        base_url=settings.maps.base_url,
        timeout_s=settings.maps.request_timeout_s,
    )
    try:
        # ConfigurationError (duplicate tool names) must stop startup here.
        catalog = build_catalog(maps_client)
    except Exception:
        await maps_client.aclose()
        raise

    sessions = SessionRegistry()
    credentials = CredentialStore()
    router = MessageRouter(
        sessions,
        credentials,
        catalog,
        default_credential=settings.maps.api_key or None,
        tool_timeout_s=settings.gateway.tool_timeout_s,
    )

    app.state.settings = settings
    app.state.catalog = catalog
    app.state.sessions = sessions
    app.state.credentials = credentials
    app.state.router = router
    app.state.maps_client = maps_client
    app.state.loop = asyncio.get_running_loop()
    logger.info(
        "gateway_started",
        name=settings.gateway.name,
        version=settings.gateway.version,
        host=settings.gateway.host,
        port=settings.gateway.port,
        tools=catalog.names(),
        default_credential=bool(settings.maps.api_key),
    )

    yield

    # Cleanup
    logger.info("gateway_stopping", sessions=len(sessions), in_flight=router.pending)
    end_streams(app.state)
    await router.aclose()
    await maps_client.aclose()
    logger.info("gateway_stopped")


app = FastAPI(title="Google Maps MCP Gateway", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.warning("request_error", code=exc.code, error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(exc.code, 400),
        content={"error": {"code": exc.code, "message": str(exc)}},
    )


@app.get("/")
async def discovery(request: Request) -> dict[str, Any]:
    """Unauthenticated, side-effect-free server description."""
    state = request.app.state
    return {
        "name": state.settings.gateway.name,
        "version": state.settings.gateway.version,
        "status": "running",
        "endpoints": {
            "/": "Server information (this response)",
            "/sse": "Server-Sent Events endpoint for MCP connection",
            MESSAGES_PATH: "POST endpoint for MCP messages",
        },
        "tools": state.catalog.describe(),
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/sse")
async def sse_endpoint(request: Request) -> StreamingResponse:
    session_id = uuid.uuid4().hex
    return StreamingResponse(
        session_events(request.app.state, session_id, SessionStream()),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@app.post(MESSAGES_PATH, status_code=202)
async def post_message(
    request: Request, session_id: str | None = Query(None, alias="sessionId"),
) -> Response:
    if not session_id:
        raise GatewayError("sessionId query parameter is required", code="MISSING_SESSION_ID")
    body = await request.body()

    state = request.app.state
    # No await between the liveness check and the credential bind, so a
    # concurrent disconnect cannot leave a credential behind for a dead id.
    # A body that fails to parse binds nothing.
    if not state.sessions.is_open(session_id):
        raise SessionNotFoundError(session_id)
    message = parse_rpc_message(body)
    credential = bearer_credential(request.headers.get("authorization"))
    if credential:
        state.credentials.set(session_id, credential)

    handle_rpc_message(state, session_id, message)
    return Response("Accepted", status_code=202)


async def session_events(
    state: State, session_id: str, stream: SessionStream
) -> AsyncIterator[str]:
    """SSE body for one connection: endpoint frame, catalog frame, then messages.

    The session lives exactly as long as this generator.
    """
    state.sessions.open(session_id, stream)
    logger.info("sse_connected", session_id=session_id)
    try:
        yield sse_frame("endpoint", f"{MESSAGES_PATH}?sessionId={session_id}")
        yield sse_frame("catalog", json.dumps({"tools": state.catalog.describe()}))
        async for frame in stream.frames(keepalive_s=state.settings.gateway.sse_keepalive_s):
            yield SSE_KEEPALIVE if frame is None else frame
    finally:
        close_session(state, session_id)


def close_session(state: State, session_id: str) -> None:
    """Tear down stream then credential; both always run.

    Stream goes first: once a request can no longer see the session it can
    never reach the credential either.
    """
    try:
        state.sessions.close(session_id)
    finally:
        state.credentials.remove(session_id)
    logger.info("sse_disconnected", session_id=session_id)


def end_streams(state: State) -> None:
    """Close every open session, streams first, then their credentials.

    Each SSE response then finishes on its own, which lets the server stop.
    """
    sessions = getattr(state, "sessions", None)
    if sessions is None:
        return
    closed = sessions.close_all()
    for session_id in closed:
        state.credentials.remove(session_id)
    if closed:
        logger.info("sse_streams_ended", sessions=len(closed))


def bearer_credential(authorization: str | None) -> str | None:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def handle_rpc_message(state: State, session_id: str, message: RPCMessage) -> None:
    """Answer protocol methods inline; hand tools/call to the router."""
    if message.is_notification:
        logger.debug("rpc_notification", method=message.method, session_id=session_id)
        return

    request_id = message.id
    if message.method == "tools/call":
        try:
            tool_name, arguments = require_tool_call(message.params)
        except GatewayError as e:
            _push(state, session_id, rpc_error(request_id, INVALID_PARAMS, str(e)))
            return
        state.router.submit(session_id, request_id, tool_name, arguments)
        return

    if message.method == "initialize":
        result: dict[str, Any] = {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": state.settings.gateway.name,
                "version": state.settings.gateway.version,
            },
        }
    elif message.method == "ping":
        result = {}
    elif message.method == "tools/list":
        result = {"tools": state.catalog.describe()}
    else:
        logger.info("rpc_method_not_found", method=message.method, session_id=session_id)
        _push(
            state,
            session_id,
            rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {message.method}"),
        )
        return
    _push(state, session_id, rpc_result(request_id, result))


def _push(state: State, session_id: str, payload: str) -> None:
    if not state.sessions.send(session_id, sse_frame("message", payload)):
        logger.info("rpc_response_dropped", session_id=session_id)


class GatewayServer(uvicorn.Server):
    """uvicorn server that ends open SSE streams as soon as exit is requested.

    uvicorn only runs the lifespan shutdown after every connection has closed,
    and an SSE response stays open until its session stream is closed.
    """

    def __init__(self, config: uvicorn.Config, state: State) -> None:
        super().__init__(config)
        self._state = state

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        super().handle_exit(sig, frame)
        loop = getattr(self._state, "loop", None)
        if loop is not None and not loop.is_closed():
            # Called from a signal handler: registry locks are taken on the loop.
            loop.call_soon_threadsafe(end_streams, self._state)


def main() -> None:
    """Run the gateway with uvicorn on the configured host/port."""
    settings = get_settings()
    config = uvicorn.Config(
        app,
        host=settings.gateway.host,
        port=settings.gateway.port,
        timeout_graceful_shutdown=settings.gateway.shutdown_timeout_s,
    )
    GatewayServer(config, app.state).run()


if __name__ == "__main__":
    main()
