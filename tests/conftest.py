"""Shared pytest fixtures for gateway tests.

Upstream Google Maps calls never leave the process: tools get a
GoogleMapsClient backed by httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from src.session.registry import SessionStream
from src.tools.base import BaseTool
from src.tools.builtins.maps_client import GoogleMapsClient
from src.tools.context import ToolContext

MAPS_BASE = "https://maps.test/maps/api"


class RecordingTool(BaseTool):
    """Tool double that records every context it is invoked with."""

    def __init__(self, name: str = "maps_geocode", *, delay: float = 0.0, payload=None) -> None:
        self._name = name
        self._delay = delay
        self._payload = payload if payload is not None else {"ok": True}
        self.calls: list[tuple[dict, ToolContext | None]] = []
        self.started = asyncio.Event()
        self.release: asyncio.Event | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"Recording tool {self._name}"

    @property
    def parameters(self) -> dict:
        return {"type": "object", "properties": {}}

    async def execute(self, arguments: dict, context: ToolContext | None = None) -> dict:
        self.calls.append((arguments, context))
        self.started.set()
        if self.release is not None:
            await self.release.wait()
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._payload


@pytest.fixture
def recording_tool() -> RecordingTool:
    return RecordingTool()


@pytest.fixture
def make_tool() -> Callable[..., RecordingTool]:
    """Factory for extra RecordingTool instances (custom name, delay, payload)."""
    return RecordingTool


@pytest.fixture
def maps_client_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], GoogleMapsClient]:
    """Build a GoogleMapsClient whose HTTP calls go to the given handler."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> GoogleMapsClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GoogleMapsClient(http, base_url=MAPS_BASE)

    return _factory


async def _next_frame(stream: SessionStream, timeout: float = 1.0) -> str | None:
    frames = stream.frames()
    try:
        return await asyncio.wait_for(anext(frames), timeout=timeout)
    finally:
        await frames.aclose()


@pytest.fixture
def next_frame() -> Callable[..., object]:
    """Pop one queued frame from a SessionStream (awaitable)."""
    return _next_frame
