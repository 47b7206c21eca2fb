"""SessionRegistry: session_id -> live SSE stream.

Entries are created on connect and removed on disconnect or shutdown.
Callers never get the stream back out of the registry; they push through
send(), which reports a vanished session as False instead of raising.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterator

import structlog

from src.infra.errors import SessionCollisionError

logger = structlog.get_logger()

_CLOSED = object()


class SessionStream:
    """Server-to-client push channel for one connection.

    Frames are pre-encoded SSE text. push() never blocks; the SSE response
    generator drains the queue via frames().
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, frame: str) -> bool:
        """Enqueue a frame. Returns False once the stream is closed."""
        if self._closed:
            return False
        self._queue.put_nowait(frame)
        return True

    def close(self) -> None:
        """Mark closed and wake the reader. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def frames(self, keepalive_s: float | None = None) -> AsyncIterator[str | None]:
        """Yield queued frames until closed.

        Yields None when no frame arrived within keepalive_s, so the caller
        can emit a keep-alive comment.
        """
        while True:
            try:
                if keepalive_s is None:
                    item = await self._queue.get()
                else:
                    item = await asyncio.wait_for(self._queue.get(), timeout=keepalive_s)
            except TimeoutError:
                yield None
                continue
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


class SessionRegistry:
    """Lock-guarded registry of open sessions."""

    def __init__(self) -> None:
        self._streams: dict[str, SessionStream] = {}
        self._lock = threading.Lock()

    def open(self, session_id: str, stream: SessionStream) -> None:
        """Register a new session. Raises SessionCollisionError on reuse."""
        with self._lock:
            if session_id in self._streams:
                raise SessionCollisionError(session_id)
            self._streams[session_id] = stream
        logger.info("session_opened", session_id=session_id)

    def send(self, session_id: str, frame: str) -> bool:
        """Deliver a frame. False means the session is gone (NotFound)."""
        with self._lock:
            stream = self._streams.get(session_id)
            if stream is None:
                return False
            return stream.push(frame)

    def close(self, session_id: str) -> None:
        """Remove the session and close its stream. Idempotent."""
        with self._lock:
            stream = self._streams.pop(session_id, None)
            if stream is not None:
                stream.close()
        if stream is not None:
            logger.info("session_closed", session_id=session_id)

    def close_all(self) -> list[str]:
        """Close every session (server shutdown). Returns the ids closed."""
        with self._lock:
            streams = list(self._streams.items())
            self._streams.clear()
            for _, stream in streams:
                stream.close()
        for session_id, _ in streams:
            logger.info("session_closed", session_id=session_id)
        return [session_id for session_id, _ in streams]

    def is_open(self, session_id: str | None) -> bool:
        if session_id is None:
            return False
        with self._lock:
            return session_id in self._streams

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._streams)

    def __len__(self) -> int:
        with self._lock:
            return len(self._streams)
