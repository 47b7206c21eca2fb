"""Tests for SessionRegistry and SessionStream."""

from __future__ import annotations

import asyncio

import pytest

from src.infra.errors import SessionCollisionError
from src.session.registry import SessionRegistry, SessionStream


class TestSessionStream:
    @pytest.mark.asyncio
    async def test_push_then_read(self) -> None:
        stream = SessionStream()
        assert stream.push("frame-1") is True
        frames = stream.frames()
        assert await anext(frames) == "frame-1"
        await frames.aclose()

    @pytest.mark.asyncio
    async def test_close_ends_iteration(self) -> None:
        stream = SessionStream()
        stream.push("a")
        stream.close()
        assert [f async for f in stream.frames()] == ["a"]

    def test_push_after_close_is_rejected(self) -> None:
        stream = SessionStream()
        stream.close()
        stream.close()
        assert stream.closed is True
        assert stream.push("late") is False

    @pytest.mark.asyncio
    async def test_keepalive_yields_none_when_idle(self) -> None:
        stream = SessionStream()
        frames = stream.frames(keepalive_s=0.01)
        assert await anext(frames) is None
        await frames.aclose()


class TestSessionRegistry:
    def test_open_and_send(self) -> None:
        registry = SessionRegistry()
        stream = SessionStream()
        registry.open("abc123", stream)
        assert registry.is_open("abc123")
        assert registry.send("abc123", "hello") is True
        assert len(registry) == 1

    def test_open_collision_is_fatal(self) -> None:
        registry = SessionRegistry()
        first = SessionStream()
        registry.open("abc123", first)
        with pytest.raises(SessionCollisionError) as exc_info:
            registry.open("abc123", SessionStream())
        assert exc_info.value.code == "SESSION_COLLISION"
        # original stream untouched
        assert registry.send("abc123", "still-mine") is True
        assert first.closed is False

    def test_send_unknown_session_is_not_found(self) -> None:
        assert SessionRegistry().send("ghost", "hello") is False

    def test_close_releases_stream(self) -> None:
        registry = SessionRegistry()
        stream = SessionStream()
        registry.open("abc123", stream)
        registry.close("abc123")
        assert stream.closed is True
        assert not registry.is_open("abc123")
        assert registry.send("abc123", "after-close") is False

    def test_close_is_idempotent(self) -> None:
        registry = SessionRegistry()
        registry.open("abc123", SessionStream())
        registry.close("abc123")
        registry.close("abc123")
        registry.close("never-opened")
        assert len(registry) == 0

    def test_id_reusable_after_close(self) -> None:
        registry = SessionRegistry()
        registry.open("abc123", SessionStream())
        registry.close("abc123")
        registry.open("abc123", SessionStream())
        assert registry.is_open("abc123")

    def test_close_all(self) -> None:
        registry = SessionRegistry()
        streams = [SessionStream() for _ in range(3)]
        for i, s in enumerate(streams):
            registry.open(f"s{i}", s)
        assert sorted(registry.close_all()) == ["s0", "s1", "s2"]
        assert len(registry) == 0
        assert all(s.closed for s in streams)
        assert registry.close_all() == []

    def test_is_open_none(self) -> None:
        assert SessionRegistry().is_open(None) is False

    @pytest.mark.asyncio
    async def test_no_delivery_after_close_for_any_sequence(self) -> None:
        registry = SessionRegistry()
        streams: dict[str, SessionStream] = {}
        for step in range(30):
            sid = f"s{step % 5}"
            if registry.is_open(sid):
                registry.close(sid)
                assert registry.send(sid, "x") is False
                assert streams[sid].push("x") is False
            else:
                streams[sid] = SessionStream()
                registry.open(sid, streams[sid])
                assert registry.send(sid, "x") is True
            await asyncio.sleep(0)
