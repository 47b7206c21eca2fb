"""Tests for CredentialStore."""

from __future__ import annotations

import threading

from src.session.credentials import CredentialStore


class TestCredentialStore:
    def test_get_absent_returns_none(self) -> None:
        assert CredentialStore().get("nope") is None

    def test_get_none_session_returns_none(self) -> None:
        assert CredentialStore().get(None) is None

    def test_set_then_get(self) -> None:
        store = CredentialStore()
        store.set("abc123", "K1")
        assert store.get("abc123") == "K1"
        assert "abc123" in store

    def test_last_write_wins(self) -> None:
        store = CredentialStore()
        store.set("abc123", "K1")
        store.set("abc123", "K2")
        assert store.get("abc123") == "K2"
        assert len(store) == 1

    def test_sessions_isolated(self) -> None:
        store = CredentialStore()
        store.set("s1", "K1")
        store.set("s2", "K2")
        assert store.get("s1") == "K1"
        assert store.get("s2") == "K2"

    def test_remove_is_idempotent(self) -> None:
        store = CredentialStore()
        store.set("abc123", "K1")
        store.remove("abc123")
        store.remove("abc123")
        store.remove("never-seen")
        assert store.get("abc123") is None
        assert len(store) == 0

    def test_concurrent_writers_do_not_corrupt(self) -> None:
        store = CredentialStore()

        def writer(prefix: str) -> None:
            for i in range(200):
                store.set(f"{prefix}-{i}", f"key-{i}")
                if i % 2:
                    store.remove(f"{prefix}-{i}")

        threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(store) == 4 * 100
        assert store.get("t0-0") == "key-0"
        assert store.get("t3-1") is None
