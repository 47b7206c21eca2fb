"""CredentialStore: session_id -> opaque bearer credential.

Entries live exactly as long as the session; the gateway removes them on
stream close. Values are never logged.
"""

from __future__ import annotations

import threading

import structlog

logger = structlog.get_logger()


class CredentialStore:
    """Lock-guarded credential mapping. Last completed write wins."""

    def __init__(self) -> None:
        self._credentials: dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, session_id: str, credential: str) -> None:
        with self._lock:
            self._credentials[session_id] = credential
        logger.debug("credential_bound", session_id=session_id)

    def get(self, session_id: str | None) -> str | None:
        """Return the bound credential, or None. Absence is a normal outcome."""
        if session_id is None:
            return None
        with self._lock:
            return self._credentials.get(session_id)

    def remove(self, session_id: str) -> None:
        """Drop the credential. Unknown ids are a no-op."""
        with self._lock:
            removed = self._credentials.pop(session_id, None)
        if removed is not None:
            logger.debug("credential_removed", session_id=session_id)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._credentials

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)
