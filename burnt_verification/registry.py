"""
Session Registry

Tracks the provider-side handle of every verification session in flight.
"""

import threading
from typing import Any, Dict, Set

from burnt_verification.core.logging import get_logger
from burnt_verification.exceptions import DuplicateSessionError, SessionNotFoundError

logger = get_logger(__name__)


class SessionRegistry:
    """
    Maps session ids to adapter-owned opaque handles.

    A session is registered once, when the provider hands out its URL, and
    consumed once, when the external flow succeeds or fails. Consumed ids
    are remembered so they can never be registered again; a retry always
    means a brand new session.

    The issued-id set only grows, by one id per session, for the lifetime
    of the registry. Long-running hosts should recreate the registry (or
    the adapter that owns it) periodically to bound it.
    """

    def __init__(self):
        self._handles: Dict[str, Any] = {}
        self._issued: Set[str] = set()
        # Provider callbacks may arrive on SDK threads
        self._lock = threading.Lock()

    def register(self, session_id: str, handle: Any) -> None:
        """
        Register a new session.

        Raises:
            DuplicateSessionError: If the id was already issued by this registry
        """
        with self._lock:
            if session_id in self._issued:
                raise DuplicateSessionError(
                    f"Session {session_id} is already registered",
                    {"session_id": session_id},
                )
            self._issued.add(session_id)
            self._handles[session_id] = handle
        logger.debug("Registered verification session", session_id=session_id)

    def get(self, session_id: str) -> Any:
        """Look up a live session's handle without consuming it."""
        with self._lock:
            if session_id not in self._handles:
                raise SessionNotFoundError(session_id)
            return self._handles[session_id]

    def consume(self, session_id: str) -> Any:
        """
        Atomically look up and remove a session.

        Raises:
            SessionNotFoundError: If the session is unknown or already consumed
        """
        with self._lock:
            try:
                handle = self._handles.pop(session_id)
            except KeyError:
                raise SessionNotFoundError(session_id) from None
        logger.debug("Consumed verification session", session_id=session_id)
        return handle

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
