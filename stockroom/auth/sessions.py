"""
stockroom/auth/sessions.py
--------------------------
Session token stores.

A store maps an opaque, unguessable token to the id of the signed-in user.
The HTTP layer keeps the token in Flask's signed cookie session; the store
decides whether it is still valid.

Any object with create / validate / destroy can stand in for
MemorySessionStore (e.g. a Redis- or table-backed store).
"""
import secrets
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, NamedTuple, Optional


class _Entry(NamedTuple):
    user_id: int
    expires_at: datetime


class SessionStore:
    """Interface for session token stores."""

    def create(self, user_id: int) -> str:
        raise NotImplementedError

    def validate(self, token: Optional[str]) -> Optional[int]:
        raise NotImplementedError

    def destroy(self, token: Optional[str]) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """
    Process-local store. Tokens are lost on restart and are not shared
    between worker processes.
    """

    def __init__(self, lifetime: timedelta,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._lifetime = lifetime
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        entry = _Entry(user_id=user_id, expires_at=self._clock() + self._lifetime)
        with self._lock:
            self._entries[token] = entry
        return token

    def validate(self, token: Optional[str]) -> Optional[int]:
        """User id bound to `token`, or None if unknown or expired."""
        if not token:
            return None
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[token]
                return None
            return entry.user_id

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._entries.pop(token, None)

    def purge_expired(self) -> int:
        """Drop every expired token. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [t for t, e in self._entries.items() if now >= e.expires_at]
            for token in stale:
                del self._entries[token]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
