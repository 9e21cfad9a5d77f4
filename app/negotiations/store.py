"""In-process registry of live negotiation sessions.

Sessions exist only while a negotiation is running and never survive a
restart. Ending a negotiation drops its session at once. Sessions that
close any other way (accept, terminal reject, timer expiry) stay
readable for `retention_seconds` after their last access so the client
can fetch the final state, then are evicted. An active session nobody
has touched for its whole time limit plus the retention window is
treated as abandoned: it is expired and evicted.

Eviction runs on add() and get(); there is no background task.
"""

import threading
import time
from typing import Callable, Optional

from app.config import settings
from app.exceptions import SessionNotFoundError
from app.logging_config import get_logger
from app.negotiations.session import NegotiationSession

logger = get_logger(__name__)

DEFAULT_RETENTION_SECONDS = 300


class SessionStore:
    def __init__(
        self,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.retention_seconds = retention_seconds
        self._clock = clock
        self._sessions: dict[str, NegotiationSession] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def _is_stale(self, session: NegotiationSession, idle: float) -> bool:
        if session.is_active:
            return idle > session.time_limit_seconds + self.retention_seconds
        return idle > self.retention_seconds

    def prune(self) -> list[NegotiationSession]:
        """Evict closed and abandoned sessions; return what was removed."""
        now = self._clock()
        with self._lock:
            stale = [
                session
                for session_id, session in self._sessions.items()
                if self._is_stale(session, now - self._last_seen[session_id])
            ]
            for session in stale:
                del self._sessions[session.session_id]
                del self._last_seen[session.session_id]

        # Outside the store lock: expire() waits on the session's own lock.
        for session in stale:
            if session.is_active:
                session.expire()
            logger.info("session_evicted", session_id=session.session_id, status=session.status)
        return stale

    def add(self, session: NegotiationSession) -> NegotiationSession:
        self.prune()
        with self._lock:
            self._sessions[session.session_id] = session
            self._last_seen[session.session_id] = self._clock()
        return session

    def get(self, session_id: str) -> NegotiationSession:
        self.prune()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_seen[session_id] = self._clock()
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def discard(self, session_id: str) -> Optional[NegotiationSession]:
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
            self._last_seen.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_store = SessionStore(retention_seconds=settings.SESSION_RETENTION_SECONDS)
