"""Session storage implementations backed by Redis or process memory."""
import json
import logging
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis

from skyfront.config.settings import Config
from skyfront.domain.interfaces.session_storage import ISessionStorage


class RedisSessionStorage(ISessionStorage):
    """
    Redis-based session storage implementation.

    Follows Repository Pattern and Single Responsibility Principle.
    Uses Redis for persistent session storage with TTL support, so every
    gunicorn worker sees the same sessions.
    """

    def __init__(self, redis_client: redis.Redis, ttl: Optional[int] = None):
        """
        Initialize the session storage.

        Args:
            redis_client: Connected Redis client (Dependency Injection)
            ttl: Default time to live in seconds (defaults to SESSION_TTL)
        """
        self.redis = redis_client
        self.default_ttl = ttl or Config.SESSION_TTL
        self._logger = logging.getLogger(__name__)
        self._key_prefix = "skyfront:session:"

    def _get_key(self, session_id: str) -> str:
        """Generate Redis key for session."""
        return f"{self._key_prefix}{session_id}"

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve session data from Redis."""
        data = self.redis.get(self._get_key(session_id))
        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError:
            self._logger.error(f"Corrupted session payload for {session_id[:6]}***, discarding")
            self.delete_session(session_id)
            return None

    def set_session(self, session_id: str, data: Dict[str, Any], ttl: Optional[int] = None) -> None:
        """Store session data in Redis."""
        ttl = ttl or self.default_ttl
        self.redis.setex(self._get_key(session_id), ttl, json.dumps(data))
        self._logger.debug(f"Session {session_id[:6]}*** stored with TTL {ttl}s")

    def delete_session(self, session_id: str) -> None:
        """Delete session data from Redis."""
        self.redis.delete(self._get_key(session_id))
        self._logger.debug(f"Session {session_id[:6]}*** deleted")

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> None:
        """Update session data (partial update), preserving the remaining TTL."""
        current = self.get_session(session_id)
        if current is None:
            raise ValueError("Session not found")

        current.update(updates)
        ttl = self.redis.ttl(self._get_key(session_id))
        self.set_session(session_id, current, ttl=ttl if ttl and ttl > 0 else None)

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            self._logger.error(f"Redis health check failed: {e}")
            return False


class InMemorySessionStorage(ISessionStorage):
    """
    Process-local session storage for development, tests and as a
    fallback when Redis is down. Expired entries are swept on every write.

    Sessions are lost on restart and are not shared between workers.
    """

    def __init__(self, ttl: Optional[int] = None, clock=time.monotonic):
        self.default_ttl = ttl or Config.SESSION_TTL
        self._clock = clock
        self._sessions: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _live_entry(self, session_id: str) -> Optional[Tuple[float, Dict[str, Any]]]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        if entry[0] <= self._clock():
            del self._sessions[session_id]
            return None
        return entry

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._live_entry(session_id)
            return json.loads(json.dumps(entry[1])) if entry else None

    def _purge_expired(self, now: float) -> None:
        expired = [sid for sid, (expires_at, _) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            self._logger.debug(f"Dropped {len(expired)} expired sessions")

    def set_session(self, session_id: str, data: Dict[str, Any], ttl: Optional[int] = None) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._sessions[session_id] = (now + (ttl or self.default_ttl), json.loads(json.dumps(data)))

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> None:
        with self._lock:
            entry = self._live_entry(session_id)
            if entry is None:
                raise ValueError("Session not found")
            expires_at, data = entry
            data.update(json.loads(json.dumps(updates)))
            self._sessions[session_id] = (expires_at, data)
