"""Per-player game sessions, addressed by signed tokens."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or config.security.secret_key)

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify a token and return the session ID it carries.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if the signature is valid and fresh, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the process-wide signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


@dataclass
class _Entry:
    data: dict[str, Any]
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return self.expires_at < now


class SessionStore:
    """
    Process-local session store with a sliding TTL.

    Session data holds live ``RoundEngine`` objects, so nothing outlives
    the process. Every write pushes the expiry forward by ``ttl`` seconds.
    Expired entries are dropped when read and by ``evict_expired``.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self.ttl = ttl or config.session_ttl
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def new_token(self) -> str:
        """Create a fresh signed session token."""
        return get_session_signer().sign(str(uuid4()))

    async def get(self, token: str) -> dict[str, Any] | None:
        entry = self._entries.get(token)
        if entry is None:
            return None
        if entry.expired(datetime.now()):
            del self._entries[token]
            return None
        return entry.data

    async def set(self, token: str, data: dict[str, Any], ttl: int | None = None) -> None:
        expires_at = datetime.now() + timedelta(seconds=ttl or self.ttl)
        self._entries[token] = _Entry(data, expires_at)

    async def evict_expired(self) -> int:
        """Drop every expired session and return how many were dropped."""
        now = datetime.now()
        expired = [token for token, entry in self._entries.items() if entry.expired(now)]
        for token in expired:
            del self._entries[token]
        if expired:
            logger.info("Evicted %d expired sessions", len(expired))
        return len(expired)


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the process-wide session store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


async def create_session(data: dict[str, Any] | None = None) -> str:
    """
    Register a new session and return its signed token.

    Abandoned sessions are evicted here, so the store only grows with
    sessions that are still live.
    """
    store = get_session_store()
    await store.evict_expired()
    token = store.new_token()
    await store.set(token, data or {})
    return token


async def get_session(token: str) -> dict[str, Any] | None:
    return await get_session_store().get(token)


async def update_session(token: str, data: dict[str, Any]) -> None:
    """Store session data and refresh its expiry."""
    await get_session_store().set(token, data)


def extract_session_id(token: str) -> str | None:
    """Return the raw session ID inside a signed token, None if invalid or stale."""
    return get_session_signer().unsign(token)
