"""Client-side cache of the signed-in user's profile.

The holder keeps one entry in a pluggable key-value store: the public profile
plus an absolute expiry. Stores only deal in bytes so the same holder works
against process memory in tests and a JSON document on disk in a desktop or
CLI client.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Protocol

import msgspec

from .auth import PublicUser

__all__ = (
    "REFRESH_INTERVAL_SECONDS",
    "SESSION_KEY",
    "SESSION_TTL_SECONDS",
    "FileSessionStore",
    "MemorySessionStore",
    "SessionHolder",
    "SessionStore",
    "StoredSession",
)

log = logging.getLogger(__name__)

SESSION_KEY = "auth_user"
SESSION_TTL_SECONDS = 7 * 24 * 60 * 60
REFRESH_INTERVAL_SECONDS = 5.0


class SessionStore(Protocol):
    """Minimal persisted key-value interface used by ``SessionHolder``."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


class MemorySessionStore:
    """Process-local store."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileSessionStore:
    """Store persisted as a single JSON object of string values.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written document behind.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        try:
            return msgspec.json.decode(raw, type=dict[str, str])
        except msgspec.DecodeError:
            log.warning("Session file %s is corrupt, starting empty", self._path)
            return {}

    def _dump(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_bytes(msgspec.json.encode(data))
        os.replace(tmp, self._path)

    def get(self, key: str) -> bytes | None:
        value = self._load().get(key)
        return value.encode("utf-8") if value is not None else None

    def set(self, key: str, value: bytes) -> None:
        data = self._load()
        data[key] = value.decode("utf-8")
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class StoredSession(msgspec.Struct):
    """Cached session entry."""

    user: PublicUser
    expires_at: float


class SessionHolder:
    """Holds the authenticated user's profile between requests.

    Args:
        store: Where the entry is persisted.
        fetch_profile: Coroutine returning the authoritative profile from the
            server, or None when the server no longer recognises the session.
        ttl: Seconds a saved session stays valid.
        refresh_interval: Minimum seconds between two network refreshes.
        clock: Returns the current time in seconds.
    """

    def __init__(
        self,
        store: SessionStore,
        fetch_profile: Callable[[], Awaitable[PublicUser | None]] | None = None,
        *,
        ttl: float = SESSION_TTL_SECONDS,
        refresh_interval: float = REFRESH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._fetch_profile = fetch_profile
        self._ttl = ttl
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_refresh: float | None = None

    def save(self, user: PublicUser) -> None:
        """Cache ``user`` with a fresh expiry horizon."""
        entry = StoredSession(user=user, expires_at=self._clock() + self._ttl)
        self._store.set(SESSION_KEY, msgspec.json.encode(entry))

    def current(self) -> PublicUser | None:
        """Return the cached user, dropping expired or unreadable entries."""
        raw = self._store.get(SESSION_KEY)
        if raw is None:
            return None

        try:
            entry = msgspec.json.decode(raw, type=StoredSession)
        except msgspec.DecodeError:
            log.warning("Discarding unreadable session entry")
            self._store.delete(SESSION_KEY)
            return None

        if self._clock() > entry.expires_at:
            self._store.delete(SESSION_KEY)
            return None
        return entry.user

    def clear(self) -> None:
        """Forget the cached user (logout)."""
        self._store.delete(SESSION_KEY)
        self._last_refresh = None

    async def refresh(self) -> PublicUser | None:
        """Re-fetch the profile from the server and overwrite the cache.

        Calls landing within ``refresh_interval`` of the previous completed
        refresh return the cached profile. Concurrent callers queue on a lock,
        so a burst of refreshes costs one round trip.

        Raises:
            RuntimeError: If the holder was built without ``fetch_profile``.
        """
        if self._fetch_profile is None:
            raise RuntimeError("SessionHolder has no fetch_profile callable.")

        async with self._lock:
            if self._last_refresh is not None and self._clock() - self._last_refresh < self._refresh_interval:
                return self.current()

            user = await self._fetch_profile()
            self._last_refresh = self._clock()

            if user is None:
                self._store.delete(SESSION_KEY)
            else:
                self.save(user)
            return user
