from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Protocol


class SessionStore(Protocol):
    """
    Expiring key-value space shared by the refresh registry and the blacklist.

    Implementations raise :class:`~lumir_auth.services._shared.errors.InternalServiceError`
    on I/O failures; callers never retry.
    """

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key``, overwriting, for ``ttl_seconds``."""

    def add(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically store ``value`` only if ``key`` is absent; ``True`` on success."""

    def get(self, key: str) -> str | None:
        """Return the live value for ``key`` or ``None``."""

    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""

    def ping(self) -> bool:
        """Return ``True`` when the backend is reachable."""


class InMemorySessionStore(SessionStore):
    """
    Process-local session store with per-key expiry.

    .. note::
       A single lock guards every operation, which makes ``add`` atomic
       within one process. Every write also drops the entries that have
       expired, so keys that are never read again do not accumulate.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> float:
        return datetime.now(UTC).timestamp()

    def _live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if deadline <= self._now():
            del self._data[key]
            return None
        return value

    def _sweep(self) -> None:
        now = self._now()
        for key in [k for k, (_, deadline) in self._data.items() if deadline <= now]:
            del self._data[key]

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._sweep()
            self._data[key] = (value, self._now() + max(1, int(ttl_seconds)))

    def add(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            self._sweep()
            if key in self._data:
                return False
            self._data[key] = (value, self._now() + max(1, int(ttl_seconds)))
            return True

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._live(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def ping(self) -> bool:
        return True

    def size(self) -> int:
        """Number of entries currently held, expired ones included until swept."""
        with self._lock:
            return len(self._data)

    def ttl(self, key: str) -> int | None:
        """Seconds left for ``key`` (``None`` when absent). Used by tests."""
        with self._lock:
            if self._live(key) is None:
                return None
            return int(self._data[key][1] - self._now())
