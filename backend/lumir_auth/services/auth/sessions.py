"""Namespaced views over the session store.

Two logical tables share one expiring key space, separated by prefix:

- ``refresh:<email>`` holds the single live refresh token of a user.
- ``blacklist:<access token>`` marks a revoked access token until it would
  have expired anyway.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from lumir_auth.services._shared.ports.session_store import SessionStore

REFRESH_PREFIX = "refresh:"
BLACKLIST_PREFIX = "blacklist:"


def refresh_key(email: str) -> str:
    return f"{REFRESH_PREFIX}{email}"


def blacklist_key(token: str) -> str:
    return f"{BLACKLIST_PREFIX}{token}"


class RefreshTokenRegistry:
    """
    Email-keyed registry enforcing at most one live refresh token per user.

    :param store: Backing session store.
    :param ttl: Lifetime of a registry entry (the refresh token lifetime).
    """

    def __init__(self, store: SessionStore, *, ttl: timedelta) -> None:
        self.store = store
        self.ttl_seconds = max(1, int(ttl.total_seconds()))

    def register(self, email: str, token: str) -> bool:
        """Atomically claim the slot; ``False`` when a live token is present."""
        return self.store.add(refresh_key(email), token, self.ttl_seconds)

    def replace(self, email: str, token: str) -> None:
        """Overwrite the slot unconditionally."""
        self.store.set(refresh_key(email), token, self.ttl_seconds)

    def current(self, email: str) -> str | None:
        return self.store.get(refresh_key(email))

    def revoke(self, email: str) -> None:
        self.store.delete(refresh_key(email))

    def move(self, old_email: str, new_email: str) -> None:
        """Re-key the slot after an email change; a no-op when nothing is live."""
        if old_email == new_email:
            return
        token = self.current(old_email)
        if token is None:
            return
        self.replace(new_email, token)
        self.revoke(old_email)


class AccessTokenBlacklist:
    """
    Revoked access tokens, each kept only for its remaining lifetime.

    :param store: Backing session store.
    """

    def __init__(self, store: SessionStore) -> None:
        self.store = store

    @staticmethod
    def remaining_seconds(expires_at: datetime) -> int:
        now = datetime.now(UTC).timestamp()
        return max(1, int(expires_at.timestamp() - now))

    def add(self, token: str, expires_at: datetime) -> None:
        self.store.set(blacklist_key(token), token, self.remaining_seconds(expires_at))

    def contains(self, token: str) -> bool:
        # A miss means "not revoked"
        return self.store.get(blacklist_key(token)) is not None
