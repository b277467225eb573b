"""
lumir_auth.services._shared.ports
=================================

*Ports* (hexagonal interfaces) the service layer depends on. Concrete
adapters live under ``lumir_auth.infra``; test doubles live next to the port.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` for issuing and verifying the JWT pair.
- :mod:`session_store`:
    :class:`~.SessionStore`, the expiring key-value space backing the refresh
    registry and the access-token blacklist.
- :mod:`password_hasher`:
    :class:`~.PasswordHasher` for salted password hashing.
- :mod:`notifier`:
    :class:`~.Notifier` for outbound email delivery.
"""

from __future__ import annotations

from .notifier import MailMessage, Notifier, RecordingNotifier
from .password_hasher import PasswordHasher, StubPasswordHasher
from .session_store import InMemorySessionStore, SessionStore
from .token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    StubTokenProvider,
    TokenProvider,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "TokenProvider",
    "StubTokenProvider",
    "SessionStore",
    "InMemorySessionStore",
    "PasswordHasher",
    "StubPasswordHasher",
    "MailMessage",
    "Notifier",
    "RecordingNotifier",
]
