"""Value objects crossing the auth service boundary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from lumir_auth.models.user import UserRole


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """Registration request, already shape-checked by the HTTP schema.

    ``password`` is plaintext here and only leaves the service hashed.
    ``role`` defaults to ``USER``.
    """

    name: str
    email: str
    password: str
    password_confirmation: str
    company: str | None = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True, slots=True)
class SignInIn:
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SessionTokensIn:
    """Tokens lifted from ``Authorization`` and the refresh header.

    Either may be ``None`` when the header was missing.
    """

    access_token: str | None
    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """Lifetimes applied when minting a session.

    The refresh lifetime is also how long the refresh registry keeps the
    user's slot.
    """

    access_expires: timedelta = timedelta(hours=24)
    refresh_expires: timedelta = timedelta(days=7)
