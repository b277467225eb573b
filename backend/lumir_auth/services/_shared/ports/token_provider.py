from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Protocol

from lumir_auth.services._shared.errors import AuthenticationError

if TYPE_CHECKING:
    from lumir_auth.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """Port for issuing and verifying the access/refresh JWT pair.

    ``decode`` and ``decode_refresh`` verify signature, expiry and token type
    and raise :class:`AuthenticationError` on any failure. ``decode`` accepts
    ``allow_expired=True`` to recover the identity of an expired access token
    whose signature and type still check out.
    """

    def issue_access(self, user: User) -> str: ...

    def issue_refresh(self) -> str: ...

    def decode(self, token: str, *, allow_expired: bool = False) -> dict[str, Any]: ...

    def decode_refresh(self, token: str) -> dict[str, Any]: ...

    def expires_at(self, claims: dict[str, Any]) -> datetime: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings mapped to claim dictionaries; expiry is checked
    against the current (possibly frozen) clock on every decode.
    """

    def __init__(
        self,
        *,
        access_expires: timedelta = timedelta(hours=24),
        refresh_expires: timedelta = timedelta(days=7),
    ) -> None:
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def _mk(self, ttype: str, exp_delta: timedelta, claims: dict[str, Any]) -> str:
        self._seq += 1
        now = datetime.now(UTC)
        jti = f"jti-{self._seq}"
        token = f"{ttype}.{claims.get('sub', 'anon')}.{self._seq}"
        payload: dict[str, Any] = {
            **claims,
            "type": ttype,
            "jti": jti,
            "iat": int(now.timestamp()),
            "exp": int((now + exp_delta).timestamp()),
        }
        self._issued[token] = payload
        return token

    def issue_access(self, user: User) -> str:
        return self._mk(
            ACCESS_TOKEN_TYPE,
            self.access_expires,
            {"sub": str(user.id), "email": user.email},
        )

    def issue_refresh(self) -> str:
        return self._mk(
            REFRESH_TOKEN_TYPE,
            self.refresh_expires,
            {
                "sub": secrets.token_hex(8),
                "issued_at": datetime.now(UTC).isoformat(),
            },
        )

    def _decode(
        self, token: str, expected_type: str, *, allow_expired: bool = False
    ) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None:
            raise AuthenticationError("Token is malformed", at="StubTokenProvider.decode")
        if not allow_expired and payload["exp"] <= int(datetime.now(UTC).timestamp()):
            raise AuthenticationError("Token has expired", at="StubTokenProvider.decode")
        if payload["type"] != expected_type:
            raise AuthenticationError(
                f"Wrong token type: {expected_type} token required",
                at="StubTokenProvider.decode",
            )
        return dict(payload)

    def decode(self, token: str, *, allow_expired: bool = False) -> dict[str, Any]:
        return self._decode(token, ACCESS_TOKEN_TYPE, allow_expired=allow_expired)

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return self._decode(token, REFRESH_TOKEN_TYPE)

    def expires_at(self, claims: dict[str, Any]) -> datetime:
        return datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
