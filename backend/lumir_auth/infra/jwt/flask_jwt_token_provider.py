# lumir_auth/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, cast

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from lumir_auth.services._shared.errors import AuthenticationError, InternalServiceError
from lumir_auth.services._shared.ports.token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    TokenProvider,
)

if TYPE_CHECKING:
    from lumir_auth.models.user import User


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Access tokens carry ``sub`` (user id) and ``email``. Refresh tokens carry
    only ``issued_at`` and a random subject; their owner is known through
    the refresh registry.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    access_expires: timedelta | None = None
    refresh_expires: timedelta | None = None

    def issue_access(self, user: User) -> str:
        at = "JWTTokenProvider.issue_access"
        try:
            return cast(
                str,
                create_access_token(
                    identity=str(user.id),
                    additional_claims={"email": user.email},
                    expires_delta=self.access_expires or None,
                ),
            )
        except (PyJWTError, JWTExtendedException, TypeError, ValueError) as exc:
            raise InternalServiceError(f"Access token signing failed: {exc}", at=at) from exc

    def issue_refresh(self) -> str:
        at = "JWTTokenProvider.issue_refresh"
        try:
            return cast(
                str,
                create_refresh_token(
                    # No identity claim: the subject is a random handle
                    identity=secrets.token_urlsafe(16),
                    additional_claims={"issued_at": datetime.now(UTC).isoformat()},
                    expires_delta=self.refresh_expires or None,
                ),
            )
        except (PyJWTError, JWTExtendedException, TypeError, ValueError) as exc:
            raise InternalServiceError(f"Refresh token signing failed: {exc}", at=at) from exc

    def _decode(
        self, token: str, expected_type: str, *, at: str, allow_expired: bool = False
    ) -> dict[str, Any]:
        try:
            claims = cast(dict[str, Any], decode_token(token, allow_expired=allow_expired))
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired", at=at) from exc
        except (PyJWTError, JWTExtendedException) as exc:
            raise AuthenticationError(f"Token is invalid: {exc}", at=at) from exc
        # Flask-JWT-Extended sets "type": "access" | "refresh"
        if claims.get("type") != expected_type:
            raise AuthenticationError(f"Wrong token type: {expected_type} token required", at=at)
        return claims

    def decode(self, token: str, *, allow_expired: bool = False) -> dict[str, Any]:
        return self._decode(
            token, ACCESS_TOKEN_TYPE, at="JWTTokenProvider.decode", allow_expired=allow_expired
        )

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return self._decode(token, REFRESH_TOKEN_TYPE, at="JWTTokenProvider.decode_refresh")

    def expires_at(self, claims: dict[str, Any]) -> datetime:
        return datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
