# lumir_auth/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from lumir_auth.models.user import User
from lumir_auth.services._shared.base import BaseService, ServiceContext
from lumir_auth.services._shared.dto import UserPublic
from lumir_auth.services._shared.errors import (
    AuthenticationError,
    InternalServiceError,
    PasswordConfirmationMismatchError,
    RefreshTokenAlreadyExistsError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
    violates,
)
from lumir_auth.services._shared.identifiers import parse_user_id
from lumir_auth.services._shared.ports.password_hasher import PasswordHasher
from lumir_auth.services._shared.ports.session_store import SessionStore
from lumir_auth.services._shared.ports.token_provider import TokenProvider
from lumir_auth.services.auth.credentials import CredentialValidator
from lumir_auth.services.auth.dto import (
    AuthTokenConfig,
    SessionTokensIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
)
from lumir_auth.services.auth.password_policy import check_password_strength
from lumir_auth.services.auth.sessions import AccessTokenBlacklist, RefreshTokenRegistry

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Session lifecycle service (sign-up / sign-in / sign-out / slide / delete).

    Session states are ``Anonymous -> Authenticated -> Revoked``. Identity
    lives in the access token; the refresh token carries no identity and is
    bound to its owner through the refresh registry, which admits a single
    live token per user.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        session_store: SessionStore,
        password_hasher: PasswordHasher,
        credential_validator: CredentialValidator | None = None,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param token_provider: Adapter for issuing/verifying JWTs.
        :param session_store: Expiring store behind the registry and blacklist.
        :param password_hasher: Slow salted hasher for new passwords.
        :param credential_validator: Email/password checker; built from the
            hasher when omitted.
        :param token_cfg: Access/refresh lifetime configuration.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.hasher = password_hasher
        self.credentials = credential_validator or CredentialValidator(
            password_hasher=password_hasher
        )
        self.cfg = token_cfg or AuthTokenConfig()
        self.registry = RefreshTokenRegistry(session_store, ttl=self.cfg.refresh_expires)
        self.blacklist = AccessTokenBlacklist(session_store)

    # ------------------------------------------------------------------ #
    # Sign up
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> UserPublic:
        """
        Create an account and return its public projection.

        :raises UserAlreadyExistsError: If the email is taken.
        :raises PasswordConfirmationMismatchError: If the confirmation differs.
        :raises WeakPasswordError: If the password violates the policy.
        """
        at = "AuthService.sign_up"
        with self.collaborator_faults(at), self.ro_uow() as uow:
            if uow.users.exists_by_email(dto.email):
                raise UserAlreadyExistsError(f"Email already registered: {dto.email!r}", at=at)

        if dto.password != dto.password_confirmation:
            raise PasswordConfirmationMismatchError(at=at)

        violations = check_password_strength(dto.password)
        if violations:
            raise WeakPasswordError(violations, at=at)

        password_hash = self._hash(dto.password, at=at)

        try:
            with self.collaborator_faults(at), self.rw_uow() as uow:
                user = uow.users.add(
                    User(
                        name=dto.name,
                        email=dto.email,
                        password_hash=password_hash,
                        company=dto.company,
                        role=dto.role,
                    )
                )
                out = UserPublic.from_model(user)
        except InternalServiceError as exc:
            # Lost a sign-up race on the unique email
            cause = exc.__cause__
            if isinstance(cause, IntegrityError) and violates(
                cause, "uq_users_email", columns=("users.email",)
            ):
                raise UserAlreadyExistsError(
                    f"Email already registered: {dto.email!r}", at=at
                ) from cause
            raise

        log.info("User signed up", extra={"at": at})
        return out

    # ------------------------------------------------------------------ #
    # Sign in
    # ------------------------------------------------------------------ #

    def sign_in(self, dto: SignInIn) -> TokenPairOut:
        """
        Validate credentials, issue a token pair and claim the refresh slot.

        :raises UserNotFoundError: Unknown email.
        :raises PasswordMismatchError: Wrong password.
        :raises RefreshTokenAlreadyExistsError: A live refresh token exists.
        """
        at = "AuthService.sign_in"
        user = self.credentials.validate(dto.email, dto.password)

        access = self.tokens.issue_access(user)
        refresh = self.tokens.issue_refresh()

        # Atomic set-if-absent: concurrent sign-ins cannot both succeed
        if not self.registry.register(user.email, refresh):
            raise RefreshTokenAlreadyExistsError(
                f"A refresh token is already registered for {user.email!r}", at=at
            )

        log.info("User signed in", extra={"at": at})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Sign out
    # ------------------------------------------------------------------ #

    def sign_out(self, dto: SessionTokensIn) -> None:
        """
        Revoke the presented access token and drop the owner's refresh slot.

        An expired access token is accepted only together with the refresh
        token registered for its owner.

        :raises AuthenticationError: Missing, invalid or revoked token, or an
            expired access token without the registered refresh token.
        """
        at = "AuthService.sign_out"
        claims = self._authenticated_claims(dto, at=at, allow_expired=True)
        if self._expired(claims):
            self._require_registered_refresh(claims, dto.refresh_token or "", at=at)
        self._revoke(dto.access_token or "", claims)
        log.info("User signed out", extra={"at": at})

    # ------------------------------------------------------------------ #
    # Slide session
    # ------------------------------------------------------------------ #

    def slide_session(self, dto: SessionTokensIn) -> TokenPairOut:
        """
        Exchange a live token pair for a fresh one.

        The presented refresh token must be a valid refresh token and the one
        currently registered for the user. The access token may have expired;
        its signature still identifies the user. The old access token is
        blacklisted and the registry slot is overwritten.

        :raises AuthenticationError: Invalid, revoked or unregistered tokens.
        """
        at = "AuthService.slide_session"
        claims = self._authenticated_claims(dto, at=at, allow_expired=True)
        user = self._require_registered_refresh(claims, dto.refresh_token or "", at=at)

        access = self.tokens.issue_access(user)
        refresh = self.tokens.issue_refresh()

        self.blacklist.add(dto.access_token or "", self.tokens.expires_at(claims))
        self.registry.replace(user.email, refresh)

        log.info("Session slid", extra={"at": at})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Delete account
    # ------------------------------------------------------------------ #

    def delete_account(self, dto: SessionTokensIn) -> UserPublic:
        """
        Sign the caller out, then delete their record.

        :returns: Public projection of the deleted user.
        :raises AuthenticationError: Missing, invalid or revoked token.
        :raises UserNotFoundError: The token owner no longer exists.
        """
        at = "AuthService.delete_account"
        claims = self._authenticated_claims(dto, at=at)
        user_id = parse_user_id(claims.get("sub"), at=at)

        self._revoke(dto.access_token or "", claims)

        with self.collaborator_faults(at), self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found", at=at)
            out = UserPublic.from_model(user)
            uow.users.delete(user)

        log.info("Account deleted", extra={"at": at})
        return out

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def is_blacklisted(self, token: str) -> bool:
        """Return ``True`` if ``token`` was revoked and has not yet expired."""
        return self.blacklist.contains(token)

    def decode_access_token(self, token: str, *, allow_expired: bool = False) -> dict[str, Any]:
        """Verify and decode an access token (signature, type and, by default, expiry)."""
        return self.tokens.decode(token, allow_expired=allow_expired)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _hash(self, plain: str, *, at: str) -> str:
        try:
            return self.hasher.hash(plain)
        except (ValueError, TypeError) as exc:
            raise InternalServiceError(f"Password hashing failed: {exc}", at=at) from exc

    def _authenticated_claims(
        self, dto: SessionTokensIn, *, at: str, allow_expired: bool = False
    ) -> dict[str, Any]:
        """Require both tokens, then verify the access token and the blacklist."""
        if not dto.access_token or not dto.refresh_token:
            raise AuthenticationError("Access and refresh tokens are required", at=at)
        claims = self.tokens.decode(dto.access_token, allow_expired=allow_expired)
        if self.blacklist.contains(dto.access_token):
            raise AuthenticationError("Access token has been revoked", at=at)
        return claims

    def _expired(self, claims: dict[str, Any]) -> bool:
        return self.tokens.expires_at(claims) <= datetime.now(UTC)

    def _require_registered_refresh(
        self, claims: dict[str, Any], refresh_token: str, *, at: str
    ) -> User:
        """Load the access token owner and check ``refresh_token`` holds their slot."""
        self.tokens.decode_refresh(refresh_token)
        user = self._load_user(claims, at=at)
        if self.registry.current(user.email) != refresh_token:
            raise AuthenticationError("Refresh token is not the registered one", at=at)
        return user

    def _load_user(self, claims: dict[str, Any], *, at: str) -> User:
        user_id = parse_user_id(claims.get("sub"), at=at)
        with self.collaborator_faults(at), self.ro_uow() as uow:
            user = uow.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found", at=at)
        return user

    def _current_email(self, claims: dict[str, Any], *, at: str) -> str:
        """Email owning the refresh slot; the token claim may predate a profile change."""
        try:
            return self._load_user(claims, at=at).email
        except UserNotFoundError:
            return str(claims.get("email", ""))

    def _revoke(self, access_token: str, claims: dict[str, Any]) -> None:
        email = self._current_email(claims, at="AuthService.revoke")
        self.blacklist.add(access_token, self.tokens.expires_at(claims))
        self.registry.revoke(email)
