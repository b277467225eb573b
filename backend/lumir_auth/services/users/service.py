"""
UserService
===========

User directory operations exposed over HTTP:

- profile retrieval by token subject or by explicit id,
- partial profile update (name, email, company, password),
- paged listing for administrators.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from lumir_auth.models.user import User
from lumir_auth.services._shared.base import BaseService, ServiceContext
from lumir_auth.services._shared.dto import PageMeta, UserPageOut, UserPublic
from lumir_auth.services._shared.errors import (
    EmptyPageError,
    EmptyUpdateError,
    InternalServiceError,
    UserAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
    violates,
)
from lumir_auth.services._shared.identifiers import parse_user_id
from lumir_auth.services._shared.ports.password_hasher import PasswordHasher
from lumir_auth.services._shared.ports.session_store import SessionStore
from lumir_auth.services.auth.password_policy import check_password_strength
from lumir_auth.services.auth.sessions import RefreshTokenRegistry
from lumir_auth.services.users.dto import PageIn, UserUpdateIn

log = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Application service for the user directory.

    Responsibilities
    ----------------
    - Resolve profiles by opaque id.
    - Merge partial updates while keeping email unique.
    - Keep the refresh registry keyed by the current email.
    """

    def __init__(
        self,
        *,
        session_store: SessionStore,
        password_hasher: PasswordHasher,
        refresh_ttl: timedelta = timedelta(days=7),
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.hasher = password_hasher
        self.registry = RefreshTokenRegistry(session_store, ttl=refresh_ttl)

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get_profile(self, user_id: str) -> UserPublic:
        """
        Return the profile of the token subject.

        :param user_id: The ``sub`` claim of a verified access token.
        :raises UserNotFoundError: If the user no longer exists.
        """
        at = "UserService.get_profile"
        return UserPublic.from_model(self._get(user_id, at=at))

    def get_by_id(self, raw_id: str | None) -> UserPublic:
        """
        Return the profile for an explicit id.

        :raises InvalidUserIdError: If ``raw_id`` is malformed.
        :raises UserNotFoundError: If no user has this id.
        """
        at = "UserService.get_by_id"
        return UserPublic.from_model(self._get(raw_id, at=at))

    def list_users(self, dto: PageIn) -> UserPageOut:
        """
        Return one page of users.

        :raises EmptyPageError: If the requested page holds no users.
        """
        at = "UserService.list_users"
        with self.collaborator_faults(at), self.ro_uow() as uow:
            page = uow.users.list_page(dto.page, dto.size)
            items = [UserPublic.from_model(u) for u in page.items]

        if not items:
            raise EmptyPageError(f"Page {dto.page} (size {dto.size}) is empty", at=at)

        meta = PageMeta(
            page=page.page,
            size=page.size,
            total=page.total,
            has_prev=page.page > 1,
            has_next=page.page * page.size < page.total,
        )
        return UserPageOut(data=items, meta=meta)

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def update_profile(self, user_id: str, dto: UserUpdateIn) -> UserPublic:
        """
        Merge the supplied fields into the caller's record.

        A new password is checked against the policy and re-hashed. An email
        change moves the refresh registry slot to the new address so the
        session survives the update.

        :raises EmptyUpdateError: If no field was supplied.
        :raises UserAlreadyExistsError: If the new email is taken.
        :raises WeakPasswordError: If the new password violates the policy.
        """
        at = "UserService.update_profile"
        changes = dto.provided()
        if not changes:
            raise EmptyUpdateError(at=at)

        password = changes.pop("password", None)
        if password is not None:
            violations = check_password_strength(password)
            if violations:
                raise WeakPasswordError(violations, at=at)
            try:
                changes["password_hash"] = self.hasher.hash(password)
            except (ValueError, TypeError) as exc:
                raise InternalServiceError(f"Password hashing failed: {exc}", at=at) from exc

        try:
            with self.collaborator_faults(at), self.rw_uow() as uow:
                user = self._require(uow.users.get(parse_user_id(user_id, at=at)), user_id, at=at)
                old_email = user.email
                new_email = changes.get("email")
                if new_email is not None and new_email != old_email:
                    if uow.users.exists_by_email(new_email):
                        raise UserAlreadyExistsError(
                            f"Email already registered: {new_email!r}", at=at
                        )
                uow.users.update(user, **changes)
                out = UserPublic.from_model(user)
        except InternalServiceError as exc:
            cause = exc.__cause__
            if isinstance(cause, IntegrityError) and violates(
                cause, "uq_users_email", columns=("users.email",)
            ):
                raise UserAlreadyExistsError("Email already registered", at=at) from cause
            raise

        if out.email != old_email:
            self.registry.move(old_email, out.email)

        log.info("Profile updated", extra={"at": at})
        return out

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _get(self, raw_id: object, *, at: str) -> User:
        user_id = parse_user_id(raw_id, at=at)
        with self.collaborator_faults(at), self.ro_uow() as uow:
            user = uow.users.get(user_id)
        return self._require(user, raw_id, at=at)

    @staticmethod
    def _require(user: User | None, raw_id: object, *, at: str) -> User:
        if user is None:
            raise UserNotFoundError(f"User {raw_id} not found", at=at)
        return user
