# lumir_auth/services/auth/credentials.py
from __future__ import annotations

from lumir_auth.models.user import User
from lumir_auth.services._shared.base import BaseService
from lumir_auth.services._shared.errors import (
    InternalServiceError,
    PasswordMismatchError,
    UserNotFoundError,
)
from lumir_auth.services._shared.ports.password_hasher import PasswordHasher
from lumir_auth.services.auth.password_policy import exceeds_byte_limit


class CredentialValidator(BaseService):
    """
    Check an email/password pair against the stored hash.

    Both failure modes are bad requests rather than authentication errors:
    an unknown email raises :class:`UserNotFoundError`, a wrong password
    raises :class:`PasswordMismatchError`.
    """

    AT = "CredentialValidator.validate"

    def __init__(self, *, password_hasher: PasswordHasher) -> None:
        super().__init__()
        self.hasher = password_hasher

    def validate(self, email: str, password: str) -> User:
        """
        Return the user owning ``email`` when ``password`` matches.

        :param email: Login email (exact match).
        :param password: Plaintext candidate.
        :returns: The matching user record.
        :raises UserNotFoundError: If no user has this email.
        :raises PasswordMismatchError: If the password does not match, including
            passwords too long to have ever been stored.
        :raises InternalServiceError: If the hashing library fails.
        """
        with self.collaborator_faults(self.AT), self.ro_uow() as uow:
            user = uow.users.get_by_email(email)
        if user is None:
            raise UserNotFoundError(f"No user registered with email {email!r}", at=self.AT)
        if exceeds_byte_limit(password):
            raise PasswordMismatchError(at=self.AT)

        try:
            matches = self.hasher.verify(password, user.password_hash)
        except (ValueError, TypeError) as exc:
            raise InternalServiceError(f"Password verification failed: {exc}", at=self.AT) from exc

        if not matches:
            raise PasswordMismatchError(at=self.AT)
        return user
