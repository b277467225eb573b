"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. Each carries a machine-readable ``at`` tag naming the operation that
raised it (``"AuthService.sign_in"``); the tag is logged at the boundary but
never returned to clients.

The translation to HTTP responses is handled by
``lumir_auth/core/errors.py`` via ``translate_service_error()``.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violates(
    exc: IntegrityError, constraint_name: str, *, columns: tuple[str, ...] = ()
) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').
    columns : tuple[str, ...]
        ``table.column`` names covered by the constraint. SQLite reports
        these instead of the constraint name.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    orig = exc.orig
    reported = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if reported:
        return bool(reported == constraint_name)
    message = str(orig) if orig is not None else ""
    if constraint_name in message:
        return True
    _, marker, failed = message.partition("UNIQUE constraint failed: ")
    return bool(marker and columns) and {c.strip() for c in failed.split(",")} == set(columns)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :param message: Diagnostic message for server logs.
    :type message: str
    :param at: Location tag of the failing operation.
    :type at: str | None

    Notes
    -----
    - These are *not* HTTP errors.
    - Unknown subclasses are treated as bad requests at the boundary.
    """

    default_message = "Service error"

    def __init__(self, message: str | None = None, *, at: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.at = at


# --------------------------------------------------------------------------- #
# Bad requests
# --------------------------------------------------------------------------- #


class UserNotFoundError(ServiceError):
    """Raised when no user matches the given email or id."""

    default_message = "User not found"


class PasswordMismatchError(ServiceError):
    """Raised when a plaintext password does not match the stored hash."""

    default_message = "Password does not match"


class UserAlreadyExistsError(ServiceError):
    """Raised when an email is already registered."""

    default_message = "User already exists"


class PasswordConfirmationMismatchError(ServiceError):
    """Raised when ``password`` and ``passwordConfirmation`` differ."""

    default_message = "Password and confirmation do not match"


class RefreshTokenAlreadyExistsError(ServiceError):
    """Raised when a live refresh token is already registered for the user."""

    default_message = "Refresh token already exists"


class WeakPasswordError(ServiceError):
    """
    Raised when a password violates the strength policy.

    :param violations: Human-readable policy violations.
    :type violations: list[str]
    """

    default_message = "Password does not meet the strength policy"

    def __init__(self, violations: list[str], *, at: str | None = None) -> None:
        super().__init__(f"{self.default_message}: {'; '.join(violations)}", at=at)
        self.violations = list(violations)


class InvalidUserIdError(ServiceError):
    """Raised when a user id is not a well-formed identifier."""

    default_message = "User id is invalid"


class EmptyPageError(ServiceError):
    """Raised when a requested page holds no users."""

    default_message = "Page is empty"


class EmptyUpdateError(ServiceError):
    """Raised when a profile update carries no fields."""

    default_message = "Nothing to update"


# --------------------------------------------------------------------------- #
# Authentication / authorization
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Raised for missing, invalid, expired or revoked tokens."""

    default_message = "Unauthorized"


class AuthorizationError(ServiceError):
    """Raised when the caller's role is not allowed on a resource."""

    default_message = "Forbidden"


# --------------------------------------------------------------------------- #
# Collaborator faults
# --------------------------------------------------------------------------- #


class InternalServiceError(ServiceError):
    """Raised when hashing, signing, the session store or the database fails."""

    default_message = "Internal error"
