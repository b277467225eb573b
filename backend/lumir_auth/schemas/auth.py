"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from lumir_auth.models.user import UserRole
from lumir_auth.services.auth.password_policy import (
    MAX_PASSWORD_BYTES,
    check_password_strength,
    exceeds_byte_limit,
)

#: Roles a caller may pick for themselves at sign-up
SELF_SERVICE_ROLES = (UserRole.USER, UserRole.GUEST)


def strong_password(value: str) -> None:
    """Field validator applying the password strength policy."""
    violations = check_password_strength(value)
    if violations:
        raise ValidationError(violations)


def fits_hash_input(value: str) -> None:
    """Reject passwords bcrypt could not consume in full."""
    if exceeds_byte_limit(value):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")


class SignUpSchema(Schema):
    """Input payload for account creation."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=strong_password)
    password_confirmation = fields.String(required=True, data_key="passwordConfirmation")
    company = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))
    # ADMIN accounts come from `flask users create-admin`
    role = fields.Enum(
        UserRole,
        load_default=UserRole.USER,
        validate=validate.OneOf(SELF_SERVICE_ROLES, error="Role must be USER or GUEST."),
    )

    @validates_schema
    def passwords_match(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("password") != data.get("password_confirmation"):
            raise ValidationError(
                "Password and confirmation do not match.", field_name="passwordConfirmation"
            )


class SignInSchema(Schema):
    """Input payload for sign-in."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, validate=[validate.Length(min=1), fits_hash_input]
    )


class TokenPairSchema(Schema):
    """Response payload with the access/refresh pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
