"""User-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from lumir_auth.schemas.auth import strong_password


class UserSchema(Schema):
    """Public projection of a user (never the password hash)."""

    id = fields.String(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    company = fields.String(allow_none=True)
    role = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)


class SignUpResponseSchema(UserSchema):
    """Projection returned by sign-up."""


class UserUpdateSchema(Schema):
    """Partial profile update; at least one field is required."""

    name = fields.String(validate=validate.Length(min=1, max=100))
    email = fields.Email(validate=validate.Length(max=254))
    company = fields.String(validate=validate.Length(max=100))
    password = fields.String(validate=strong_password)

    @validates_schema
    def not_empty(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.")


class UserIdQuerySchema(Schema):
    """``?id=`` query parameter of the lookup endpoint."""

    id = fields.String(required=True, validate=validate.Length(min=1))


class PageQuerySchema(Schema):
    """Validate ``page``/``size`` query parameters."""

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    size = fields.Integer(load_default=10, validate=validate.Range(min=1, max=100))


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    page = fields.Integer(required=True)
    size = fields.Integer(required=True)
    total = fields.Integer(required=True)
    has_prev = fields.Boolean(data_key="hasPrev")
    has_next = fields.Boolean(data_key="hasNext")


class UserPageSchema(Schema):
    """Paged list of users."""

    data = fields.List(fields.Nested(UserSchema), required=True)
    meta = fields.Nested(MetaSchema, required=True)
