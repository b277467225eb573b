"""Mail request schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class SendMailSchema(Schema):
    """Recipient and link for a templated email."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    redirection = fields.String(required=True, validate=validate.Length(min=1, max=2048))
