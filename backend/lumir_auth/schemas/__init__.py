"""Convenience exports for API schemas."""

from __future__ import annotations

from .auth import SignInSchema, SignUpSchema, TokenPairSchema, strong_password
from .mail import SendMailSchema
from .user import (
    MetaSchema,
    PageQuerySchema,
    SignUpResponseSchema,
    UserIdQuerySchema,
    UserPageSchema,
    UserSchema,
    UserUpdateSchema,
)

__all__ = [
    "SignInSchema",
    "SignUpSchema",
    "TokenPairSchema",
    "strong_password",
    "SendMailSchema",
    "MetaSchema",
    "PageQuerySchema",
    "SignUpResponseSchema",
    "UserIdQuerySchema",
    "UserPageSchema",
    "UserSchema",
    "UserUpdateSchema",
]
