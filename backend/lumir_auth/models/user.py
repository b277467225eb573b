"""User record held by the user directory."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from lumir_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class UserRole(str, Enum):
    """Roles recognised by the route policy table."""

    USER = "USER"
    ADMIN = "ADMIN"
    GUEST = "GUEST"


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Identity record: credentials, display data and role.

    The entity carries no password logic; hashing and verification live in
    the :class:`~lumir_auth.services._shared.ports.PasswordHasher` adapters.

    Fields
    ------
    email : str
        Login email. Trimmed; equality is case-sensitive.
    name : str
        Display name.
    password_hash : str
        bcrypt hash. The plaintext is never stored.
    company : str | None
        Optional organization label.
    role : UserRole
        Authorization role, ``USER`` by default.
    created_at : datetime
        Creation timestamp (from mixin).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    company: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="enum_user_role", native_enum=False, create_constraint=True),
        nullable=False,
        default=UserRole.USER,
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Trim and sanity-check the email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()
