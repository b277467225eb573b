"""Read models returned by the user directory services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lumir_auth.models.user import User


@dataclass(frozen=True, slots=True)
class UserPublic:
    """What callers may see of a user; the password hash is never copied."""

    id: str
    name: str
    email: str
    company: str | None
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublic:
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            company=user.company,
            role=user.role.value,
            created_at=user.created_at,
        )


@dataclass(frozen=True, slots=True)
class PageMeta:
    """Position of a listing page.

    ``page`` is 1-based; ``has_prev`` and ``has_next`` are derived from
    ``total`` so clients can render pagers without extra arithmetic.
    """

    page: int
    size: int
    total: int
    has_prev: bool
    has_next: bool


@dataclass(frozen=True, slots=True)
class UserPageOut:
    data: list[UserPublic]
    meta: PageMeta
