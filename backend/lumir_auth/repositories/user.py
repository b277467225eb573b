"""User repository backing the user directory."""

from __future__ import annotations

from typing import cast

from sqlalchemy import exists, select

from lumir_auth.models.user import User
from lumir_auth.repositories.base import BaseRepository, Page


class UserRepository(BaseRepository[User]):
    """Persistence for :class:`User`.

    Email lookups are exact, case-sensitive matches after trimming. The role
    is fixed at creation and therefore absent from :attr:`updatable`.
    """

    model = User
    updatable = frozenset({"email", "name", "company", "password_hash"})
    sortable = {"created_at": User.created_at, "email": User.email, "name": User.name}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email.

        :param email: Email address (surrounding whitespace ignored).
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == email.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(exists().where(User.email == email.strip()))
        return bool(self.session.execute(stmt).scalar())

    def list_page(self, page: int, size: int) -> Page[User]:
        """Users ordered by creation time, oldest first."""
        return self.paginate(page=page, size=size, sort=["created_at"])
