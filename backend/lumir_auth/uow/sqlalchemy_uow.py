"""
Units of work over the Flask-SQLAlchemy scoped session.

Both flavours bind their repositories to ``db.session``; they differ only
in how the block ends.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from lumir_auth.core.extensions import db
from lumir_auth.repositories import UserRepository
from lumir_auth.uow.base import UnitOfWork


class _ScopedSessionUnit(UnitOfWork):
    """Repositories bound to the request's scoped session."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()

    def _has_pending_writes(self) -> bool:
        return bool(self.session.new or self.session.dirty or self.session.deleted)


class SQLAlchemyUnitOfWork(_ScopedSessionUnit):
    """Commit when the block exits cleanly; roll back on any exception."""

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except BaseException:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class SQLAlchemyReadOnlyUnitOfWork(_ScopedSessionUnit):
    """
    Read-only scope.

    Leaving the block with pending ORM changes discards them and raises;
    ``commit()`` always raises. A clean exit neither commits nor rolls back,
    so entities loaded inside stay usable afterwards.
    """

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and self._has_pending_writes():
            self.rollback()
            raise RuntimeError("Write attempted inside a read-only unit of work.")

    def commit(self) -> None:
        raise RuntimeError("commit() is not allowed in a read-only unit of work.")
