"""Persistence-only repository base for SQLAlchemy 2.x.

Repositories flush but never commit or roll back: the unit of work owning
the session decides the transaction's fate. Updates go through a
per-repository whitelist, and listings are ordered deterministically with
the primary key as the last tiebreaker.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from lumir_auth.core.extensions import db

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Page(Generic[E]):
    """One slice of a listing plus the size of the whole result.

    :param items: Entities on this page.
    :param total: Rows matching the query across all pages.
    :param page: 1-based page number actually served.
    :param size: Page size actually served.
    """

    items: Sequence[E]
    total: int
    page: int
    size: int


def order_by_tokens(
    stmt: Select[Any],
    columns: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    tiebreaker: InstrumentedAttribute[Any],
) -> Select[Any]:
    """
    Order ``stmt`` by whitelisted column tokens (``"-name"`` is descending).

    Tokens outside ``columns`` are dropped silently. ``tiebreaker`` is always
    appended so that equal keys never shuffle between pages.
    """
    clauses = []
    for token in tokens:
        name = token.lstrip("-")
        column = columns.get(name)
        if column is not None:
            clauses.append(column.desc() if token.startswith("-") else column.asc())
    return stmt.order_by(*clauses, tiebreaker.asc())


class BaseRepository(Generic[E]):
    """Generic repository over a single mapped model.

    Subclasses set :attr:`model`, :attr:`updatable` and optionally
    :attr:`sortable`.
    """

    model: ClassVar[type[Any]]
    #: Attribute names :meth:`update` may assign
    updatable: ClassVar[frozenset[str]] = frozenset()
    #: Public sort token -> column
    sortable: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so generated defaults (the id) are set."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return cast(E | None, self.session.get(self.model, entity_id))

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.session.flush()

    def update(self, instance: E, **changes: Any) -> E:
        """Assign whitelisted attributes and flush.

        ``setattr`` keeps the model's ``@validates`` hooks in play.

        :raises ValueError: If a key is not in :attr:`updatable`.
        """
        rejected = sorted(set(changes) - self.updatable)
        if rejected:
            raise ValueError(f"Unknown or non-updatable fields: {rejected}")
        for name, value in changes.items():
            setattr(instance, name, value)
        self.session.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def paginate(self, *, page: int, size: int, sort: Iterable[str] = ()) -> Page[E]:
        """Return page ``page`` of ``size`` rows (both clamped to ``>= 1``)."""
        page, size = max(int(page), 1), max(int(size), 1)
        base = select(self.model)

        total = self.session.execute(
            select(func.count()).select_from(base.subquery())
        ).scalar_one()
        stmt = order_by_tokens(base, self.sortable, sort, tiebreaker=self.model.id)
        rows = self.session.execute(stmt.limit(size).offset((page - 1) * size)).scalars().all()
        return Page(items=list(rows), total=int(total), page=page, size=size)
