"""Plumbing shared by the auth, user and mail services."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from lumir_auth.services._shared.errors import InternalServiceError, ServiceError
from lumir_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """Who is calling, and under which request id.

    :param actor_id: ``sub`` of the verified access token; ``None`` for
        anonymous calls such as sign-up.
    :param request_id: Id echoed in logs and error bodies.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """Common base for services that read or write the user directory.

    Subclasses open a unit of work per operation and never reach for
    ``db.session`` directly; HTTP and ORM details stay out of their signatures.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    @contextmanager
    def collaborator_faults(self, at: str) -> Iterator[None]:
        """Turn an ``SQLAlchemyError`` raised inside the block into
        :class:`InternalServiceError` located at ``at``.

        :class:`ServiceError` subclasses are re-raised as they are.
        """
        try:
            yield
        except ServiceError:
            raise
        except SQLAlchemyError as exc:
            raise InternalServiceError(
                f"Database failure: {type(exc).__name__}", at=at
            ) from exc
