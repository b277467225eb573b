"""Unit of Work contract used by the application services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lumir_auth.repositories import UserRepository


class UnitOfWork(ABC):
    """
    Transactional boundary of one use case.

    Repositories exposed on the unit (``users``) share its transaction.
    Entering returns the unit itself; leaving decides the transaction's fate.
    """

    users: UserRepository

    def __enter__(self) -> UnitOfWork:
        return self

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
