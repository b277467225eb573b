"""Factory Boy helpers wired to the application's scoped SQLAlchemy session."""

from __future__ import annotations

import factory
from lumir_auth.core.extensions import db


def _current_session():
    """Return the scoped session of the active application context.

    Raises
    ------
    RuntimeError
        If factories are used outside an application context (Flask-SQLAlchemy
        raises when no app is pushed).
    """
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class persisting factory objects through the scoped session."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy, so each object lands in the
        # session of whichever application context is active.
        sqlalchemy_session_factory = _current_session
        sqlalchemy_session_persistence = "commit"
