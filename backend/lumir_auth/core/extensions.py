"""Flask extension singletons and the optional Redis connection."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

#: ``app.extensions`` slot holding the Redis client, when one is configured
REDIS_EXTENSION_KEY = "redis"

# Deterministic constraint names; the sign-up race check matches on them
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()


def _connect_redis(url: str) -> redis.Redis:
    """Open a client for ``url`` and fail fast when the server is unreachable."""
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Session store unreachable at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the user directory database, migrations, JWT and the session store client.

    Parameters
    ----------
    app: flask.Flask
        Application to configure. Importing :mod:`lumir_auth.models` here
        registers the ``users`` table on :data:`metadata` before Alembic
        inspects it.

    Notes
    -----
    Without ``REDIS_URL`` no client is stored and the container falls back to
    the in-process session store.
    """
    db.init_app(app)

    from lumir_auth import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    redis_url = app.config.get("REDIS_URL")
    if redis_url:
        app.extensions[REDIS_EXTENSION_KEY] = _connect_redis(redis_url)
    else:
        app.extensions.pop(REDIS_EXTENSION_KEY, None)


def get_redis(app: Flask | None = None) -> redis.Redis | None:
    """Return the Redis client of ``app`` (default: current app), if configured."""
    target = app or current_app
    return target.extensions.get(REDIS_EXTENSION_KEY)
