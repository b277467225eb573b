"""Pytest fixtures wiring an isolated application per test.

Each test gets a fresh application, a fresh in-memory SQLite database and
fresh collaborators (in-process session store, recording notifier), so no
state leaks between cases.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest
from flask import Flask
from lumir_auth.core.config import TestingConfig
from lumir_auth.core.container import Container
from lumir_auth.core.extensions import db as _db
from lumir_auth.factory import create_app
from lumir_auth.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from lumir_auth.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from lumir_auth.services._shared.ports import InMemorySessionStore, RecordingNotifier
from lumir_auth.services.auth import AuthTokenConfig


@pytest.fixture()
def container() -> Generator[Container, None, None]:
    """Collaborators shared by the services of one test application.

    Notes
    -----
    - The session store is process-local; no Redis server is needed.
    - Mail is recorded instead of delivered. Tests that assert on mail
      call ``container.mail_executor.shutdown(wait=True)`` first.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mail-test")
    built = Container(
        token_provider=JWTTokenProvider(),
        session_store=InMemorySessionStore(),
        password_hasher=BcryptPasswordHasher(rounds=4),
        notifier=RecordingNotifier(),
        mail_executor=executor,
        token_cfg=AuthTokenConfig(),
    )
    yield built
    executor.shutdown(wait=True)


@pytest.fixture()
def app(container: Container) -> Generator[Flask, None, None]:
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied, tables
        created and logging noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, container=container)
    application.logger.setLevel("WARNING")
    with application.app_context():
        _db.create_all()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(app: Flask) -> Generator[Any, None, None]:
    """Push an application context and expose the scoped session.

    Service, repository and unit-of-work tests run inside this context;
    HTTP tests use :func:`client` instead so each request gets its own.
    """
    with app.app_context():
        yield _db.session
        _db.session.remove()


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
