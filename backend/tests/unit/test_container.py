"""Unit tests for the composition root."""

from __future__ import annotations

import pytest
from lumir_auth.core.config import ProductionConfig, TestingConfig
from lumir_auth.core.container import EXTENSION_KEY, get_container
from lumir_auth.factory import create_app
from lumir_auth.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from lumir_auth.infra.mail.smtp_notifier import LoggingNotifier, SMTPNotifier
from lumir_auth.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from lumir_auth.services._shared.ports import InMemorySessionStore


class MailConfig(TestingConfig):
    MAIL_ENABLED = True
    SMTP_HOST = "smtp.example.com"
    SMTP_PORT = 465


def test_testing_config_builds_local_collaborators():
    app = create_app(TestingConfig)
    container = app.extensions[EXTENSION_KEY]

    assert isinstance(container.session_store, InMemorySessionStore)
    assert isinstance(container.notifier, LoggingNotifier)
    assert isinstance(container.token_provider, JWTTokenProvider)
    assert isinstance(container.password_hasher, BcryptPasswordHasher)
    assert container.password_hasher.rounds == 4
    container.mail_executor.shutdown(wait=True)


def test_mail_enabled_selects_smtp():
    app = create_app(MailConfig)
    container = app.extensions[EXTENSION_KEY]

    assert isinstance(container.notifier, SMTPNotifier)
    assert container.notifier.port == 465
    container.mail_executor.shutdown(wait=True)


def test_injected_container_is_used(app, container):
    with app.app_context():
        assert get_container() is container


def test_services_share_the_session_store(container):
    auth = container.auth_service()
    users = container.user_service()
    assert auth.registry.store is users.registry.store is container.session_store


class ProductionWithoutRedis(ProductionConfig):
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = None


def test_production_refuses_process_local_session_store():
    with pytest.raises(RuntimeError, match="REDIS_URL"):
        create_app(ProductionWithoutRedis)


def test_production_config_requires_redis():
    assert ProductionConfig.REQUIRE_REDIS is True
    assert TestingConfig.REQUIRE_REDIS is False
