"""Composition root: builds the collaborator graph once per application."""

from __future__ import annotations

import atexit
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass

from flask import Flask, current_app, render_template

from lumir_auth.core import extensions
from lumir_auth.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from lumir_auth.infra.mail.smtp_notifier import LoggingNotifier, SMTPNotifier
from lumir_auth.infra.redis.redis_session_store import RedisSessionStore
from lumir_auth.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from lumir_auth.services._shared.base import ServiceContext
from lumir_auth.services._shared.ports import (
    InMemorySessionStore,
    Notifier,
    PasswordHasher,
    SessionStore,
    TokenProvider,
)
from lumir_auth.services.auth import AuthService, AuthTokenConfig
from lumir_auth.services.mail import MailService
from lumir_auth.services.users import UserService

EXTENSION_KEY = "lumir_auth"


@dataclass(slots=True)
class Container:
    """
    Long-lived collaborators shared by every request.

    Services are cheap and built per request through the ``*_service``
    helpers; only the adapters below live for the whole process.

    :ivar token_provider: JWT issuing/verifying adapter.
    :ivar session_store: Redis or in-process expiring store.
    :ivar password_hasher: bcrypt adapter.
    :ivar notifier: SMTP or logging mail adapter.
    :ivar mail_executor: Pool running mail deliveries.
    :ivar token_cfg: Access/refresh lifetimes.
    """

    token_provider: TokenProvider
    session_store: SessionStore
    password_hasher: PasswordHasher
    notifier: Notifier
    mail_executor: Executor
    token_cfg: AuthTokenConfig

    def auth_service(self, ctx: ServiceContext | None = None) -> AuthService:
        return AuthService(
            token_provider=self.token_provider,
            session_store=self.session_store,
            password_hasher=self.password_hasher,
            token_cfg=self.token_cfg,
            ctx=ctx,
        )

    def user_service(self, ctx: ServiceContext | None = None) -> UserService:
        return UserService(
            session_store=self.session_store,
            password_hasher=self.password_hasher,
            refresh_ttl=self.token_cfg.refresh_expires,
            ctx=ctx,
        )

    def mail_service(self) -> MailService:
        return MailService(
            notifier=self.notifier,
            executor=self.mail_executor,
            render=render_template,
        )


def build_container(app: Flask) -> Container:
    """
    Build adapters from ``app.config``.

    Notes
    -----
    - Redis is used when ``REDIS_URL`` configured a client in
      :mod:`lumir_auth.core.extensions`; otherwise the in-process store,
      unless ``REQUIRE_REDIS`` is set.

    :raises RuntimeError: If ``REQUIRE_REDIS`` is set without ``REDIS_URL``.
    - SMTP delivery only when ``MAIL_ENABLED``; otherwise mails are logged.
    """
    cfg = app.config
    token_cfg = AuthTokenConfig(
        access_expires=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
        refresh_expires=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
    )

    session_store: SessionStore
    client = extensions.get_redis(app)
    if client is not None:
        session_store = RedisSessionStore(client)
    elif cfg.get("REQUIRE_REDIS"):
        raise RuntimeError(
            "REDIS_URL must be set: the session store has to be shared by every worker."
        )
    else:
        session_store = InMemorySessionStore()

    notifier: Notifier
    if cfg.get("MAIL_ENABLED"):
        notifier = SMTPNotifier(
            host=cfg["SMTP_HOST"],
            port=int(cfg["SMTP_PORT"]),
            from_name=cfg["MAIL_FROM_NAME"],
            from_address=cfg["MAIL_FROM_ADDRESS"],
            user=cfg.get("SMTP_USER"),
            password=cfg.get("SMTP_PASSWORD"),
            starttls=bool(cfg.get("SMTP_STARTTLS", True)),
            timeout=int(cfg.get("SMTP_TIMEOUT", 30)),
        )
    else:
        notifier = LoggingNotifier()

    executor = ThreadPoolExecutor(
        max_workers=int(cfg.get("MAIL_WORKERS", 2)), thread_name_prefix="mail"
    )
    atexit.register(executor.shutdown, wait=False)

    return Container(
        token_provider=JWTTokenProvider(),
        session_store=session_store,
        password_hasher=BcryptPasswordHasher(rounds=int(cfg.get("BCRYPT_ROUNDS", 10))),
        notifier=notifier,
        mail_executor=executor,
        token_cfg=token_cfg,
    )


def init_app(app: Flask, container: Container | None = None) -> Container:
    """Register ``container`` (or a freshly built one) on the application."""
    built = container or build_container(app)
    app.extensions[EXTENSION_KEY] = built
    return built


def get_container() -> Container:
    """Return the container of the current application."""
    container = current_app.extensions.get(EXTENSION_KEY)
    if container is None:
        raise RuntimeError("Container is not initialized. Call init_app() first.")
    return container
