"""Environment-driven settings, one class per deployment flavour.

``APP_ENV`` selects the class (``development``, ``testing``, ``production``);
individual values come from environment variables, optionally loaded from a
``.env`` file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"

# No-op when the file is absent
load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag; ``1/true/yes/y/on`` (any case) are true."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer; unset or blank falls back to ``default``."""
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def env_seconds(name: str, default: timedelta) -> timedelta:
    """Read a duration expressed in whole seconds."""
    return timedelta(seconds=env_int(name, int(default.total_seconds())))


class BaseConfig:
    """Settings shared by every environment.

    Tokens
    ------
    JWT_SECRET_KEY
        Process-wide HS256 secret signing both access and refresh tokens.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES
        24 hours and 7 days. The refresh lifetime doubles as the TTL of the
        refresh registry entry.
    REFRESH_TOKEN_HEADER
        Header carrying the refresh token next to ``Authorization: Bearer``.

    Storage
    -------
    SQLALCHEMY_DATABASE_URI
        User directory (``DATABASE_URL``).
    REDIS_URL
        Session store. Unset means a process-local store, which is only
        correct with a single worker process.
    REQUIRE_REDIS
        Fail at startup instead of falling back to the process-local store.
        Always on in production.

    Mail
    ----
    MAIL_ENABLED
        ``False`` logs notifications instead of sending them.
    SMTP_*
        Relay settings; port 465 switches to implicit TLS.
    """

    API_BASE_PREFIX = os.getenv("API_BASE_PREFIX", "")
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = env_seconds("JWT_ACCESS_TOKEN_EXPIRES", timedelta(hours=24))
    JWT_REFRESH_TOKEN_EXPIRES = env_seconds("JWT_REFRESH_TOKEN_EXPIRES", timedelta(days=7))
    REFRESH_TOKEN_HEADER = os.getenv("REFRESH_TOKEN_HEADER", "refreshtoken")

    # Passwords
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 10)

    # Storage
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL")
    #: Refuse to start on the process-local session store
    REQUIRE_REDIS = env_bool("REQUIRE_REDIS", False)

    # HTTP
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Mail
    MAIL_ENABLED = env_bool("MAIL_ENABLED", False)
    MAIL_WORKERS = env_int("MAIL_WORKERS", 2)
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Lumir")
    MAIL_FROM_ADDRESS = os.getenv("MAIL_FROM_ADDRESS", "no-reply@localhost")
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = env_int("SMTP_PORT", 587)
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_STARTTLS = env_bool("SMTP_STARTTLS", True)
    SMTP_TIMEOUT = env_int("SMTP_TIMEOUT", 30)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Automated tests.

    In-memory SQLite (unless ``TEST_DATABASE_URL``), no Redis, no SMTP and a
    minimal bcrypt work factor.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    REFRESH_TOKEN_HEADER = "refreshtoken"
    REDIS_URL = None
    REQUIRE_REDIS = False
    MAIL_ENABLED = False
    BCRYPT_ROUNDS = 4
    USE_PROXYFIX = False
    API_BASE_PREFIX = ""


class ProductionConfig(BaseConfig):
    """Production: SQL echo off and a shared Redis session store required."""

    SQLALCHEMY_ECHO = False
    REQUIRE_REDIS = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the class named by ``APP_ENV``; unknown or unset means development."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)
