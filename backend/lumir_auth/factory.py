"""Flask application factory for the auth service."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from lumir_auth import cli
from lumir_auth.api import init_app as mount_api
from lumir_auth.core import container as container_mod
from lumir_auth.core import cors, errors, extensions
from lumir_auth.core import logger as logging_mod
from lumir_auth.core.config import BaseConfig, get_config
from lumir_auth.core.container import Container


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    container: Container | None = None,
) -> Flask:
    """Assemble the application.

    :param config: Config class, object or import path. ``APP_ENV`` decides
        when omitted.
    :param container: Collaborators to use instead of the ones derived from
        the configuration (tests inject in-memory ones).
    """
    app = Flask(__name__)
    app.config.from_object(config if config is not None else get_config())
    logging_mod.configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
            app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1
        )

    # Order matters: the container reads the Redis client set up by extensions
    extensions.init_app(app)
    container_mod.init_app(app, container)
    logging_mod.init_app(app)
    cors.init_app(app)
    mount_api(app)
    errors.init_app(app)
    cli.init_app(app)
    return app
