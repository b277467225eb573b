"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from lumir_auth.api.deps import json_response
from lumir_auth.api.policy import api_route
from lumir_auth.core.container import get_container
from lumir_auth.core.extensions import db

bp = Blueprint("health", __name__)


@api_route(bp, "/health", methods=["GET"], public=True)
def healthcheck():
    """Return application, database and session store health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    store_status = "ok" if get_container().session_store.ping() else "fail"
    status = "ok" if db_status == store_status == "ok" else "degraded"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": status, "db": db_status, "sessionStore": store_status, "version": version}
    return json_response(payload, status=200 if status == "ok" else 503)
