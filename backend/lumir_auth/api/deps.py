"""Request-scoped helpers shared by the v1 views."""

from __future__ import annotations

from typing import Any

from flask import Response, g, jsonify, request

from lumir_auth.core.container import get_container
from lumir_auth.services._shared.base import ServiceContext
from lumir_auth.services.auth import AuthService, SessionTokensIn
from lumir_auth.services.mail import MailService
from lumir_auth.services.users import UserService


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Serialize ``payload`` with an explicit status code."""

    response = jsonify(payload)
    response.status_code = status
    return response


def json_body() -> dict[str, Any]:
    """Return the JSON object body, or ``{}`` when absent or not an object.

    An empty mapping lets the schema report every required field instead of
    failing on the content type.
    """
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def service_context() -> ServiceContext:
    """Context populated by the route policy hook (anonymous on public routes)."""
    return g.get("service_ctx") or ServiceContext(request_id=g.get("request_id"))


def session_tokens() -> SessionTokensIn:
    """Token pair captured by the route policy hook."""
    return SessionTokensIn(
        access_token=g.get("access_token"),
        refresh_token=g.get("refresh_token"),
    )


def current_user_id() -> str:
    return str(g.claims["sub"])


def auth_service() -> AuthService:
    return get_container().auth_service(service_context())


def user_service() -> UserService:
    return get_container().user_service(service_context())


def mail_service() -> MailService:
    return get_container().mail_service()
