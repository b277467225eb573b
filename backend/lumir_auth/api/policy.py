"""Explicit per-route access policy.

Routes are registered through :func:`api_route`, which records a
:class:`RoutePolicy` next to the Flask rule. A single ``before_request``
hook installed by :func:`init_app` enforces the table:

- public routes pass untouched;
- protected routes need ``Authorization: Bearer <access>`` and the refresh
  token header, a verifiable access token and no blacklist entry (401);
  routes flagged ``allow_expired`` accept an access token past its expiry;
- role-gated routes additionally need the caller's current role, read from
  the user directory, to be allowed (403).

The verified claims and both tokens are exposed on :data:`flask.g`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Blueprint, Flask, current_app, g, request

from lumir_auth.core.container import get_container
from lumir_auth.models.user import UserRole
from lumir_auth.services._shared.base import ServiceContext
from lumir_auth.services._shared.errors import AuthenticationError, AuthorizationError

F = TypeVar("F", bound=Callable[..., Any])

# Endpoints Flask serves on its own
_BUILTIN_ENDPOINTS = frozenset({"static"})


@dataclass(frozen=True, slots=True)
class RoutePolicy:
    """
    Access requirements of one endpoint.

    :param endpoint: Flask endpoint name (``"<blueprint>.<view>"``).
    :param rule: Rule relative to the blueprint prefix.
    :param methods: Allowed HTTP methods.
    :param auth_required: ``False`` for public routes.
    :param allowed_roles: Roles admitted; empty means any authenticated role.
    :param allow_expired: Accept an expired (but signed and unrevoked) access
        token; the view then proves freshness with the refresh token.
    """

    endpoint: str
    rule: str
    methods: tuple[str, ...]
    auth_required: bool = True
    allowed_roles: frozenset[UserRole] = frozenset()
    allow_expired: bool = False


#: endpoint -> policy, filled at import time by :func:`api_route`
ROUTE_POLICIES: dict[str, RoutePolicy] = {}


def api_route(
    bp: Blueprint,
    rule: str,
    *,
    methods: Iterable[str],
    public: bool = False,
    roles: Iterable[UserRole] = (),
    allow_expired: bool = False,
) -> Callable[[F], F]:
    """
    Register ``rule`` on ``bp`` together with its access policy.

    :param bp: Target blueprint.
    :param rule: URL rule relative to the blueprint prefix.
    :param methods: HTTP methods served by the view.
    :param public: Skip authentication entirely.
    :param roles: Roles allowed on the route (implies authentication).
    :param allow_expired: Let an expired access token through the hook.
    :raises ValueError: If a public route declares roles or ``allow_expired``.
    """
    allowed = frozenset(roles)
    if public and (allowed or allow_expired):
        raise ValueError(f"Public route {rule!r} cannot carry token requirements.")
    method_list = tuple(m.upper() for m in methods)

    def decorator(view: F) -> F:
        endpoint = f"{bp.name}.{view.__name__}"
        ROUTE_POLICIES[endpoint] = RoutePolicy(
            endpoint=endpoint,
            rule=rule,
            methods=method_list,
            auth_required=not public,
            allowed_roles=allowed,
            allow_expired=allow_expired,
        )
        bp.add_url_rule(rule, view_func=view, methods=list(method_list))
        return view

    return decorator


def bearer_token() -> str | None:
    """Return the token of an ``Authorization: Bearer`` header, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def refresh_token_header() -> str | None:
    name = current_app.config.get("REFRESH_TOKEN_HEADER", "refreshtoken")
    value = request.headers.get(name, "").strip()
    return value or None


def enforce_route_policy() -> None:
    """``before_request`` hook applying :data:`ROUTE_POLICIES`."""
    endpoint = request.endpoint
    if endpoint is None or endpoint in _BUILTIN_ENDPOINTS or request.method == "OPTIONS":
        # Unmatched routes fall through to the 404/405 handlers
        return

    # Unknown endpoints are treated as protected
    policy = ROUTE_POLICIES.get(endpoint) or RoutePolicy(
        endpoint=endpoint, rule=str(request.url_rule), methods=(request.method,)
    )
    if not policy.auth_required:
        return

    at = f"RoutePolicy.{endpoint}"
    access, refresh = bearer_token(), refresh_token_header()
    if not access or not refresh:
        raise AuthenticationError("Bearer access token and refresh token are required", at=at)

    container = get_container()
    auth = container.auth_service()
    claims = auth.decode_access_token(access, allow_expired=policy.allow_expired)
    if auth.is_blacklisted(access):
        raise AuthenticationError("Access token has been revoked", at=at)

    g.access_token = access
    g.refresh_token = refresh
    g.claims = claims
    g.service_ctx = ServiceContext(actor_id=str(claims.get("sub")), request_id=g.get("request_id"))

    if policy.allowed_roles:
        profile = container.user_service(g.service_ctx).get_profile(str(claims.get("sub")))
        if UserRole(profile.role) not in policy.allowed_roles:
            raise AuthorizationError(
                f"Role {profile.role} is not allowed on {policy.rule}", at=at
            )


def init_app(app: Flask) -> None:
    """Install the single dispatch-time policy check."""
    app.before_request(enforce_route_policy)


__all__ = [
    "ROUTE_POLICIES",
    "RoutePolicy",
    "api_route",
    "bearer_token",
    "enforce_route_policy",
    "init_app",
    "refresh_token_header",
]
