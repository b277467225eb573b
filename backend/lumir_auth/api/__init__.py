"""HTTP surface: the route policy hook plus the versioned blueprints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def mount_blueprints(
    app: Flask, base_prefix: str, entries: Iterable[tuple[Blueprint, str]]
) -> None:
    """Register each ``(blueprint, prefix)`` below ``base_prefix``.

    An empty prefix on both sides mounts the blueprint at the root, which is
    how ``/health`` is served.
    """
    for bp, prefix in entries:
        parts = [segment.strip("/") for segment in (base_prefix, prefix)]
        app.register_blueprint(bp, url_prefix="/" + "/".join(p for p in parts if p))


def init_app(app: Flask) -> None:
    from lumir_auth.api import policy
    from lumir_auth.api.v1 import REGISTRY

    policy.init_app(app)
    mount_blueprints(app, app.config.get("API_BASE_PREFIX", ""), REGISTRY)


__all__ = ["init_app", "mount_blueprints"]
