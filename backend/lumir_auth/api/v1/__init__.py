"""Version 1 resources and where they are mounted."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .health import bp as health_bp
from .mail import bp as mail_bp
from .users import bp as users_bp

API_VERSION = "v1"

#: ``(blueprint, prefix)`` pairs; the version segment follows the resource name
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, f"/auth/{API_VERSION}"),
    (users_bp, f"/user/{API_VERSION}"),
    (mail_bp, f"/mail/{API_VERSION}"),
]
