"""Centralized JSON error handling for the API.

Every error response carries the same minimal body::

    {"statusCode": 401, "timestamp": "2026-01-01T00:00:00.000+00:00", "path": "/auth/v1/signout"}

Validation failures additionally expose an ``errors`` list of
``{"field", "message"}`` pairs. The diagnostic ``message`` and ``at`` location
tag of an error are written to the log only.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from lumir_auth.core.logger import ensure_request_id
from lumir_auth.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    InternalServiceError,
    ServiceError,
)

log = logging.getLogger(__name__)


def _error_body(status: int, errors: list[dict[str, str]] | None = None) -> dict[str, Any]:
    """
    Build the client-facing error payload.

    :param status: HTTP status code.
    :param errors: Optional field-level validation errors.
    :returns: JSON-serializable dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {
        "statusCode": status,
        "timestamp": datetime.now(UTC).isoformat(timespec="milliseconds"),
        "path": request.path,
    }
    if errors:
        body["errors"] = errors
    return body


def _error_response(
    status: int, errors: list[dict[str, str]] | None = None
) -> tuple[Response, int]:
    resp = jsonify(_error_body(status, errors))
    resp.headers.setdefault("X-Request-ID", ensure_request_id())
    return resp, status


def flatten_validation_messages(messages: Any, prefix: str = "") -> list[dict[str, str]]:
    """
    Flatten marshmallow's nested ``messages`` mapping into ``{field, message}`` rows.

    :param messages: ``ValidationError.messages`` (dict, list or str).
    :param prefix: Dotted path of the parent field.
    :returns: One row per message, preserving declaration order.
    :rtype: list[dict[str, str]]
    """
    rows: list[dict[str, str]] = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            rows.extend(flatten_validation_messages(value, field))
    elif isinstance(messages, list | tuple):
        for value in messages:
            rows.extend(flatten_validation_messages(value, prefix))
    else:
        rows.append({"field": prefix or "_schema", "message": str(messages)})
    return rows


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Diagnostic description, logged but never returned to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    at : str | None, optional
        Machine-readable location tag (``"AuthService.sign_in"``).
    errors : list[dict[str, str]] | None, optional
        Field-level validation errors included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        *,
        at: str | None = None,
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.at = at
        self.errors = errors or []


class BadRequest(APIError):
    """400 for malformed input and domain rule violations."""

    def __init__(self, message: str = "Bad request", *, at: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, at=at)


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized", *, at: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, at=at)


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden", *, at: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, at=at)


class InternalServerError(APIError):
    """500 for collaborator faults."""

    def __init__(self, message: str = "Internal error", *, at: str | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR, at=at)


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Map a framework-free service error onto its HTTP counterpart.

    :param exc: Error raised by the service layer.
    :returns: API error carrying the same message and location tag.
    :rtype: APIError
    """
    if isinstance(exc, AuthenticationError):
        return Unauthorized(str(exc), at=exc.at)
    if isinstance(exc, AuthorizationError):
        return Forbidden(str(exc), at=exc.at)
    if isinstance(exc, InternalServiceError):
        return InternalServerError(str(exc), at=exc.at)
    # Credential failures, duplicates and policy violations are bad requests
    return BadRequest(str(exc), at=exc.at)


def _log_api_error(err: APIError) -> None:
    extra = {"at": err.at, "status": err.status_code, "path": request.path}
    if err.status_code >= 500:
        log.error("%s", err.message, extra=extra, exc_info=err.__cause__ is not None)
    else:
        log.warning("%s", err.message, extra=extra)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings, 5xx as errors with traceback.
    - Raw database and library messages never reach the client.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log_api_error(err)
        return _error_response(err.status_code, err.errors or None)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        api_err = translate_service_error(err)
        api_err.__cause__ = err.__cause__
        _log_api_error(api_err)
        return _error_response(api_err.status_code)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        rows = flatten_validation_messages(err.messages)
        log.warning(
            "Validation failed: %s",
            ", ".join(f"{r['field']}: {r['message']}" for r in rows),
            extra={"at": request.endpoint, "status": 400, "path": request.path},
        )
        return _error_response(HTTPStatus.BAD_REQUEST, rows)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        level = log.error if status >= 500 else log.warning
        level(
            "%s",
            (err.description or HTTPStatus(status).phrase).strip(),
            extra={"status": status, "path": request.path},
        )
        return _error_response(status)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        # Do not leak raw DB error to clients
        log.error(
            "Database error",
            extra={"at": request.endpoint, "status": 500, "path": request.path},
            exc_info=True,
        )
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error(
            "Unhandled exception",
            extra={"at": request.endpoint, "status": 500, "path": request.path},
            exc_info=True,
        )
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR)
