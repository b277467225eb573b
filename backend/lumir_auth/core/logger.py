"""JSON logging with request correlation and an access log line per request.

Every record is rendered as one JSON object on stdout. Records emitted while a
request is being served carry its ``request_id``; diagnostics raised by the
service layer add their ``at`` location tag through ``extra={"at": ...}``.
Bearer and refresh tokens are never logged.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
#: Inbound headers accepted as a correlation id, in order of preference
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

#: ``extra={...}`` attributes promoted to top-level JSON keys
PROMOTED_ATTRS = ("at", "status", "method", "path", "endpoint", "elapsed_ms")

access_log = logging.getLogger("lumir_auth.access")


class JSONFormatter(logging.Formatter):
    """Serialize a record to a single-line JSON document."""

    def format(self, record: logging.LogRecord) -> str:
        doc: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        doc.update(
            {attr: getattr(record, attr) for attr in PROMOTED_ATTRS if hasattr(record, attr)}
        )
        if record.exc_info:
            doc["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(doc, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Return the correlation id of the current request.

    The first call per request adopts an inbound ``X-Request-ID`` (or
    ``X-Correlation-ID``) header, or mints a UUID4; later calls reuse it.
    Outside a request a throwaway id is returned.
    """
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current:
        return current
    inbound = next(
        (request.headers[name] for name in INBOUND_ID_HEADERS if request.headers.get(name)),
        None,
    )
    g.request_id = inbound or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Route the root logger to stdout through :class:`JSONFormatter`."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    # The access log below replaces werkzeug's per-request line
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def init_app(app: Flask) -> None:
    """Seed the request id, echo it on responses and emit one access line."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _start_request() -> None:
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        access_log.info(
            "%s %s -> %s",
            request.method,
            request.path,
            response.status_code,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "endpoint": request.endpoint,
                "elapsed_ms": elapsed_ms,
            },
        )
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
