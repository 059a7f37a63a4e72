"""JSON logging for the API.

Every record is a single JSON line on stdout. Records emitted while a request
is being served carry its correlation id, which is read from the inbound
``X-Request-ID``/``X-Correlation-ID`` header (when it looks sane) or minted
here, and echoed back on the response.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, current_app, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Client-supplied ids are echoed into logs; keep them short and printable
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# Attributes passed through ``extra=`` that end up in the JSON line
EXTRA_KEYS = (
    "method",
    "path",
    "status",
    "elapsed_ms",
    "endpoint",
    "user_id",
    "post_id",
    "comment_id",
)

access_log = logging.getLogger("threadboard.access")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        line: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        line.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on each record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _inbound_request_id() -> str | None:
    for header in INBOUND_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if _SAFE_ID.match(value):
            return value
    return None


def ensure_request_id() -> str:
    """Return the correlation id of the current request, creating it once.

    Outside a request context a throwaway id is returned.
    """
    if not has_request_context():
        return uuid4().hex
    request_id = g.get("request_id")
    if request_id is None:
        request_id = _inbound_request_id() or uuid4().hex
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send every logger through one JSON handler on stdout at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Hook request correlation and the optional access log into ``app``."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _start_request() -> None:  # pragma: no cover - integration glue
        # ``g`` outlives the request when an app context was already pushed
        g.pop("request_id", None)
        g.request_started = time.perf_counter()
        ensure_request_id()

    @app.after_request
    def _finish_request(response: Response) -> Response:  # pragma: no cover - integration glue
        response.headers[REQUEST_ID_HEADER] = ensure_request_id()
        if current_app.config.get("LOG_REQUESTS"):
            started = g.get("request_started")
            access_log.info(
                "request.completed",
                extra={
                    "method": request.method,
                    "path": request.path,
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2)
                    if started is not None
                    else None,
                },
            )
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "REQUEST_ID_HEADER"]
