"""RFC 7807 (``application/problem+json``) error responses for the API.

Service errors, schema validation failures, database faults and Werkzeug
HTTP exceptions all leave the app through :func:`problem_response`, so
clients only ever see one error shape:

.. code-block:: json

    {"type": "about:blank", "title": "Unauthorized", "status": 401,
     "detail": "Refresh token mismatch", "code": "unauthorized",
     "instance": "/api/v1/auth/refresh-token", "request_id": "..."}
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from threadboard.core.logger import ensure_request_id
from threadboard.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalServiceError,
    NotFoundError,
    ServiceError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# First match wins; any other ServiceError is a plain bad request.
# Conflicts are reported as 400 by the public contract.
SERVICE_ERROR_STATUS: tuple[tuple[type[ServiceError], HTTPStatus, str], ...] = (
    (NotFoundError, HTTPStatus.NOT_FOUND, "not_found"),
    (ConflictError, HTTPStatus.BAD_REQUEST, "conflict"),
    (AuthenticationError, HTTPStatus.UNAUTHORIZED, "unauthorized"),
    (AuthorizationError, HTTPStatus.FORBIDDEN, "forbidden"),
    (InternalServiceError, HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error"),
)

HTTP_STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_server_error",
    503: "service_unavailable",
}


def classify_service_error(exc: ServiceError) -> tuple[HTTPStatus, str]:
    """Return the HTTP status and stable error code for a service error."""
    for error_type, status, code in SERVICE_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status, code
    return HTTPStatus.BAD_REQUEST, "bad_request"


def problem_response(
    status: int,
    code: str,
    detail: str,
    *,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """Build a problem+json response tagged with the request id."""
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": detail,
        "code": code,
        "instance": request.path,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    response = jsonify(problem)
    response.mimetype = PROBLEM_MIMETYPE
    return response, int(status)


def init_app(app: Flask) -> None:
    """Register the problem+json handlers on ``app``.

    4xx outcomes are logged as warnings, 5xx as errors with traceback.
    Internal details (SQL, driver messages, tracebacks) never reach clients.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status, code = classify_service_error(err)
        detail = str(err) or status.phrase
        if status >= 500:
            log.error("service.failed: %s", detail, exc_info=err.__cause__ is not None)
        else:
            log.warning("service.rejected: code=%s detail=%s", code, detail)
        return problem_response(status, code, detail)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("request.invalid: fields=%s", sorted(_field_names(err.messages)))
        return problem_response(
            HTTPStatus.BAD_REQUEST,
            "validation_error",
            "Validation failed",
            details={"errors": err.messages},
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or HTTPStatus.INTERNAL_SERVER_ERROR
        code = HTTP_STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or code.replace("_", " ")).strip()
        log.warning("http.error: status=%s detail=%s", status, detail)
        return problem_response(status, code, detail)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("db.integrity_error", exc_info=True)
        return problem_response(HTTPStatus.BAD_REQUEST, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("db.unavailable", exc_info=True)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled.exception", exc_info=True)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )


def _field_names(messages: Any) -> list[str]:
    if isinstance(messages, dict):
        return [str(k) for k in messages]
    return []
