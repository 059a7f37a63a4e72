"""Shared API helpers for authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

import jwt
from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException, NoAuthorizationError

from threadboard.infra.jwt import JWTTokenProvider
from threadboard.services._shared.errors import AuthenticationError
from threadboard.services.auth import AccessGuard, AuthService
from threadboard.services.comments import CommentService
from threadboard.services.likes import LikeService
from threadboard.services.posts import PostService
from threadboard.services.users import UserService

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Verify the bearer access token and inject ``identity`` into the view.

    Signature, expiry and token-type checks are delegated to
    flask-jwt-extended; :class:`AccessGuard` then confirms the user is live.
    Every failure surfaces as :class:`AuthenticationError` (HTTP 401).
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            verify_jwt_in_request(optional=False)
        except NoAuthorizationError as exc:
            raise AuthenticationError("Access token is missing") from exc
        except (JWTExtendedException, jwt.PyJWTError) as exc:
            raise AuthenticationError("Access token is invalid") from exc
        claims = get_jwt() or {}
        kwargs["identity"] = AccessGuard().resolve(get_jwt_identity(), claims.get("email"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Service builders
# --------------------------------------------------------------------------- #


def auth_service() -> AuthService:
    return AuthService(token_provider=JWTTokenProvider())


def user_service() -> UserService:
    return UserService(page_size=int(current_app.config.get("POST_PAGE_SIZE", 10)))


def post_service() -> PostService:
    return PostService(
        page_size=int(current_app.config.get("POST_PAGE_SIZE", 10)),
        max_files=int(current_app.config.get("MAX_POST_FILES", 10)),
    )


def comment_service() -> CommentService:
    return CommentService()


def like_service() -> LikeService:
    return LikeService()


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator logging handler execution time in milliseconds.

    Guarded views receive ``identity`` from :func:`require_auth`; its id is
    added to the log line.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            identity = kwargs.get("identity")
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": getattr(request, "endpoint", None),
                    "elapsed_ms": round(elapsed_ms, 2),
                    "user_id": getattr(identity, "id", None),
                },
            )

    return wrapper  # type: ignore[return-value]
