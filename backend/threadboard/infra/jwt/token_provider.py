# threadboard/infra/jwt/token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt
from flask import current_app
from flask_jwt_extended import create_access_token as _create_access

from threadboard.services._shared.errors import InvalidTokenError, TokenConfigurationError
from threadboard.services._shared.ports import RefreshClaims, TokenProvider

REFRESH_TOKEN_TYPE = "refresh"
ALGORITHM = "HS256"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter issuing access tokens through Flask-JWT-Extended and refresh
    tokens through PyJWT.

    Access tokens are signed with ``JWT_SECRET_KEY`` (mirrored from
    ``ACCESS_TOKEN_SECRET``) so ``verify_jwt_in_request`` can check them.
    Refresh tokens use the separate ``REFRESH_TOKEN_SECRET``.

    .. note::
       Requires an active Flask app context.
    """

    def create_access_token(self, *, user_id: int, email: str) -> str:
        if not current_app.config.get("JWT_SECRET_KEY"):
            raise TokenConfigurationError("Access token secret is not configured")
        return cast(
            str,
            _create_access(identity=str(user_id), additional_claims={"email": email}),
        )

    def create_refresh_token(self, *, user_id: int, email: str) -> str:
        now = datetime.now(UTC)
        lifetime = cast(timedelta, current_app.config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=7)))
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "type": REFRESH_TOKEN_TYPE,
            # unique per issue, so a rotation within the same second still differs
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, self._refresh_secret(), algorithm=ALGORITHM)

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        secret = self._refresh_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

        subject = payload.get("sub")
        if payload.get("type") != REFRESH_TOKEN_TYPE or not str(subject).isdigit():
            raise InvalidTokenError("Invalid token")
        return RefreshClaims(user_id=int(subject), email=str(payload.get("email", "")))

    @staticmethod
    def _refresh_secret() -> str:
        secret = current_app.config.get("REFRESH_TOKEN_SECRET")
        if not secret:
            raise TokenConfigurationError("Refresh token secret is not configured")
        return cast(str, secret)
