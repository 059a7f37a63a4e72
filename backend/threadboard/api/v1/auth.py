"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from threadboard.api.deps import auth_service, json_response, require_auth, timing
from threadboard.schemas import (
    LoginSchema,
    MessageSchema,
    RefreshTokenSchema,
    SignUpSchema,
    TokenPairSchema,
)

bp = Blueprint("auth", __name__)

signup_schema = SignUpSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
token_schema = TokenPairSchema()
message_schema = MessageSchema()


@bp.post("/signup")
@timing
def signup():
    """Register a new account (or revive a deleted one with the same email)."""

    dto = signup_schema.load(request.get_json(silent=True) or {})
    result = auth_service().sign_up(dto)
    return json_response(message_schema.dump(result), status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    dto = login_schema.load(request.get_json(silent=True) or {})
    pair = auth_service().login(dto)
    return json_response(token_schema.dump(pair))


@bp.post("/logout")
@require_auth
@timing
def logout(identity):
    result = auth_service().logout(identity)
    return json_response(message_schema.dump(result))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token and issue a fresh access token."""

    dto = refresh_schema.load(request.get_json(silent=True) or {})
    pair = auth_service().reissue_token(dto)
    return json_response(token_schema.dump(pair))
