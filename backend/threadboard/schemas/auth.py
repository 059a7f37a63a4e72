"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from threadboard.services.auth.dto import LoginIn, RefreshIn, SignUpIn


class SignUpSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    nickname = fields.String(required=True, validate=validate.Length(min=2, max=50))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> SignUpIn:
        return SignUpIn(**data)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class RefreshTokenSchema(Schema):
    """Input payload for token reissue."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class TokenPairSchema(Schema):
    """Response payload containing both tokens."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
