"""User profile schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from threadboard.services.users.dto import ProfileUpdateIn


class ProfileUpdateSchema(Schema):
    """Input payload for ``PATCH /user/me``."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    nickname = fields.String(required=True, validate=validate.Length(min=2, max=50))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> ProfileUpdateIn:
        return ProfileUpdateIn(**data)


class MeSchema(Schema):
    email = fields.Email(required=True)
    name = fields.String(required=True)
    nickname = fields.String(required=True)


class UserPublicSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)
    nickname = fields.String(required=True)


class MyPostSchema(Schema):
    id = fields.Integer(required=True)
    title = fields.String(required=True)


class MyCommentSchema(Schema):
    id = fields.Integer(required=True)
    content = fields.String(required=True)
    post_id = fields.Integer(required=True, data_key="postId")
