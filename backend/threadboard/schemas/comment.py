"""Comment request schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from threadboard.services.comments.dto import CommentIn


class CommentCreateSchema(Schema):
    """Input payload for ``POST /comment``."""

    content = fields.String(required=True, validate=validate.Length(min=1))
    post_id = fields.Integer(required=True, data_key="postId", validate=validate.Range(min=1))
    parent_id = fields.Integer(
        load_default=None, allow_none=True, data_key="parentId", validate=validate.Range(min=1)
    )

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> CommentIn:
        return CommentIn(**data)
