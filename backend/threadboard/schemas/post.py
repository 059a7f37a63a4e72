"""Post request/response schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate

from threadboard.models.file import ALLOWED_MIME_TYPES
from threadboard.repositories.post import SEARCH_TYPES
from threadboard.services.posts.dto import FileIn, PostIn

# ------------------------------- Input ---------------------------------------


class FileSchema(Schema):
    """Attachment metadata; the URL is stored as given."""

    url = fields.String(required=True, validate=validate.Length(min=1, max=2048))
    original_name = fields.String(
        required=True, data_key="originalName", validate=validate.Length(min=1, max=255)
    )
    mime_type = fields.String(
        required=True,
        data_key="mimeType",
        validate=validate.OneOf(sorted(ALLOWED_MIME_TYPES), error="MIME type not allowed."),
    )
    # negative sizes are accepted and stored as 0
    size = fields.Integer(load_default=None, allow_none=True)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> FileIn:
        return FileIn(**data)


class PostWriteSchema(Schema):
    """Input payload for creating or replacing a post."""

    title = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, max=255),
            validate.Regexp(r"^[^<>]+$", error="Markup characters are not allowed."),
        ],
    )
    content = fields.String(required=True, validate=validate.Length(min=1))
    files = fields.List(fields.Nested(FileSchema), load_default=list)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PostIn:
        return PostIn(title=data["title"], content=data["content"], files=tuple(data["files"]))


class PostListQuerySchema(Schema):
    sort_by = fields.String(
        load_default="id", data_key="sortBy", validate=validate.OneOf(["id", "like"])
    )
    cursor = fields.Integer(load_default=None, validate=validate.Range(min=1))


class PostSearchQuerySchema(Schema):
    query = fields.String(required=True, validate=validate.Length(min=1, max=100))
    type = fields.String(required=True, validate=validate.OneOf(SEARCH_TYPES))


# ------------------------------- Output --------------------------------------


class AuthorSchema(Schema):
    id = fields.Integer(required=True)
    nickname = fields.String(required=True)


class AuthorNameSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)


class FileOutSchema(Schema):
    url = fields.String()
    original_name = fields.String(data_key="originalName")
    mime_type = fields.String(data_key="mimeType")
    size = fields.Integer()


class StatsSchema(Schema):
    post_id = fields.Integer(data_key="postId")
    view_count = fields.Integer(data_key="viewCount")
    like_count = fields.Integer(data_key="likeCount")
    comment_count = fields.Integer(data_key="commentCount")


class CommentNodeSchema(Schema):
    id = fields.Integer()
    content = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    parent_id = fields.Integer(allow_none=True, data_key="parentId")
    author = fields.Nested(AuthorSchema)
    children = fields.List(fields.Nested(lambda: CommentNodeSchema()))


class PostDetailSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    content = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    author = fields.Nested(AuthorSchema)
    files = fields.List(fields.Nested(FileOutSchema))
    stats = fields.Nested(StatsSchema)
    comments = fields.List(fields.Nested(CommentNodeSchema))


class PostListItemSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    author = fields.Nested(AuthorNameSchema)


class PostSearchHitSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    author = fields.Nested(AuthorSchema)
