"""User profile endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from threadboard.api.deps import json_response, require_auth, timing, user_service
from threadboard.schemas import (
    CursorQuerySchema,
    MeSchema,
    MessageSchema,
    MyCommentSchema,
    MyPostSchema,
    ProfileUpdateSchema,
    UserPublicSchema,
)

bp = Blueprint("users", __name__)

me_schema = MeSchema()
public_schema = UserPublicSchema()
update_schema = ProfileUpdateSchema()
cursor_schema = CursorQuerySchema()
my_posts_schema = MyPostSchema(many=True)
my_comments_schema = MyCommentSchema(many=True)
message_schema = MessageSchema()


@bp.get("/me")
@require_auth
@timing
def get_me(identity):
    return json_response(me_schema.dump(user_service().get_me(identity)))


@bp.patch("/me")
@require_auth
@timing
def update_me(identity):
    """Update name and nickname of the caller."""

    dto = update_schema.load(request.get_json(silent=True) or {})
    result = user_service().update_me(identity, dto)
    return json_response(message_schema.dump(result))


@bp.delete("/me")
@require_auth
@timing
def delete_me(identity):
    """Soft-delete the caller's account; their tokens stop working."""

    result = user_service().delete_me(identity)
    return json_response(message_schema.dump(result))


@bp.get("/me/posts")
@require_auth
@timing
def my_posts(identity):
    args = cursor_schema.load(request.args)
    items = user_service().list_my_posts(identity, cursor=args["cursor"])
    return json_response(my_posts_schema.dump(items))


@bp.get("/me/comments")
@require_auth
@timing
def my_comments(identity):
    args = cursor_schema.load(request.args)
    items = user_service().list_my_comments(identity, cursor=args["cursor"])
    return json_response(my_comments_schema.dump(items))


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int, identity):
    """Public profile of any live user, for signed-in callers."""

    return json_response(public_schema.dump(user_service().get_user(user_id)))
