"""Comment endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from threadboard.api.deps import comment_service, json_response, require_auth, timing
from threadboard.schemas import CommentCreateSchema, CreatedSchema, MessageSchema

bp = Blueprint("comments", __name__)

create_schema = CommentCreateSchema()
created_schema = CreatedSchema()
message_schema = MessageSchema()


@bp.post("")
@require_auth
@timing
def create_comment(identity):
    """Comment on a post, optionally replying to another comment."""

    dto = create_schema.load(request.get_json(silent=True) or {})
    result = comment_service().create_comment(identity, dto)
    return json_response(created_schema.dump(result), status=201)


@bp.delete("/<int:comment_id>")
@require_auth
@timing
def delete_comment(comment_id: int, identity):
    result = comment_service().delete_comment(identity, comment_id)
    return json_response(message_schema.dump(result))
