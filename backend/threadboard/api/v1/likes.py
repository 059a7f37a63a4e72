"""Like endpoints."""

from __future__ import annotations

from flask import Blueprint

from threadboard.api.deps import json_response, like_service, require_auth, timing
from threadboard.schemas import MessageSchema

bp = Blueprint("likes", __name__)

message_schema = MessageSchema()


@bp.post("/<int:post_id>")
@require_auth
@timing
def like_post(post_id: int, identity):
    result = like_service().like(identity, post_id)
    return json_response(message_schema.dump(result), status=201)


@bp.delete("/<int:post_id>")
@require_auth
@timing
def unlike_post(post_id: int, identity):
    result = like_service().unlike(identity, post_id)
    return json_response(message_schema.dump(result))
