"""Post endpoints: CRUD, the caller's feed and search."""

from __future__ import annotations

from flask import Blueprint, request

from threadboard.api.deps import json_response, post_service, require_auth, timing
from threadboard.schemas import (
    CreatedSchema,
    MessageSchema,
    PostDetailSchema,
    PostListItemSchema,
    PostListQuerySchema,
    PostSearchHitSchema,
    PostSearchQuerySchema,
    PostWriteSchema,
)

bp = Blueprint("posts", __name__)

write_schema = PostWriteSchema()
detail_schema = PostDetailSchema()
list_query_schema = PostListQuerySchema()
list_item_schema = PostListItemSchema(many=True)
search_query_schema = PostSearchQuerySchema()
search_hit_schema = PostSearchHitSchema(many=True)
created_schema = CreatedSchema()
message_schema = MessageSchema()


@bp.post("")
@require_auth
@timing
def create_post(identity):
    """Create a post with its attachments and a zeroed stats row."""

    dto = write_schema.load(request.get_json(silent=True) or {})
    result = post_service().create_post(identity, dto)
    return json_response(created_schema.dump(result), status=201)


@bp.get("/<int:post_id>")
@require_auth
@timing
def get_post(post_id: int, identity):
    """Post detail with its comment tree; counts one view."""

    return json_response(detail_schema.dump(post_service().get_post(post_id)))


@bp.patch("/<int:post_id>")
@require_auth
@timing
def update_post(post_id: int, identity):
    dto = write_schema.load(request.get_json(silent=True) or {})
    result = post_service().update_post(identity, post_id, dto)
    return json_response(message_schema.dump(result))


@bp.delete("/<int:post_id>")
@require_auth
@timing
def delete_post(post_id: int, identity):
    result = post_service().delete_post(identity, post_id)
    return json_response(message_schema.dump(result))


@bp.get("/list/posts")
@require_auth
@timing
def list_posts(identity):
    """Keyset page of the caller's posts, by id or by like count."""

    args = list_query_schema.load(request.args)
    items = post_service().list_posts(identity, sort_by=args["sort_by"], cursor=args["cursor"])
    return json_response({"posts": list_item_schema.dump(items)})


@bp.get("/search")
@require_auth
@timing
def search_posts(identity):
    args = search_query_schema.load(request.args)
    hits = post_service().search_posts(args["query"], args["type"])
    return json_response(search_hit_schema.dump(hits))
