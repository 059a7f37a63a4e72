"""Converters from ORM rows to post DTOs."""

from __future__ import annotations

from collections.abc import Iterable

from threadboard.models.comment import Comment
from threadboard.models.file import File
from threadboard.models.post import Post
from threadboard.services.posts.dto import (
    AuthorNameOut,
    AuthorOut,
    CommentNode,
    FileOut,
    PostListItemOut,
    PostSearchHitOut,
)


def normalize_size(size: int | None) -> int:
    """Missing or negative sizes are stored as zero."""
    if size is None or size < 0:
        return 0
    return int(size)


def to_file_out(file: File) -> FileOut:
    return FileOut(
        url=file.url,
        original_name=file.original_name,
        mime_type=file.mime_type,
        size=file.size,
    )


def to_list_item(post: Post) -> PostListItemOut:
    return PostListItemOut(
        id=post.id,
        title=post.title,
        author=AuthorNameOut(id=post.author.id, name=post.author.name),
    )


def to_search_hit(post: Post) -> PostSearchHitOut:
    return PostSearchHitOut(
        id=post.id,
        title=post.title,
        created_at=post.created_at,
        author=AuthorOut(id=post.author.id, nickname=post.author.nickname),
    )


def build_comment_tree(comments: Iterable[Comment]) -> list[CommentNode]:
    """
    Assemble a flat, oldest-first comment list into threads.

    Nodes are indexed by id first, then each one is attached under its
    parent. A comment whose parent is not in the list (never existed, was
    deleted, or its author was) becomes a root. Input order is preserved for
    roots and within every ``children`` list.
    """
    nodes: dict[int, CommentNode] = {}
    for c in comments:
        nodes[c.id] = CommentNode(
            id=c.id,
            content=c.content,
            created_at=c.created_at,
            parent_id=c.parent_id,
            author=AuthorOut(id=c.author.id, nickname=c.author.nickname),
        )

    roots: list[CommentNode] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots
