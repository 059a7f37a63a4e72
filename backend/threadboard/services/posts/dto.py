# threadboard/services/posts/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class FileIn:
    """
    Attachment metadata supplied by the client. The URL is opaque.

    :param size: Byte size; ``None`` or negative values are stored as ``0``.
    """

    url: str
    original_name: str
    mime_type: str
    size: int | None = None


@dataclass(frozen=True, slots=True)
class PostIn:
    """
    Input DTO shared by post creation and full replacement.

    :param files: The complete attachment set (replaces existing ones on update).
    """

    title: str
    content: str
    files: tuple[FileIn, ...] = ()


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorOut:
    id: int
    nickname: str


@dataclass(frozen=True, slots=True)
class AuthorNameOut:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class FileOut:
    url: str
    original_name: str
    mime_type: str
    size: int


@dataclass(frozen=True, slots=True)
class StatsOut:
    post_id: int
    view_count: int
    like_count: int
    comment_count: int


@dataclass(slots=True)
class CommentNode:
    """
    One comment in a displayed thread. ``children`` is filled while the tree
    is assembled, oldest reply first.
    """

    id: int
    content: str
    created_at: datetime
    parent_id: int | None
    author: AuthorOut
    children: list[CommentNode] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PostDetailOut:
    id: int
    title: str
    content: str
    created_at: datetime
    author: AuthorOut
    files: list[FileOut]
    stats: StatsOut
    comments: list[CommentNode]


@dataclass(frozen=True, slots=True)
class PostListItemOut:
    id: int
    title: str
    author: AuthorNameOut


@dataclass(frozen=True, slots=True)
class PostSearchHitOut:
    id: int
    title: str
    created_at: datetime
    author: AuthorOut
