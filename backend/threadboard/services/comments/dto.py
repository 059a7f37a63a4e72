from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommentIn:
    """
    Input DTO for a new comment.

    :param parent_id: Comment being replied to; must be live and on the same post.
    """

    content: str
    post_id: int
    parent_id: int | None = None
