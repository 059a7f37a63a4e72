"""Comments with an optional parent on the same post."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadboard.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class Comment(PKMixin, TimestampMixin, SoftDeleteMixin, ReprMixin, db.Model):
    """
    A comment on a post, optionally replying to another comment.

    Notes
    -----
    ``parent_id`` is a plain back-reference. Threads are assembled from a flat
    list keyed by id, never by walking a children relationship.
    """

    __tablename__ = "comments"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("comments.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_comments_post_id_state", "post_id", "state"),
        Index("ix_comments_author_id_state_id", "author_id", "state", "id"),
    )

    post: Mapped[Post] = relationship("Post", back_populates="comments")
    author: Mapped[User] = relationship("User", back_populates="comments", lazy="joined")
