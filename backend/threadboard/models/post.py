"""Post aggregate: the post row and its denormalized counters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadboard.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .comment import Comment
    from .file import File
    from .like import Like
    from .user import User


class Post(PKMixin, TimestampMixin, SoftDeleteMixin, ReprMixin, db.Model):
    """
    Authored content with attachments and exactly one stats row.

    Notes
    -----
    - Files are owned (``delete-orphan``); replacing ``files`` drops old rows.
    - Soft-deleting a post leaves its comments and files untouched.
    """

    __tablename__ = "posts"

    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_posts_author_id_state_id", "author_id", "state", "id"),)

    # Relationships
    author: Mapped[User] = relationship("User", back_populates="posts", lazy="joined")
    files: Mapped[list[File]] = relationship(
        "File",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="File.id",
        lazy="selectin",
    )
    stats: Mapped[PostStats | None] = relationship(
        "PostStats",
        back_populates="post",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="post", passive_deletes=True, lazy="select"
    )
    likes: Mapped[list[Like]] = relationship(
        "Like", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )


class PostStats(PKMixin, ReprMixin, db.Model):
    """
    Denormalized view/like/comment counters, one row per post.

    Counters are changed only through
    :meth:`threadboard.repositories.post.PostStatsRepository.increment`, which
    issues an in-database ``col = col + n`` update.
    """

    __tablename__ = "post_stats"

    COUNTERS = ("view_count", "like_count", "comment_count")

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    comment_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        UniqueConstraint("post_id", name="uq_post_stats_post_id"),
        Index("ix_post_stats_like_count_post_id", "like_count", "post_id"),
    )

    post: Mapped[Post] = relationship("Post", back_populates="stats")
