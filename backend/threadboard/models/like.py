"""Like rows: at most one per (user, post)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadboard.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class Like(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    __tablename__ = "likes"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_likes_user_id_post_id"),)

    user: Mapped[User] = relationship("User", back_populates="likes")
    post: Mapped[Post] = relationship("Post", back_populates="likes")
