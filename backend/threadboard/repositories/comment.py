"""Comment repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from threadboard.models.base import RecordState
from threadboard.models.comment import Comment
from threadboard.models.user import User
from threadboard.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Persistence-only repository for :class:`Comment`."""

    model = Comment

    def get_active(self, comment_id: int) -> Comment | None:
        stmt = self._live(select(Comment).where(Comment.id == comment_id))
        return cast(Comment | None, self.session.execute(stmt).scalars().first())

    def list_thread(self, post_id: int) -> list[Comment]:
        """Live comments of a post written by live authors, oldest first.

        ``id`` breaks ties between comments created within the same clock tick.
        """
        stmt = (
            self._live(select(Comment).where(Comment.post_id == post_id))
            .join(User, Comment.author_id == User.id)
            .where(User.state == RecordState.ACTIVE)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def is_live_owned(self, comment_id: int, author_id: int) -> bool:
        stmt = self._live(
            select(Comment.id).where(Comment.id == comment_id, Comment.author_id == author_id)
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def list_by_author(
        self, author_id: int, *, cursor: int | None = None, limit: int = 10
    ) -> list[Comment]:
        """Keyset page of an author's live comments, newest first."""
        stmt = self._live(select(Comment).where(Comment.author_id == author_id))
        if cursor is not None:
            stmt = stmt.where(Comment.id < cursor)
        stmt = stmt.order_by(Comment.id.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars().all())
